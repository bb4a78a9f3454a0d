"""Request/result schemas exchanged between validators, services and adapters."""

from pydantic import BaseModel, Field


class VerificationRequest(BaseModel):
    """One OTP email to send; lives for a single dispatch only."""

    recipient_email: str = Field(min_length=3)
    code: str = Field(min_length=1, repr=False)
    metadata: dict[str, str] = Field(default_factory=dict)


class OrderRequest(BaseModel):
    """Validated order amount with the deployment's fixed currency."""

    amount_minor_units: int = Field(gt=0)
    currency: str = Field(min_length=3, max_length=3)


class Receipt(BaseModel):
    """Gateway-generated idempotency anchor for one order."""

    id: str


class PaymentOrder(BaseModel):
    """Exact order-creation payload sent to the payment processor."""

    amount: int = Field(gt=0)
    currency: str
    receipt: str


class DispatchResult(BaseModel):
    """Normalized outcome of one provider call."""

    success: bool
    provider_reference: str | None = None


class OrderResult(BaseModel):
    order_id: str
