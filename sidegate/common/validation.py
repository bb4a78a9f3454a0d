"""Shape checks for untrusted send_otp / create_order payloads.

Pure functions: no I/O, same input always yields the same outcome.
"""

from collections.abc import Mapping
from typing import Any

from sidegate.common.errors import invalid_input
from sidegate.common.schemas import OrderRequest, VerificationRequest


SEND_OTP = "send_otp"
CREATE_ORDER = "create_order"

# Canonical field name -> accepted wire aliases (first match wins).
SEND_OTP_FIELDS: dict[str, tuple[str, ...]] = {
    "recipientEmail": ("recipientEmail", "email"),
    "code": ("code", "otp"),
    "serviceIdentifier": ("serviceIdentifier", "service_id"),
    "templateIdentifier": ("templateIdentifier", "template_id"),
    "accountIdentifier": ("accountIdentifier", "user_id"),
}
AMOUNT_FIELDS = ("amountMinorUnits", "amount")

MISSING_SEND_OTP_MESSAGE = "Missing required fields: " + ", ".join(SEND_OTP_FIELDS)


def _lookup(raw: Mapping[str, Any], aliases: tuple[str, ...]) -> Any:
    for alias in aliases:
        if alias in raw:
            return raw[alias]
    return None


def is_plausible_email(address: str) -> bool:
    if any(ch.isspace() for ch in address) or address.count("@") != 1:
        return False
    local, domain = address.split("@")
    if not local or "." not in domain:
        return False
    return all(domain.split("."))


def validate_send_otp(raw: Mapping[str, Any]) -> VerificationRequest:
    """Require every send_otp field; report the full set when any is absent."""

    values: dict[str, str] = {}
    for name, aliases in SEND_OTP_FIELDS.items():
        value = _lookup(raw, aliases)
        if isinstance(value, str) and value.strip():
            # The code is opaque and goes out exactly as the caller sent it.
            values[name] = value if name == "code" else value.strip()
    if len(values) != len(SEND_OTP_FIELDS):
        raise invalid_input(MISSING_SEND_OTP_MESSAGE)
    if not is_plausible_email(values["recipientEmail"]):
        raise invalid_input("Invalid recipientEmail")
    return VerificationRequest(
        recipient_email=values["recipientEmail"],
        code=values["code"],
        metadata={
            "service_id": values["serviceIdentifier"],
            "template_id": values["templateIdentifier"],
            "user_id": values["accountIdentifier"],
        },
    )


def validate_create_order(raw: Mapping[str, Any], currency: str = "INR") -> OrderRequest:
    """Accept only a positive integer amount; currency comes from config."""

    amount = _lookup(raw, AMOUNT_FIELDS)
    # bool is an int subclass and must not pass as an amount.
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise invalid_input("amountMinorUnits must be a positive integer")
    if amount <= 0:
        raise invalid_input("amountMinorUnits must be a positive integer")
    return OrderRequest(amount_minor_units=amount, currency=currency)


def validate_request(raw: Any, operation: str, currency: str = "INR") -> VerificationRequest | OrderRequest:
    """Validate `raw` for the operation tag or raise an INVALID_INPUT error."""

    if not isinstance(raw, Mapping):
        raise invalid_input("Request body must be a JSON object")
    if operation == SEND_OTP:
        return validate_send_otp(raw)
    if operation == CREATE_ORDER:
        return validate_create_order(raw, currency)
    raise invalid_input(f"Unknown operation: {operation}")
