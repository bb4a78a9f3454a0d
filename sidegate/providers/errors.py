"""Single seam mapping provider-specific failures onto `ErrorKind`.

Adapters hand whatever went wrong (an HTTP response, a transport exception, an
SMTP exception, a processor error object) to `translate_failure`. The mapping
is pure: the same raw failure always yields the same canonical error.
"""

import smtplib
from dataclasses import dataclass, field
from typing import Any

import httpx

from sidegate.common.errors import GENERIC_INTERNAL_MESSAGE, ErrorKind, GatewayError


MAX_CAUSE_LENGTH = 1000


@dataclass(frozen=True)
class PaymentApiFailure:
    """Error object returned by the payment processor on a non-2xx reply."""

    status_code: int
    code: str | None = None
    description: str | None = None
    body: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "PaymentApiFailure":
        try:
            body = response.json()
        except ValueError:
            return cls(status_code=response.status_code, description=response.text)
        error = body.get("error") if isinstance(body, dict) else None
        if not isinstance(error, dict):
            return cls(status_code=response.status_code, description=response.text)
        return cls(
            status_code=response.status_code,
            code=error.get("code"),
            description=error.get("description"),
            body=body,
        )


def _clip(text: str | None) -> str | None:
    if text is None:
        return None
    return text[:MAX_CAUSE_LENGTH]


def _from_http_response(provider: str, response: httpx.Response) -> GatewayError:
    return GatewayError(
        ErrorKind.PROVIDER_REJECTED,
        f"{provider} rejected the request with status {response.status_code}",
        cause=_clip(response.text),
        reason=f"http_{response.status_code}",
        provider=provider,
    )


def _from_payment_failure(provider: str, failure: PaymentApiFailure) -> GatewayError:
    if failure.status_code == 429:
        reason = "rate_limited"
    elif failure.status_code == 401:
        reason = "http_401"
    else:
        reason = failure.code or f"http_{failure.status_code}"
    if failure.status_code >= 500:
        return GatewayError(
            ErrorKind.PROVIDER_UNAVAILABLE,
            f"{provider} is unavailable",
            cause=_clip(failure.description),
            reason=reason,
            provider=provider,
        )
    return GatewayError(
        ErrorKind.PROVIDER_REJECTED,
        f"{provider} rejected the order with status {failure.status_code}",
        cause=_clip(failure.description),
        reason=reason,
        provider=provider,
    )


def _from_transport(provider: str, exc: httpx.TransportError) -> GatewayError:
    reason = "timeout" if isinstance(exc, httpx.TimeoutException) else "connection_failed"
    return GatewayError(
        ErrorKind.PROVIDER_UNAVAILABLE,
        f"{provider} is unavailable",
        cause=_clip(f"{type(exc).__name__}: {exc}"),
        reason=reason,
        provider=provider,
    )


def _from_smtp(provider: str, exc: Exception) -> GatewayError:
    cause = _clip(f"{type(exc).__name__}: {exc}")
    # Order matters: the smtplib hierarchy nests response errors under SMTPException.
    if isinstance(exc, smtplib.SMTPAuthenticationError):
        return GatewayError(
            ErrorKind.PROVIDER_REJECTED,
            f"{provider} rejected the sender credentials",
            cause=cause,
            reason="authentication_failed",
            provider=provider,
        )
    if isinstance(exc, (smtplib.SMTPServerDisconnected, smtplib.SMTPConnectError)):
        return GatewayError(
            ErrorKind.PROVIDER_UNAVAILABLE,
            f"{provider} is unavailable",
            cause=cause,
            reason="connection_failed",
            provider=provider,
        )
    if isinstance(exc, smtplib.SMTPRecipientsRefused):
        reason = "recipients_refused"
    elif isinstance(exc, smtplib.SMTPSenderRefused):
        reason = "sender_refused"
    elif isinstance(exc, smtplib.SMTPDataError):
        reason = "data_refused"
    else:
        reason = "smtp_error"
    return GatewayError(
        ErrorKind.PROVIDER_REJECTED,
        f"{provider} refused the message",
        cause=cause,
        reason=reason,
        provider=provider,
    )


def translate_failure(provider: str, raw: Any) -> GatewayError:
    """Map one raw provider failure onto a canonical `GatewayError`."""

    if isinstance(raw, GatewayError):
        return raw
    if isinstance(raw, PaymentApiFailure):
        return _from_payment_failure(provider, raw)
    if isinstance(raw, httpx.Response):
        return _from_http_response(provider, raw)
    if isinstance(raw, httpx.TransportError):
        return _from_transport(provider, raw)
    if isinstance(raw, smtplib.SMTPException):
        return _from_smtp(provider, raw)
    if isinstance(raw, (TimeoutError, ConnectionError, OSError)):
        return GatewayError(
            ErrorKind.PROVIDER_UNAVAILABLE,
            f"{provider} is unavailable",
            cause=_clip(f"{type(raw).__name__}: {raw}"),
            reason="timeout" if isinstance(raw, TimeoutError) else "connection_failed",
            provider=provider,
        )
    return GatewayError(
        ErrorKind.INTERNAL,
        GENERIC_INTERNAL_MESSAGE,
        cause=_clip(f"{type(raw).__name__}: {raw}"),
        reason="unclassified",
        provider=provider,
    )
