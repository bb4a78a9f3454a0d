"""Canonical error taxonomy shared by every provider and entrypoint.

Provider failures are translated into a `GatewayError` carrying one
`ErrorKind`. The `message` is always safe to return to callers; provider
detail is kept in `cause` for server-side logs only.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories used across all providers."""

    INVALID_INPUT = "invalid_input"
    PROVIDER_REJECTED = "provider_rejected"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    INTERNAL = "internal"

    @property
    def retryable(self) -> bool:
        return self is ErrorKind.PROVIDER_UNAVAILABLE

    @property
    def http_status(self) -> int:
        return 400 if self is ErrorKind.INVALID_INPUT else 500

    @property
    def callable_code(self) -> str:
        return "invalid-argument" if self is ErrorKind.INVALID_INPUT else "internal"


GENERIC_INTERNAL_MESSAGE = "Internal gateway error"


class GatewayError(Exception):
    """Canonical error raised by validators, adapters and services."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: str | None = None,
        reason: str | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause
        self.reason = reason
        self.provider = provider

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def caller_message(self) -> str:
        """Message for the response body; internal failures never leak detail."""

        if self.kind is ErrorKind.INTERNAL:
            return GENERIC_INTERNAL_MESSAGE
        return self.message

    def __repr__(self) -> str:
        return (
            f"GatewayError(kind={self.kind.value!r}, message={self.message!r}, "
            f"reason={self.reason!r}, provider={self.provider!r})"
        )


def invalid_input(message: str) -> GatewayError:
    return GatewayError(ErrorKind.INVALID_INPUT, message)
