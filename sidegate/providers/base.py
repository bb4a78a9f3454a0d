"""Provider interface shared by the relay, direct mail and payment adapters.

Adapters share this protocol but no base implementation; each one owns its
wire format and hands its failures to `sidegate.providers.errors`.
"""

from typing import Any, Protocol

from sidegate.common.schemas import DispatchResult


class ProviderAdapter(Protocol):
    """One outbound call to one third party per `dispatch`."""

    name: str

    async def dispatch(self, request: Any) -> DispatchResult:
        ...
