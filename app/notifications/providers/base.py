from typing import Protocol
from app.notifications.types import ValidatedRequest


class ProviderClient(Protocol):
    async def send(self, req: ValidatedRequest) -> str:
        """Deliver ``req`` and return the provider's message id.

        Failures are raised as ``ProviderError`` tagged transient or permanent.
        """
        ...
