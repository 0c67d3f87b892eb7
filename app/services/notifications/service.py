import asyncio
from typing import Awaitable, Callable, Optional

from app.notifications.config import NotificationsConfig
from app.notifications.providers.base import ProviderClient
from app.notifications.types import DispatchResult, NotificationRequest
from app.services.notifications.dispatcher import CancelCheck, Dispatcher
from app.services.notifications.validator import validate


class NotificationService:
    def __init__(
        self,
        provider: ProviderClient,
        config: NotificationsConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config or NotificationsConfig()
        self.provider = provider
        self.dispatcher = Dispatcher(provider, self.config.retry, sleep=sleep)

    async def send(self, req: NotificationRequest, *, is_cancelled: Optional[CancelCheck] = None) -> DispatchResult:
        validated = validate(req, max_payload_bytes=self.config.max_payload_bytes)
        return await self.dispatcher.dispatch(validated, timeout_s=self.config.timeout_s, is_cancelled=is_cancelled)
