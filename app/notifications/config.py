from dataclasses import dataclass, field
from typing import Optional

from app.notifications.types import RetryPolicy

DEFAULT_MAX_PAYLOAD_BYTES = 4096


@dataclass(frozen=True)
class NotificationsConfig:
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    timeout_s: Optional[float] = None

    @classmethod
    def from_settings(cls, settings) -> "NotificationsConfig":
        return cls(
            max_payload_bytes=settings.MAX_PAYLOAD_BYTES,
            retry=RetryPolicy(
                max_attempts=settings.RETRY_MAX_ATTEMPTS,
                base_delay=settings.RETRY_BASE_DELAY_S,
                backoff_multiplier=settings.RETRY_BACKOFF_MULTIPLIER,
                max_delay=settings.RETRY_MAX_DELAY_S,
            ),
            timeout_s=settings.DISPATCH_TIMEOUT_S,
        )
