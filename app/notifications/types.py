from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    # transient provider failures
    TIMEOUT = "Timeout"
    UNAVAILABLE = "Unavailable"
    RATE_LIMITED = "RateLimited"
    INTERNAL = "Internal"
    # permanent provider failures
    INVALID_TOKEN = "InvalidToken"
    INVALID_PAYLOAD = "InvalidPayload"
    SENDER_MISMATCH = "SenderMismatch"
    UNAUTHENTICATED = "Unauthenticated"
    PROVIDER_REJECTED = "ProviderRejected"
    # dispatch outcomes
    EXHAUSTED_RETRIES = "ExhaustedRetries"
    CANCELLED = "Cancelled"


TRANSIENT_KINDS = frozenset(
    {ErrorKind.TIMEOUT, ErrorKind.UNAVAILABLE, ErrorKind.RATE_LIMITED, ErrorKind.INTERNAL}
)


@dataclass(frozen=True)
class NotificationRequest:
    target_token: Optional[str]
    title: Optional[str]
    body: Optional[str]
    data: Optional[Mapping[str, str]] = None


@dataclass(frozen=True)
class ValidatedRequest:
    target_token: str
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DispatchResult:
    success: bool
    attempts: int
    provider_message_id: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    detail: Optional[str] = None

    @classmethod
    def delivered(cls, message_id: str, attempts: int) -> "DispatchResult":
        return cls(success=True, attempts=attempts, provider_message_id=message_id)

    @classmethod
    def failed(cls, kind: ErrorKind, attempts: int, detail: Optional[str] = None) -> "DispatchResult":
        return cls(success=False, attempts=attempts, error_kind=kind, detail=detail)


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff for transient provider failures.

    The delay slept after attempt ``n`` is ``base_delay * backoff_multiplier ** (n - 1)``,
    capped at ``max_delay`` when one is given.
    """

    max_attempts: int = 3
    base_delay: float = 0.5
    backoff_multiplier: float = 2.0
    retryable_error_kinds: frozenset[ErrorKind] = TRANSIENT_KINDS
    max_delay: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")
        if self.max_delay is not None and self.max_delay < 0:
            raise ValueError("max_delay must be >= 0")
        object.__setattr__(self, "retryable_error_kinds", frozenset(self.retryable_error_kinds))

    def delay_for(self, attempt: int) -> float:
        delay = self.base_delay * self.backoff_multiplier ** (attempt - 1)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay

    def is_retryable(self, kind: ErrorKind) -> bool:
        return kind in self.retryable_error_kinds
