import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from app.notifications.errors import ProviderError, TransientProviderError
from app.notifications.providers.base import ProviderClient
from app.notifications.types import DispatchResult, ErrorKind, RetryPolicy, ValidatedRequest

logger = logging.getLogger("notifications.dispatch")

CancelCheck = Callable[[], Awaitable[bool]]


class DeadlineExceeded(Exception):
    pass


class Dispatcher:
    """Delivers validated requests through a provider client, retrying transient failures.

    A dispatcher holds no per-request state; one instance serves concurrent requests.
    """

    def __init__(
        self,
        provider: ProviderClient,
        policy: Optional[RetryPolicy] = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.provider = provider
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._clock = clock

    async def _call(self, req: ValidatedRequest) -> str:
        try:
            return await self.provider.send(req)
        except (asyncio.TimeoutError, TimeoutError) as e:
            # the provider's own timeout, kept apart from the dispatch deadline
            raise TransientProviderError(ErrorKind.TIMEOUT, str(e) or "provider call timed out") from e

    async def _send(self, req: ValidatedRequest, deadline: Optional[float]) -> str:
        if deadline is None:
            return await self._call(req)
        remaining = deadline - self._clock()
        if remaining <= 0:
            raise DeadlineExceeded()
        try:
            return await asyncio.wait_for(self._call(req), timeout=remaining)
        except asyncio.TimeoutError:
            raise DeadlineExceeded() from None

    async def dispatch(
        self,
        req: ValidatedRequest,
        policy: Optional[RetryPolicy] = None,
        *,
        timeout_s: Optional[float] = None,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> DispatchResult:
        policy = policy or self.policy
        deadline = self._clock() + timeout_s if timeout_s is not None else None
        token = req.target_token[:8]
        attempt = 0

        while True:
            attempt += 1
            try:
                message_id = await self._send(req, deadline)
            except DeadlineExceeded:
                logger.warning("Deadline exceeded sending to %s... on attempt %d", token, attempt)
                return DispatchResult.failed(ErrorKind.CANCELLED, attempt, "deadline exceeded")
            except ProviderError as e:
                error = e
            except Exception as e:
                logger.exception("Unexpected provider failure sending to %s...", token)
                return DispatchResult.failed(ErrorKind.PROVIDER_REJECTED, attempt, str(e) or type(e).__name__)
            else:
                logger.info("Successfully sent message %s to %s... (attempts=%d)", message_id, token, attempt)
                return DispatchResult.delivered(message_id, attempt)

            if not (error.transient and policy.is_retryable(error.kind)):
                logger.error("Error sending message to %s...: %s (%s)", token, error.kind.value, error)
                return DispatchResult.failed(error.kind, attempt, str(error))
            if attempt >= policy.max_attempts:
                logger.error("Giving up on %s... after %d attempts: %s", token, attempt, error)
                return DispatchResult.failed(ErrorKind.EXHAUSTED_RETRIES, attempt, str(error))

            delay = policy.delay_for(attempt)
            if deadline is not None and self._clock() + delay >= deadline:
                logger.warning("No time left to retry %s... after attempt %d", token, attempt)
                return DispatchResult.failed(ErrorKind.CANCELLED, attempt, "deadline exceeded")
            logger.warning(
                "Attempt %d/%d for %s... failed: %s. Retrying in %.2fs",
                attempt, policy.max_attempts, token, error, delay,
            )
            await self._sleep(delay)
            if is_cancelled is not None and await is_cancelled():
                logger.info("Caller went away, dropping %s... after %d attempts", token, attempt)
                return DispatchResult.failed(ErrorKind.CANCELLED, attempt, "request aborted by caller")
