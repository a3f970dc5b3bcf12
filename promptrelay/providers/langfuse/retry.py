"""Retry with exponential backoff for remote prompt calls.

The decision logic is pure: RetryPolicy.decide maps (attempt, status or
error) to a RetryDecision and never touches the network. send_with_retry
drives it around an httpx call.

Attempts are strictly sequential. Delay before retry n (0-indexed) is
base_delay * 2**n, no jitter. Cancellation raised by the call or by the
backoff sleep propagates untouched and consumes no further attempts.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

import httpx

from promptrelay.config.models.remote import ResilienceConfig
from promptrelay.exceptions import RemoteTransportError
from promptrelay.observability.events import PromptEvent
from promptrelay.observability.logging import get_logger
from promptrelay.observability.metrics import REMOTE_RETRIES

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 429})

Sleep = Callable[[float], Awaitable[None]]


class RetryDecision(str, Enum):
    """What to do after an attempt."""

    RETRY = "retry"
    RETURN = "return"
    RAISE = "raise"


def should_retry_status(status_code: int) -> bool:
    """408, 429 and any 5xx are transient."""
    return status_code in RETRYABLE_STATUS_CODES or status_code >= 500


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget and backoff base.

    Attributes:
        max_retries: Retries after the first attempt (0 = single attempt)
        base_delay: Backoff base in seconds
    """

    max_retries: int = 0
    base_delay: float = 0.2

    @classmethod
    def from_config(cls, config: ResilienceConfig) -> "RetryPolicy":
        """Build a policy; a disabled config allows exactly one attempt."""
        return cls(
            max_retries=max(0, config.max_retries) if config.enabled else 0,
            base_delay=max(1, config.base_delay_ms) / 1000,
        )

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1

    def decide(
        self,
        attempt: int,
        *,
        status_code: int | None = None,
        error: BaseException | None = None,
    ) -> RetryDecision:
        """Decide the next step after a 0-indexed attempt.

        Args:
            attempt: Index of the attempt that just finished
            status_code: Response status, when a response arrived
            error: Exception raised instead of a response

        Returns:
            RETRY while budget remains and the outcome is transient,
            RAISE for an error that will not be retried, RETURN otherwise
        """
        budget_left = attempt < self.max_retries
        if error is not None:
            if isinstance(error, httpx.TransportError) and budget_left:
                return RetryDecision.RETRY
            return RetryDecision.RAISE
        if status_code is not None and should_retry_status(status_code) and budget_left:
            return RetryDecision.RETRY
        return RetryDecision.RETURN

    def delay_for(self, attempt: int) -> float:
        """Backoff in seconds before retrying after the given attempt."""
        return self.base_delay * (2**attempt)


async def send_with_retry(
    send: Callable[[], Awaitable[httpx.Response]],
    policy: RetryPolicy,
    *,
    operation: str,
    prompt_key: str,
    sleep: Sleep = asyncio.sleep,
) -> httpx.Response:
    """Issue a request, retrying transient failures per the policy.

    Args:
        send: Issues one attempt
        policy: Retry budget and backoff
        operation: Operation name for logs and metrics
        prompt_key: Remote prompt name for logs
        sleep: Awaitable delay, injectable for tests

    Returns:
        The final response, which may still carry an error status once the
        retry budget is spent

    Raises:
        RemoteTransportError: Transport failure that will not be retried
    """
    attempt = 0
    while True:
        try:
            response = await send()
        except httpx.TransportError as exc:
            if policy.decide(attempt, error=exc) is not RetryDecision.RETRY:
                raise RemoteTransportError(
                    f"Transport error calling prompt service for '{prompt_key}': {exc}"
                ) from exc
            logger.warning(
                PromptEvent.RETRY_ATTEMPT,
                operation=operation,
                prompt_key=prompt_key,
                attempt=attempt + 1,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        else:
            if policy.decide(attempt, status_code=response.status_code) is RetryDecision.RETURN:
                return response
            await response.aclose()

        delay = policy.delay_for(attempt)
        logger.info(
            PromptEvent.RETRY_ATTEMPT,
            operation=operation,
            prompt_key=prompt_key,
            delay_ms=int(delay * 1000),
            attempt=attempt + 1,
            max_retries=policy.max_retries,
        )
        REMOTE_RETRIES.labels(operation=operation).inc()
        await sleep(delay)
        attempt += 1
