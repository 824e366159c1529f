from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """The provider did not accept the message."""


@dataclass(frozen=True)
class RetryPolicy:
    attempts: int = 3
    base: float = 1.0  # base delay (seconds)
    max_delay: float = 6.0  # cap (seconds)

    def compute_delay(self, attempt: int) -> float:
        # attempt is the number of attempts already made, minus one
        # next delay = min(max_delay, base * 2**(attempt))
        delay = self.base * (2**attempt)
        return delay if delay < self.max_delay else self.max_delay


async def send_with_retry(
    send_once: Callable[[], Awaitable[None]],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """
    Run send_once until it succeeds or the policy is exhausted.
    Cancellation while sending or backing off propagates untouched.
    """
    last_error: DeliveryError | None = None
    for attempt in range(policy.attempts):
        try:
            await send_once()
        except DeliveryError as e:
            last_error = e
        else:
            if attempt > 0:
                logger.info("delivered after retries", extra={"retries": attempt})
            return

        if attempt == policy.attempts - 1:
            break
        delay = policy.compute_delay(attempt)
        logger.warning(
            "delivery failed; retrying",
            extra={
                "attempt": attempt + 1,
                "attempts": policy.attempts,
                "retry_in_s": delay,
                "error": str(last_error),
            },
        )
        await sleep(delay)

    raise DeliveryError(
        f"failed to deliver after {policy.attempts} attempts: {last_error}"
    ) from last_error
