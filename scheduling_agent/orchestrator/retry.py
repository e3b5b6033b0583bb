"""
Poll and rate-limit backoff for one chat turn.

BackoffState is a small state machine: the poll delay doubles while a run
is pending and resets after progress, and each rate-limit failure consumes
one retry attempt. Sleep and randomness are injected so tests can run the
whole loop without waiting.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from scheduling_agent.config import AgentConfig
from scheduling_agent.shared.exceptions import RateLimitExhaustedError

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    poll_base_delay: float = 0.5
    poll_max_delay: float = 8.0
    retry_max_delay: float = 30.0
    retry_jitter: float = 1.0
    max_retries: int = 5

    @classmethod
    def from_config(cls, config: AgentConfig) -> "RetryPolicy":
        return cls(
            poll_base_delay=config.poll_base_delay,
            poll_max_delay=config.poll_max_delay,
            retry_max_delay=config.retry_max_delay,
            retry_jitter=config.retry_jitter,
            max_retries=config.max_retries,
        )


class BackoffState:
    """
    Backoff bookkeeping for a single turn.

    Attributes:
        attempt: Rate-limit failures seen so far
        poll_delay: Delay before the next poll, in seconds
    """

    def __init__(
        self,
        policy: RetryPolicy,
        sleep: Optional[SleepFn] = None,
        rng: Optional[random.Random] = None,
    ):
        self.policy = policy
        self.attempt = 0
        self.poll_delay = policy.poll_base_delay
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    async def wait_poll(self) -> None:
        await self._sleep(self.poll_delay)

    def grow_poll(self) -> None:
        self.poll_delay = min(self.poll_delay * 2, self.policy.poll_max_delay)

    def reset_poll(self) -> None:
        self.poll_delay = self.policy.poll_base_delay

    def next_retry_delay(self, run_id: Optional[str] = None) -> float:
        """
        Consume one retry attempt and return how long to wait before it.

        Raises:
            RateLimitExhaustedError: Once the attempt count exceeds max_retries.
        """
        self.attempt += 1
        if self.attempt > self.policy.max_retries:
            raise RateLimitExhaustedError(self.attempt, run_id=run_id)
        capped = min(self.poll_delay * self.attempt, self.policy.retry_max_delay)
        return capped + self._rng.uniform(0, self.policy.retry_jitter)

    async def sleep(self, delay: float) -> None:
        await self._sleep(delay)
