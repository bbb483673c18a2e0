"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod
from typing import Tuple, Type

from ..exceptions import TransientStorageError, TransportError


class RetryStrategy(ABC):
    """Abstract retry strategy."""

    @abstractmethod
    def should_retry(self, error: Exception, retry_count: int, max_retries: int) -> bool:
        """Determines if the failed attempt should be retried."""
        pass

    @abstractmethod
    async def wait_async(self, retry_count: int):
        """Waits before retry (async)."""
        pass


class FixedDelayStrategy(RetryStrategy):
    """
    Fixed delay retry strategy.

    Every retry waits the same amount of time; there is no backoff.
    Only errors listed in `retry_on` are retried.
    """

    def __init__(
        self,
        delay: float,
        retry_on: Tuple[Type[Exception], ...] = (TransientStorageError, TransportError)
    ):
        """
        Initialize strategy.

        Args:
            delay: Seconds to wait between attempts
            retry_on: Exception types that are worth another attempt
        """
        if delay < 0:
            raise ValueError("Delay must not be negative")
        self.delay = delay
        self.retry_on = retry_on

    def should_retry(self, error: Exception, retry_count: int, max_retries: int) -> bool:
        """Retries transient errors until max_retries is reached."""
        return isinstance(error, self.retry_on) and retry_count < max_retries

    async def wait_async(self, retry_count: int):
        """Waits the fixed delay (async)."""
        if self.delay:
            await asyncio.sleep(self.delay)
