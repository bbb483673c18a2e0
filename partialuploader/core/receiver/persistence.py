"""
Retrying writes through the storage gateway.
"""
import logging

from ..exceptions import TransientStorageError
from ..retry import RetryStrategy
from ..storage import StorageGateway


async def save_with_retry(
    storage: StorageGateway,
    key: str,
    data: bytes,
    strategy: RetryStrategy,
    max_retries: int,
    logger: logging.Logger
) -> int:
    """
    Write data under key, retrying transient failures.

    Each attempt is independent; the gateway guarantees a failed attempt
    leaves nothing visible under key.

    Args:
        storage: Storage gateway
        key: Target key
        data: Bytes to write
        strategy: Decides whether and how long to wait before retrying
        max_retries: Additional attempts after the first
        logger: Logger for attempt reporting

    Returns:
        Number of attempts used

    Raises:
        TransientStorageError: If every attempt failed
    """
    attempt = 0
    while True:
        try:
            await storage.write_bytes(key, data)
            if attempt:
                logger.info(f"Saved {key} after {attempt + 1} attempts")
            return attempt + 1
        except TransientStorageError as e:
            if not strategy.should_retry(e, attempt, max_retries):
                logger.error(f"Giving up on {key} after {attempt + 1} attempts: {e}")
                raise
            logger.warning(f"Save attempt {attempt + 1} for {key} failed, retrying: {e}")
            await strategy.wait_async(attempt)
            attempt += 1
