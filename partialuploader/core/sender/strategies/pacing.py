"""
Pacing strategies.

Throttle the sender so a receiver is not hit by back-to-back chunks.
"""
import asyncio
from typing import Optional

from ...config import PacingConfig


class FixedPacingStrategy:
    """Waits a fixed startup delay and a fixed delay between chunks."""

    def __init__(self, config: Optional[PacingConfig] = None):
        self.config = config or PacingConfig()

    async def before_first(self) -> None:
        if self.config.startup_delay:
            await asyncio.sleep(self.config.startup_delay)

    async def between_chunks(self) -> None:
        if self.config.inter_chunk_delay:
            await asyncio.sleep(self.config.inter_chunk_delay)
