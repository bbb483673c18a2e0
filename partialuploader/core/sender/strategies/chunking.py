"""
Chunking strategies for file sends.

A strategy turns a file size into an ordered list of byte ranges.
"""
from abc import ABC, abstractmethod
from typing import List

from ...config import DEFAULT_CHUNK_SIZE
from ..models import ChunkInfo


class BaseChunkingStrategy(ABC):
    """Base class for strategies that split a file into ranges."""

    @abstractmethod
    def calculate_chunks(self, file_size: int) -> List[ChunkInfo]:
        ...


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Every chunk is `chunk_size` bytes except possibly the last, so a file
    of S bytes yields ceil(S / chunk_size) chunks. A file that fits in one
    buffer is a single chunk.

    Example:
        >>> [c.size for c in FixedSizeChunkingStrategy(10).calculate_chunks(25)]
        [10, 10, 5]
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    def count_chunks(self, file_size: int) -> int:
        """Returns ceil(file_size / chunk_size)."""
        return -(-file_size // self.chunk_size)

    def calculate_chunks(self, file_size: int) -> List[ChunkInfo]:
        """
        Split file_size bytes into contiguous ranges.

        Returns:
            Chunks with 1-based ordinals; empty for an empty file
        """
        return [
            ChunkInfo(
                ordinal=index + 1,
                start=start,
                end=min(start + self.chunk_size, file_size)
            )
            for index, start in enumerate(range(0, file_size, self.chunk_size))
        ]
