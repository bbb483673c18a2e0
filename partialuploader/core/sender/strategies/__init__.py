"""Sender strategies module."""
from .chunking import BaseChunkingStrategy, FixedSizeChunkingStrategy
from .pacing import FixedPacingStrategy

__all__ = [
    'BaseChunkingStrategy',
    'FixedSizeChunkingStrategy',
    'FixedPacingStrategy',
]
