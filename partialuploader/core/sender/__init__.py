"""
Sender module for chunked file transfers.

Splits files into fixed-size chunks and sends them sequentially
with pluggable chunking, pacing, retry and transport.
"""
from .coordinator import ChunkSender
from .models import ChunkInfo, ChunkRequest, SendProgress, SendResult, new_session_id
from .protocols import ChunkingStrategy, ChunkTransportProtocol, PacingStrategy
from .services import AiohttpChunkTransport
from .strategies import FixedSizeChunkingStrategy, FixedPacingStrategy

__all__ = [
    # Main classes
    'ChunkSender',
    'AiohttpChunkTransport',

    # Models
    'ChunkInfo',
    'ChunkRequest',
    'SendProgress',
    'SendResult',
    'new_session_id',

    # Protocols
    'ChunkingStrategy',
    'ChunkTransportProtocol',
    'PacingStrategy',

    # Strategies
    'FixedSizeChunkingStrategy',
    'FixedPacingStrategy',
]
