"""Sender models."""
from .send_models import (
    ChunkInfo,
    ChunkRequest,
    SendProgress,
    SendResult,
    new_session_id
)

__all__ = [
    'ChunkInfo',
    'ChunkRequest',
    'SendProgress',
    'SendResult',
    'new_session_id'
]
