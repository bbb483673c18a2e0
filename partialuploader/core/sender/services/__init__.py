"""Sender services module."""
from .file_service import FileValidator, ChunkFileReader
from .transport import AiohttpChunkTransport

__all__ = [
    'FileValidator',
    'ChunkFileReader',
    'AiohttpChunkTransport',
]
