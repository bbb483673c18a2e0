"""
Storage module.

Provides the storage gateway used for chunk files and assembled artifacts.
"""
from .protocols import StorageGateway
from .local_storage import LocalStorageGateway
from .memory_storage import MemoryStorageGateway
from .layout import StorageLayout, chunk_file_name, parse_chunk_ordinal

__all__ = [
    'StorageGateway',
    'LocalStorageGateway',
    'MemoryStorageGateway',
    'StorageLayout',
    'chunk_file_name',
    'parse_chunk_ordinal',
]
