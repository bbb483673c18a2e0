"""
Storage gateway protocols.

Defines the interface the receiver and assembler use for persisted bytes.
Keys are '/'-separated paths relative to the gateway root.
"""
from typing import Protocol, runtime_checkable


@runtime_checkable
class StorageGateway(Protocol):
    """
    Protocol for scoped byte storage.

    Implementations can use a local disk, memory, or any other backend.
    Writes must be atomic: a failed write never leaves a truncated
    or zero-length object visible under the target key.
    """

    async def write_bytes(self, key: str, data: bytes) -> None:
        """
        Write data under key, replacing any previous object.

        Raises:
            TransientStorageError: If the write fails
        """
        ...

    async def read_bytes(self, key: str) -> bytes:
        """
        Read the whole object stored under key.

        Raises:
            FileNotFoundError: If no object exists under key
            TransientStorageError: If the read fails
        """
        ...

    async def exists(self, key: str) -> bool:
        """Check if an object or directory exists under key."""
        ...

    async def make_dirs(self, key: str) -> None:
        """Create a directory (and parents) under key."""
        ...

    async def delete_tree(self, key: str) -> None:
        """Recursively delete key. Missing keys are ignored."""
        ...
