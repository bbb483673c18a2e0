"""
In-memory storage gateway.

Provides non-persistent storage for testing and temporary use.
"""
from pathlib import PurePosixPath
from typing import Dict, Set

from .protocols import StorageGateway


def _normalize(key: str) -> str:
    return str(PurePosixPath(key))


class MemoryStorageGateway(StorageGateway):
    """
    In-memory storage gateway.

    Stores objects in a dict keyed by path.
    Data is lost when the object is destroyed.

    Useful for:
    - Unit testing
    - Receivers that hand artifacts to another system right away

    Example:
        >>> storage = MemoryStorageGateway()
        >>> await storage.write_bytes("a/b", b"data")
        >>> await storage.read_bytes("a/b")
        b'data'
    """

    def __init__(self):
        """Initialize memory storage."""
        self._objects: Dict[str, bytes] = {}
        self._dirs: Set[str] = set()

    @property
    def keys(self) -> Set[str]:
        """Returns all stored object keys."""
        return set(self._objects)

    async def write_bytes(self, key: str, data: bytes) -> None:
        key = _normalize(key)
        self._add_parents(key)
        self._objects[key] = bytes(data)

    async def read_bytes(self, key: str) -> bytes:
        key = _normalize(key)
        if key not in self._objects:
            raise FileNotFoundError(key)
        return self._objects[key]

    async def exists(self, key: str) -> bool:
        key = _normalize(key)
        return key in self._objects or key in self._dirs

    async def make_dirs(self, key: str) -> None:
        key = _normalize(key)
        self._dirs.add(key)
        self._add_parents(key)

    async def delete_tree(self, key: str) -> None:
        key = _normalize(key)
        prefix = key + '/'
        for name in [k for k in self._objects if k == key or k.startswith(prefix)]:
            del self._objects[name]
        self._dirs = {d for d in self._dirs if d != key and not d.startswith(prefix)}

    def _add_parents(self, key: str) -> None:
        for parent in PurePosixPath(key).parents:
            if str(parent) != '.':
                self._dirs.add(str(parent))
