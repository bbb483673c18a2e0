"""
Local disk storage gateway.

Stores objects as files below a base directory using aiofiles.
"""
import asyncio
import shutil
import uuid
from pathlib import Path, PurePosixPath
from typing import Union

import aiofiles
import aiofiles.os

from ..exceptions import TransientStorageError, ValidationError
from ..logging import get_logger
from .protocols import StorageGateway

logger = get_logger('storage')


class LocalStorageGateway(StorageGateway):
    """
    File system storage scoped to one base directory.

    Keys never resolve outside the base directory. Writes go to a hidden
    temporary file in the target directory and are renamed into place,
    so readers only ever observe complete objects.

    Example:
        >>> storage = LocalStorageGateway("App_Data")
        >>> await storage.write_bytes("tmp/abc/report.pdf", data)
    """

    TEMP_SUFFIX = '.part'

    def __init__(self, base_path: Union[str, Path]):
        """
        Initialize local storage.

        Args:
            base_path: Root directory for all keys
        """
        self._base = Path(base_path).resolve()

    @property
    def base_path(self) -> Path:
        """Returns the resolved base directory."""
        return self._base

    def resolve(self, key: str) -> Path:
        """
        Map a key to a path below the base directory.

        Raises:
            ValidationError: If the key is empty or escapes the base directory
        """
        if not key:
            raise ValidationError("Storage key is required")
        relative = PurePosixPath(key)
        if relative.is_absolute() or '..' in relative.parts:
            raise ValidationError(f"Storage key escapes base path: {key}")
        return self._base.joinpath(*relative.parts)

    async def write_bytes(self, key: str, data: bytes) -> None:
        target = self.resolve(key)
        temp = target.with_name(f".{target.name}.{uuid.uuid4().hex}{self.TEMP_SUFFIX}")
        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(temp, 'wb') as f:
                await f.write(data)
                await f.flush()
            await aiofiles.os.replace(temp, target)
        except OSError as e:
            await self._discard(temp)
            logger.error(f"Write failed for {key}: {e}")
            raise TransientStorageError(f"Failed to write {key}: {e}") from e
        logger.debug(f"Wrote {key} ({len(data)} bytes)")

    async def read_bytes(self, key: str) -> bytes:
        path = self.resolve(key)
        try:
            async with aiofiles.open(path, 'rb') as f:
                return await f.read()
        except FileNotFoundError:
            raise
        except OSError as e:
            logger.error(f"Read failed for {key}: {e}")
            raise TransientStorageError(f"Failed to read {key}: {e}") from e

    async def exists(self, key: str) -> bool:
        return await aiofiles.os.path.exists(self.resolve(key))

    async def make_dirs(self, key: str) -> None:
        path = self.resolve(key)
        try:
            await aiofiles.os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise TransientStorageError(f"Failed to create {key}: {e}") from e

    async def delete_tree(self, key: str) -> None:
        path = self.resolve(key)
        if not await aiofiles.os.path.exists(path):
            return
        try:
            if await aiofiles.os.path.isdir(path):
                await asyncio.get_running_loop().run_in_executor(None, shutil.rmtree, path)
            else:
                await aiofiles.os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error(f"Delete failed for {key}: {e}")
            raise TransientStorageError(f"Failed to delete {key}: {e}") from e
        logger.debug(f"Deleted {key}")

    async def _discard(self, temp: Path) -> None:
        """Remove a leftover temporary file."""
        try:
            await aiofiles.os.remove(temp)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary file {temp}: {e}")
