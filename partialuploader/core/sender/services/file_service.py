"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import Tuple, Optional, Union

import aiofiles

from ...exceptions import ValidationError
from ...logging import get_logger
from ..models import ChunkInfo


class FileValidator:
    """
    Validates source files before sending.

    Responsibilities:
    - Reject empty paths
    - Check file existence
    - Verify the path is a regular, non-empty file
    """

    def validate(self, file_path: Union[str, Path, None]) -> Tuple[Path, int]:
        """
        Validate a file for sending.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            ValidationError: If the file cannot be sent
        """
        if not file_path:
            raise ValidationError("file path is required")

        path = Path(file_path)
        if not path.exists():
            raise ValidationError(f"File not found: {path}")
        if not path.is_file():
            raise ValidationError(f"Path is not a file: {path}")

        file_size = path.stat().st_size
        if file_size == 0:
            raise ValidationError(f"Cannot send empty file: {path}")

        return path, file_size


class ChunkFileReader:
    """
    Sequential chunk reader.

    Uses aiofiles for non-blocking I/O. The file is opened once per
    transfer and read front to back, so only one chunk buffer is held
    at a time.

    Example:
        >>> async with ChunkFileReader(path) as reader:
        ...     data = await reader.read_chunk(chunk)
    """

    def __init__(self, file_path: Path):
        """
        Initialize reader.

        Args:
            file_path: File to read
        """
        self._file_path = file_path
        self._handle = None
        self._position = 0
        self._logger = get_logger('sender.file')

    async def __aenter__(self) -> 'ChunkFileReader':
        self._handle = await aiofiles.open(self._file_path, 'rb')
        self._position = 0
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._handle is not None:
            await self._handle.close()
            self._handle = None

    async def read_chunk(self, chunk: ChunkInfo) -> Optional[bytes]:
        """
        Read one chunk.

        Args:
            chunk: Chunk boundaries

        Returns:
            Chunk data, or None if reading failed or came up short
        """
        if self._handle is None:
            raise RuntimeError("Reader is not open")
        try:
            if chunk.start != self._position:
                await self._handle.seek(chunk.start)
            data = await self._handle.read(chunk.size)
        except OSError as e:
            self._logger.error(f"Failed to read chunk {chunk.ordinal} ({chunk.start}-{chunk.end}): {e}")
            return None

        self._position = chunk.start + len(data)
        if len(data) != chunk.size:
            self._logger.error(
                f"Short read for chunk {chunk.ordinal}: expected {chunk.size} bytes, got {len(data)}"
            )
            return None
        self._logger.debug(f"Read chunk {chunk.ordinal}: {chunk.start}-{chunk.end} ({len(data)} bytes)")
        return data
