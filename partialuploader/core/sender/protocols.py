"""
Protocol definitions for sender module.

Defines interfaces (protocols) for dependency injection and strategy pattern.
"""
from typing import Protocol, Dict, List, Optional

from .models import ChunkInfo, ChunkRequest


class ChunkingStrategy(Protocol):
    """
    Protocol for file chunking strategies.
    """

    def calculate_chunks(self, file_size: int) -> List[ChunkInfo]:
        """
        Calculate chunk boundaries for a file.

        Args:
            file_size: Total file size in bytes

        Returns:
            Ordered list of chunks, ordinals starting at 1
        """
        ...


class PacingStrategy(Protocol):
    """Protocol for throttling between chunk sends."""

    async def before_first(self) -> None:
        """Wait before the first chunk is sent."""
        ...

    async def between_chunks(self) -> None:
        """Wait between two successive chunks."""
        ...


class ChunkTransportProtocol(Protocol):
    """Protocol for the HTTP exchange of one chunk."""

    async def send_chunk(
        self,
        url: str,
        request: ChunkRequest,
        headers: Optional[Dict[str, str]] = None
    ) -> int:
        """
        Send one chunk as a multipart request.

        Args:
            url: Receiver endpoint
            request: Chunk and its metadata
            headers: Extra request headers

        Returns:
            HTTP status code of the response

        Raises:
            TransportError: If the exchange failed at network level
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
