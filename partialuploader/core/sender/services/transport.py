"""
Chunk transport service.

Sends chunks as multipart form requests with aiohttp.
"""
import asyncio
import time
from typing import Dict, Optional

import aiohttp

from ...config import TimeoutConfig
from ...exceptions import TransportError
from ...logging import get_logger
from ..models import ChunkRequest


class AiohttpChunkTransport:
    """
    Sends one chunk per POST request.

    Reuses one HTTP session for all chunks of all transfers made through
    this transport.

    Responsibilities:
    - Build the multipart form for a chunk
    - Return the response status
    - Turn network failures into TransportError
    """

    def __init__(
        self,
        timeout: Optional[TimeoutConfig] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize chunk transport.

        Args:
            timeout: Request timeouts
            session: Optional shared session; its owner closes it
        """
        self._timeout = timeout or TimeoutConfig()
        self._shared = session
        self._own: Optional[aiohttp.ClientSession] = None
        self._logger = get_logger('sender.transport')

    def _client(self) -> aiohttp.ClientSession:
        """Returns the shared session or a lazily created private one."""
        if self._shared is not None:
            return self._shared
        if self._own is None or self._own.closed:
            self._own = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(limit=4, keepalive_timeout=60)
            )
        return self._own

    async def close(self) -> None:
        """Close the private session; a shared one is left alone."""
        own, self._own = self._own, None
        if own is not None:
            await own.close()

    @staticmethod
    def build_form(request: ChunkRequest) -> aiohttp.FormData:
        """Build the multipart form carrying request."""
        form = aiohttp.FormData()
        for name, value in request.form_fields().items():
            form.add_field(name, value)
        form.add_field(
            'file',
            request.payload,
            filename=request.part_name,
            content_type='application/octet-stream'
        )
        return form

    async def send_chunk(
        self,
        url: str,
        request: ChunkRequest,
        headers: Optional[Dict[str, str]] = None
    ) -> int:
        """
        Send a single chunk.

        Args:
            url: Receiver endpoint
            request: Chunk and its metadata
            headers: Extra request headers

        Returns:
            HTTP status code

        Raises:
            TransportError: If a network error or timeout occurs
        """
        session = self._client()
        chunk_size_kb = len(request.payload) / 1024
        started = time.time()
        self._logger.debug(
            f"Sending chunk {request.ordinal}/{request.total_chunks} of {request.session_id} ({chunk_size_kb:.1f} KB)"
        )

        try:
            async with session.post(
                url,
                data=self.build_form(request),
                headers=headers,
                timeout=self._timeout.to_aiohttp_timeout()
            ) as response:
                await response.read()
                elapsed = time.time() - started
                self._logger.debug(
                    f"Chunk {request.ordinal} answered {response.status} in {elapsed:.2f}s"
                )
                return response.status
        except asyncio.TimeoutError as e:
            elapsed = time.time() - started
            self._logger.error(f"Chunk {request.ordinal} timed out after {elapsed:.2f}s")
            raise TransportError(f"Timeout sending chunk {request.ordinal}") from e
        except aiohttp.ClientError as e:
            elapsed = time.time() - started
            self._logger.error(f"Chunk {request.ordinal} failed after {elapsed:.2f}s: {e}")
            raise TransportError(f"Network error sending chunk {request.ordinal}: {e}") from e
