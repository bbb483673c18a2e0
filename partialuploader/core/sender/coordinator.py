"""
Chunk sender.

Splits a file into ordered chunks and sends them one after another.
Depends on abstractions (transport, chunking, pacing, retry), not concretions.
"""
import time
from http import HTTPStatus
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from ..config import SenderConfig
from ..exceptions import (
    PartialUploadError,
    RejectionError,
    TransportError,
    ValidationError
)
from ..logging import get_logger
from ..retry import RetryStrategy, FixedDelayStrategy
from .models import ChunkInfo, ChunkRequest, SendProgress, SendResult, new_session_id
from .protocols import ChunkingStrategy, ChunkTransportProtocol, PacingStrategy
from .services import AiohttpChunkTransport, ChunkFileReader, FileValidator
from .strategies import FixedPacingStrategy, FixedSizeChunkingStrategy

logger = get_logger('sender')


class ChunkSender:
    """
    Sends a file to a receiver endpoint in sequential chunks.

    Chunk i+1 is only sent after chunk i was answered, so the receiver
    sees chunks in order and the sender holds one chunk in memory.

    Uses dependency injection for all components, making it:
    - Testable (mock the transport)
    - Extensible (swap chunking, pacing or retry strategies)

    Every outcome is returned as a SendResult. A failed chunk in a
    multi-chunk transfer stops the transfer and is marked fatal; a failed
    single-chunk transfer is a soft failure without session id.

    Example:
        >>> async with ChunkSender() as sender:
        ...     result = await sender.send("http://host/upload", "video.mp4")
        >>> result.success
        True
    """

    def __init__(
        self,
        config: Optional[SenderConfig] = None,
        transport: Optional[ChunkTransportProtocol] = None,
        chunking_strategy: Optional[ChunkingStrategy] = None,
        pacing_strategy: Optional[PacingStrategy] = None,
        retry_strategy: Optional[RetryStrategy] = None,
        progress_callback: Optional[Callable[[SendProgress], None]] = None
    ):
        """
        Initialize chunk sender.

        Args:
            config: Sender configuration
            transport: HTTP transport (an aiohttp transport is created if omitted)
            chunking_strategy: Strategy for splitting files
            pacing_strategy: Strategy for startup and inter-chunk delays
            retry_strategy: Strategy for retrying transport failures
            progress_callback: Optional callback for progress updates
        """
        self._config = config or SenderConfig()
        self._owns_transport = transport is None
        self._transport = transport or AiohttpChunkTransport(self._config.timeout)
        self._chunking = chunking_strategy or FixedSizeChunkingStrategy(self._config.chunk_size)
        self._pacing = pacing_strategy or FixedPacingStrategy(self._config.pacing)
        self._retry = retry_strategy or FixedDelayStrategy(
            self._config.retry.delay, retry_on=(TransportError,)
        )
        self._validator = FileValidator()
        self._progress_callback = progress_callback

    async def __aenter__(self) -> 'ChunkSender':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Close the transport if this sender created it."""
        if self._owns_transport:
            await self._transport.close()

    async def send(
        self,
        url: str,
        file_path: Union[str, Path],
        headers: Optional[Dict[str, str]] = None,
        chunk_size: Optional[int] = None,
        session_id: Optional[str] = None
    ) -> SendResult:
        """
        Send a file to url.

        Args:
            url: Receiver endpoint
            file_path: File to send
            headers: Extra headers added to every chunk request
            chunk_size: Override of the configured chunk size
            session_id: Correlation id to use instead of a fresh one

        Returns:
            SendResult; never raises for validation, transport or
            rejection failures
        """
        if not url:
            return SendResult.failure("url is required", ValidationError.kind)
        try:
            path, file_size = self._validator.validate(file_path)
            chunking = FixedSizeChunkingStrategy(chunk_size) if chunk_size else self._chunking
        except (ValidationError, ValueError) as e:
            logger.warning(f"Not sending {file_path}: {e}")
            return SendResult.failure(str(e), ValidationError.kind)

        session_id = session_id or new_session_id()
        chunks = chunking.calculate_chunks(file_size)
        total = len(chunks)
        progress = SendProgress(total_chunks=total, total_bytes=file_size)
        file_size_mb = file_size / (1024 * 1024)
        logger.info(f"Sending {path.name} ({file_size_mb:.2f} MB) as session {session_id} in {total} chunks")

        start_time = time.time()
        await self._pacing.before_first()

        try:
            async with ChunkFileReader(path) as reader:
                for chunk in chunks:
                    if chunk.ordinal > 1:
                        await self._pacing.between_chunks()
                    try:
                        await self._send_one(url, reader, chunk, session_id, total, file_size, path.name, headers)
                    except PartialUploadError as e:
                        return self._failed(e, session_id, total, progress.sent_chunks)

                    progress.sent_chunks = chunk.ordinal
                    progress.sent_bytes += chunk.size
                    if self._progress_callback:
                        self._progress_callback(progress)
        except OSError as e:
            logger.error(f"Cannot read {path}: {e}")
            return self._failed(
                ValidationError(f"Cannot read {path}: {e}"), session_id, total, progress.sent_chunks
            )

        elapsed = time.time() - start_time
        logger.info(f"Session {session_id} uploaded: {total} chunks in {elapsed:.2f}s")
        return SendResult.uploaded(session_id, total)

    async def _send_one(
        self,
        url: str,
        reader: ChunkFileReader,
        chunk: ChunkInfo,
        session_id: str,
        total_chunks: int,
        total_size: int,
        file_name: str,
        headers: Optional[Dict[str, str]]
    ) -> None:
        """Read and send one chunk, retrying transport failures."""
        data = await reader.read_chunk(chunk)
        if data is None:
            raise ValidationError(f"Failed to read chunk {chunk.ordinal}")

        request = ChunkRequest(
            session_id=session_id,
            ordinal=chunk.ordinal,
            total_chunks=total_chunks,
            total_size=total_size,
            file_name=file_name,
            payload=data
        )
        del data

        attempt = 0
        while True:
            try:
                status = await self._transport.send_chunk(url, request, headers)
                self._check_status(status, request)
                logger.debug(f"Chunk {request.ordinal}/{total_chunks} accepted ({status})")
                return
            except TransportError as e:
                if not self._retry.should_retry(e, attempt, self._config.retry.max_retries):
                    raise
                logger.warning(f"Chunk {request.ordinal} failed, retrying: {e}")
                await self._retry.wait_async(attempt)
                attempt += 1

    @staticmethod
    def _check_status(status: int, request: ChunkRequest) -> None:
        """
        Map a response status onto the error taxonomy.

        Raises:
            TransportError: For 5xx responses (retryable)
            RejectionError: For any other non-2xx response (final)
        """
        if 200 <= status < 300:
            return
        reason = _status_phrase(status)
        if status >= 500:
            raise TransportError(
                f"Receiver failed on chunk {request.ordinal}: {status} {reason}", status=status
            )
        raise RejectionError(
            f"Receiver rejected chunk {request.ordinal}: {status} {reason}", status=status
        )

    @staticmethod
    def _failed(error: PartialUploadError, session_id: str, total: int, sent: int) -> SendResult:
        fatal = total > 1
        if fatal:
            logger.error(f"Session {session_id} aborted after {sent}/{total} chunks: {error}")
        else:
            logger.warning(f"Session {session_id} failed: {error}")
        return SendResult.failure(
            str(error),
            error.kind,
            session_id=session_id if fatal else None,
            fatal=fatal,
            chunks_sent=sent,
            status=error.status
        )


def _status_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown"
