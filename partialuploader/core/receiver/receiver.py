"""
Chunk receiver.

Persists incoming chunks and triggers assembly on the last one.
"""
from http import HTTPStatus
from typing import Optional

from ..config import ReceiverConfig
from ..exceptions import (
    ValidationError,
    TransientStorageError,
    FailureKind
)
from ..logging import get_logger
from ..retry import RetryStrategy, FixedDelayStrategy
from ..session import SessionRegistry, SessionState, UploadSession
from ..storage import StorageGateway, StorageLayout
from ..storage.layout import validate_segment
from .assembler import ChunkAssembler
from .models import ChunkUpload, ChunkReceipt
from .persistence import save_with_retry

logger = get_logger('receiver')


class ChunkReceiver:
    """
    Receives chunks for upload sessions.

    Uses dependency injection for all components, making it:
    - Testable (swap the storage gateway)
    - Backend agnostic (local disk, memory, anything else)

    Sessions are opened implicitly by their first chunk. Distinct sessions
    never share a working area, so no cross-session locking is needed.
    A single uploader per session is assumed; concurrent duplicate
    deliveries of the last chunk are not serialized.

    Example:
        >>> receiver = ChunkReceiver(LocalStorageGateway("App_Data"))
        >>> receipt = await receiver.receive_chunk(chunk)
        >>> receipt.status
        <HTTPStatus.OK: 200>
    """

    def __init__(
        self,
        storage: StorageGateway,
        config: Optional[ReceiverConfig] = None,
        registry: Optional[SessionRegistry] = None,
        assembler: Optional[ChunkAssembler] = None,
        retry_strategy: Optional[RetryStrategy] = None
    ):
        """
        Initialize chunk receiver.

        Args:
            storage: Storage gateway rooted at the configured base path
            config: Receiver configuration
            registry: Session registry
            assembler: Assembler invoked on the last chunk
            retry_strategy: Retry strategy for chunk writes
        """
        self._config = config or ReceiverConfig()
        self._storage = storage
        self._layout = StorageLayout(self._config.final_area_name, self._config.staging_area_name)
        self._registry = registry or SessionRegistry(self._config.session_history)
        self._strategy = retry_strategy or FixedDelayStrategy(self._config.save_retry.delay)
        self._assembler = assembler or ChunkAssembler(
            storage, self._layout, self._config.save_retry, self._strategy
        )

    @property
    def config(self) -> ReceiverConfig:
        return self._config

    @property
    def layout(self) -> StorageLayout:
        return self._layout

    def session(self, session_id: str) -> Optional[UploadSession]:
        """Returns the session record for session_id, if known."""
        return self._registry.get(session_id)

    async def receive_chunk(self, chunk: ChunkUpload) -> ChunkReceipt:
        """
        Persist one chunk and assemble the session if it is the last one.

        Args:
            chunk: Chunk and its session metadata

        Returns:
            ChunkReceipt: 200 accepted, 404 invalid metadata,
            400 save failure, 406 assembly failure
        """
        try:
            self.validate(chunk)
        except ValidationError as e:
            logger.warning(f"Rejected chunk for session {chunk.session_id!r}: {e}")
            return ChunkReceipt.rejected(chunk.session_id, e, HTTPStatus.NOT_FOUND)

        session = self._registry.open(
            chunk.session_id, chunk.file_name, chunk.total_size, chunk.total_chunks
        )
        if session.state is not SessionState.OPEN:
            error = ValidationError(
                f"Session {session.session_id} is {session.state.value}", status=HTTPStatus.CONFLICT
            )
            logger.warning(f"Rejected chunk {chunk.ordinal}: {error}")
            return ChunkReceipt.rejected(chunk.session_id, error, HTTPStatus.CONFLICT)

        key = self._layout.chunk_key(chunk.session_id, chunk.file_name, chunk.ordinal)
        try:
            await save_with_retry(
                self._storage, key, chunk.payload,
                self._strategy, self._config.save_retry.max_retries, logger
            )
        except TransientStorageError as e:
            return ChunkReceipt.rejected(chunk.session_id, e, HTTPStatus.BAD_REQUEST)

        session.record_chunk(chunk.ordinal)
        logger.info(
            f"Saved chunk {chunk.ordinal}/{chunk.total_chunks} for session {chunk.session_id} ({chunk.size} bytes)"
        )

        if not chunk.is_last:
            return ChunkReceipt.ok(chunk.session_id)

        # The last delivery's declaration governs the merge
        session.file_name = chunk.file_name
        session.total_size = chunk.total_size
        session.total_chunks = chunk.total_chunks

        result = await self._assembler.assemble(session)
        self._registry.finish(session)
        if result.completed:
            return ChunkReceipt.ok(chunk.session_id, "assembled", artifact_path=result.artifact_path)

        status = HTTPStatus.BAD_REQUEST if result.error_kind is FailureKind.STORAGE else HTTPStatus.NOT_ACCEPTABLE
        return ChunkReceipt(
            accepted=False,
            status=status,
            session_id=chunk.session_id,
            message=result.reason or "assembly failed",
            error_kind=result.error_kind
        )

    def validate(self, chunk: ChunkUpload) -> None:
        """
        Check chunk metadata.

        Raises:
            ValidationError: If a required field is missing or out of range
        """
        if not chunk.payload:
            raise ValidationError("file is required")
        validate_segment(chunk.session_id, 'sessionId')
        validate_segment(chunk.file_name, 'filename')
        if chunk.total_chunks < 1:
            raise ValidationError(f"totalChunks must be at least 1, got {chunk.total_chunks}")
        if not 1 <= chunk.ordinal <= chunk.total_chunks:
            raise ValidationError(
                f"Chunk ordinal {chunk.ordinal} outside 1..{chunk.total_chunks}"
            )
        if chunk.total_size < 0:
            raise ValidationError(f"totalSize must not be negative, got {chunk.total_size}")
        size_limit = chunk.total_chunks * self._config.max_chunk_size
        if chunk.total_size > size_limit:
            raise ValidationError(
                f"totalSize {chunk.total_size} exceeds {chunk.total_chunks} chunks of {self._config.max_chunk_size} bytes"
            )
        if chunk.size > self._config.max_chunk_size:
            raise ValidationError(
                f"Chunk of {chunk.size} bytes exceeds {self._config.max_chunk_size}",
                status=HTTPStatus.REQUEST_ENTITY_TOO_LARGE
            )
