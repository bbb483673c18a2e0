"""
Chunk assembler.

Reconstitutes the original file from the chunk files of one session.
"""
from typing import Optional

from ..config import RetryConfig
from ..exceptions import IntegrityError, TransientStorageError, FailureKind
from ..logging import get_logger
from ..retry import RetryStrategy, FixedDelayStrategy
from ..session import UploadSession
from ..storage import StorageGateway, StorageLayout
from .models import AssemblyResult
from .persistence import save_with_retry

logger = get_logger('assembler')


class ChunkAssembler:
    """
    Merges chunk files into the final artifact.

    Chunks are read in ascending ordinal order into a buffer pre-sized to
    the declared total size. The whole file is held in memory once, which
    limits practical file sizes to what the receiving process can buffer.

    The first missing chunk aborts the merge: nothing is written, and the
    session's working area is deleted. Abort is terminal; the client has
    to start a new transfer.
    """

    def __init__(
        self,
        storage: StorageGateway,
        layout: StorageLayout,
        retry: Optional[RetryConfig] = None,
        retry_strategy: Optional[RetryStrategy] = None
    ):
        """
        Initialize assembler.

        Args:
            storage: Storage gateway holding chunks and artifacts
            layout: Key layout for working areas and artifacts
            retry: Retry policy for the artifact write
            retry_strategy: Optional custom retry strategy
        """
        self._storage = storage
        self._layout = layout
        self._retry = retry or RetryConfig()
        self._strategy = retry_strategy or FixedDelayStrategy(self._retry.delay)

    async def assemble(self, session: UploadSession) -> AssemblyResult:
        """
        Assemble every chunk of session into the final artifact.

        Args:
            session: Session whose last chunk has been persisted

        Returns:
            AssemblyResult describing the completed or aborted merge
        """
        session.begin_assembly()
        session_id = session.session_id
        working_area = self._layout.working_area(session_id)
        logger.info(f"Assembling {session.file_name} for session {session_id} ({session.total_chunks} chunks)")

        try:
            return await self._assemble(session, working_area)
        except Exception as e:
            # Allocation failures for the buffer land here as well
            logger.exception(f"Assembly failed unexpectedly for session {session_id}")
            reason = _note_leftover(f"Assembly failed: {e!r}", await self._purge(working_area))
            if not session.state.is_terminal:
                session.abort(reason)
            return AssemblyResult(
                completed=False,
                session_id=session_id,
                reason=reason,
                error_kind=FailureKind.INTEGRITY
            )

    async def _assemble(self, session: UploadSession, working_area: str) -> AssemblyResult:
        session_id = session.session_id
        try:
            buffer = await self._merge(session)
        except IntegrityError as e:
            reason = _note_leftover(str(e), await self._purge(working_area))
            session.abort(reason)
            logger.error(f"Assembly aborted for session {session_id}: {e}")
            return AssemblyResult(
                completed=False,
                session_id=session_id,
                reason=reason,
                missing_ordinal=e.ordinal,
                error_kind=e.kind
            )

        if len(buffer) != session.total_size:
            logger.warning(
                f"Session {session_id} declared {session.total_size} bytes but chunks hold {len(buffer)}"
            )

        artifact_key = self._layout.artifact_key(session_id, session.file_name)
        try:
            await save_with_retry(
                self._storage, artifact_key, buffer,
                self._strategy, self._retry.max_retries, logger
            )
        except TransientStorageError as e:
            reason = _note_leftover(str(e), await self._purge(working_area))
            session.abort(reason)
            return AssemblyResult(
                completed=False,
                session_id=session_id,
                reason=reason,
                error_kind=FailureKind.STORAGE
            )

        size = len(buffer)
        del buffer
        leftover = await self._purge(working_area)
        session.complete(artifact_key)
        logger.info(f"Session {session_id} assembled into {artifact_key} ({size} bytes)")
        return AssemblyResult(
            completed=True,
            session_id=session_id,
            artifact_path=artifact_key,
            size=size,
            reason=leftover
        )

    async def _merge(self, session: UploadSession) -> bytearray:
        """
        Concatenate chunks 1..total_chunks.

        Raises:
            IntegrityError: On the first chunk that is missing or unreadable
        """
        buffer = bytearray(session.total_size)
        offset = 0
        for ordinal in range(1, session.total_chunks + 1):
            key = self._layout.chunk_key(session.session_id, session.file_name, ordinal)
            try:
                data = await self._storage.read_bytes(key)
            except FileNotFoundError:
                raise IntegrityError(
                    f"Chunk {ordinal} of {session.total_chunks} is missing", ordinal=ordinal
                )
            except TransientStorageError as e:
                raise IntegrityError(
                    f"Chunk {ordinal} of {session.total_chunks} is unreadable: {e}", ordinal=ordinal
                ) from e
            buffer[offset:offset + len(data)] = data
            offset += len(data)
            logger.debug(f"Merged chunk {ordinal} ({len(data)} bytes)")

        # Fewer bytes arrived than declared
        del buffer[offset:]
        return buffer

    async def _purge(self, working_area: str) -> Optional[str]:
        """
        Delete the working area.

        Returns:
            None once removed, otherwise a note describing what was left behind
        """
        try:
            await self._storage.delete_tree(working_area)
        except TransientStorageError as e:
            logger.error(f"Working area {working_area} could not be removed: {e}")
            return f"working area {working_area} was not removed: {e}"
        return None


def _note_leftover(reason: str, leftover: Optional[str]) -> str:
    return f"{reason}; {leftover}" if leftover else reason
