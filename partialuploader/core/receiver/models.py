"""
Data models for the receiver module.
"""
from dataclasses import dataclass
from http import HTTPStatus
from typing import Optional

from ..exceptions import FailureKind, PartialUploadError


@dataclass(frozen=True)
class ChunkUpload:
    """
    One chunk as delivered to the receiver.

    Attributes:
        session_id: Correlation id of the transfer
        ordinal: 1-based position of the chunk
        total_chunks: Declared chunk count
        total_size: Declared byte length of the whole file
        file_name: Logical output file name
        payload: Chunk bytes
        is_last: True if this delivery should trigger assembly
    """
    session_id: str
    ordinal: int
    total_chunks: int
    total_size: int
    file_name: str
    payload: bytes
    is_last: bool = False

    @property
    def size(self) -> int:
        """Returns payload size."""
        return len(self.payload) if self.payload else 0


@dataclass(frozen=True)
class ChunkReceipt:
    """
    Outcome of receiving one chunk.

    `status` is the HTTP status class the outcome maps to.
    """
    accepted: bool
    status: HTTPStatus
    session_id: Optional[str] = None
    message: str = ""
    error_kind: Optional[FailureKind] = None
    artifact_path: Optional[str] = None

    @classmethod
    def ok(cls, session_id: str, message: str = "accepted", artifact_path: Optional[str] = None) -> 'ChunkReceipt':
        return cls(
            accepted=True,
            status=HTTPStatus.OK,
            session_id=session_id,
            message=message,
            artifact_path=artifact_path
        )

    @classmethod
    def rejected(
        cls,
        session_id: Optional[str],
        error: PartialUploadError,
        status: HTTPStatus
    ) -> 'ChunkReceipt':
        return cls(
            accepted=False,
            status=HTTPStatus(error.status) if error.status else status,
            session_id=session_id,
            message=str(error),
            error_kind=error.kind
        )


@dataclass(frozen=True)
class AssemblyResult:
    """
    Outcome of assembling a session.

    Attributes:
        completed: True if the artifact was written
        session_id: Session that was assembled
        artifact_path: Storage key of the artifact
        size: Artifact size in bytes
        reason: Abort reason
        missing_ordinal: First chunk that was absent
        error_kind: Failure label when aborted
    """
    completed: bool
    session_id: str
    artifact_path: Optional[str] = None
    size: int = 0
    reason: Optional[str] = None
    missing_ordinal: Optional[int] = None
    error_kind: Optional[FailureKind] = None
