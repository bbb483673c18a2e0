"""
Data models for the sender module.

Uses dataclasses for immutable, type-safe data structures.
"""
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from ...exceptions import FailureKind, EXCEPTIONS_BY_KIND
from ...storage.layout import chunk_file_name


def new_session_id() -> str:
    """Generate a fresh correlation id for one transfer."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ChunkInfo:
    """
    Information about a file chunk.

    Attributes:
        ordinal: 1-based chunk position
        start: Start position in bytes
        end: End position in bytes
    """
    ordinal: int
    start: int
    end: int

    @property
    def size(self) -> int:
        """Returns chunk size."""
        return self.end - self.start


@dataclass(frozen=True)
class ChunkRequest:
    """
    One chunk as sent over the wire.

    Attributes:
        session_id: Correlation id of the transfer
        ordinal: 1-based chunk position
        total_chunks: Number of chunks in the transfer
        total_size: Size of the whole file
        file_name: Logical output file name
        payload: Chunk bytes
    """
    session_id: str
    ordinal: int
    total_chunks: int
    total_size: int
    file_name: str
    payload: bytes

    @property
    def is_last(self) -> bool:
        return self.ordinal == self.total_chunks

    @property
    def part_name(self) -> str:
        """Name of the binary part, which carries the ordinal."""
        return chunk_file_name(self.file_name, self.ordinal)

    def form_fields(self) -> Dict[str, str]:
        """Returns the metadata fields of the multipart form."""
        return {
            'sessionId': self.session_id,
            'isDone': 'true' if self.is_last else 'false',
            'totalSize': str(self.total_size),
            'totalChunks': str(self.total_chunks),
            'filename': self.file_name,
        }


@dataclass
class SendProgress:
    """
    Send progress information.

    Attributes:
        total_chunks: Total number of chunks
        sent_chunks: Number of chunks sent
        total_bytes: Total file size
        sent_bytes: Bytes sent so far
    """
    total_chunks: int
    sent_chunks: int = 0
    total_bytes: int = 0
    sent_bytes: int = 0

    @property
    def percentage(self) -> float:
        """Returns progress as percentage."""
        if self.total_chunks == 0:
            return 0.0
        return (self.sent_chunks / self.total_chunks) * 100

    @property
    def is_complete(self) -> bool:
        """Returns True if every chunk was sent."""
        return self.sent_chunks >= self.total_chunks


@dataclass(frozen=True)
class SendResult:
    """
    Result of sending a file.

    Every outcome, success or failure, has this shape.

    Attributes:
        id: Session id of the transfer (None for soft failures)
        success: True if every chunk was accepted
        message: 'uploaded' or an explanation of the failure
        error_kind: Failure label
        fatal: True if a multi-chunk transfer was aborted part way
        chunks_sent: Chunks accepted by the receiver
        status: Last HTTP status seen for the failing chunk
    """
    id: Optional[str]
    success: bool
    message: str
    error_kind: Optional[FailureKind] = None
    fatal: bool = False
    chunks_sent: int = 0
    status: Optional[int] = None

    @classmethod
    def uploaded(cls, session_id: str, chunks_sent: int) -> 'SendResult':
        return cls(id=session_id, success=True, message="uploaded", chunks_sent=chunks_sent)

    @classmethod
    def failure(
        cls,
        message: str,
        kind: FailureKind,
        session_id: Optional[str] = None,
        fatal: bool = False,
        chunks_sent: int = 0,
        status: Optional[int] = None
    ) -> 'SendResult':
        return cls(
            id=session_id,
            success=False,
            message=message,
            error_kind=kind,
            fatal=fatal,
            chunks_sent=chunks_sent,
            status=status
        )

    def raise_for_status(self) -> None:
        """
        Raise the exception matching a failed result.

        Raises:
            PartialUploadError: Subclass matching error_kind
        """
        if self.success:
            return
        exc_type = EXCEPTIONS_BY_KIND[self.error_kind or FailureKind.VALIDATION]
        raise exc_type(self.message, status=self.status)
