"""
Upload session models.

Contains the session entity and its explicit state machine.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Set

from ..exceptions import SessionStateError


class SessionState(Enum):
    """Lifecycle state of an upload session."""
    OPEN = "open"
    ASSEMBLING = "assembling"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.ABORTED)


_TRANSITIONS = {
    SessionState.OPEN: {SessionState.ASSEMBLING, SessionState.ABORTED},
    SessionState.ASSEMBLING: {SessionState.COMPLETED, SessionState.ABORTED},
    SessionState.COMPLETED: set(),
    SessionState.ABORTED: set(),
}


@dataclass
class UploadSession:
    """
    One logical file transfer.

    A session is created implicitly by its first chunk and destroyed by
    either assembly (COMPLETED) or abort (ABORTED).

    Attributes:
        session_id: Opaque correlation id, the working-area key
        file_name: Logical output file name
        total_size: Declared byte length of the final file
        total_chunks: Declared chunk count
        state: Current lifecycle state
        received: Ordinals persisted so far
        reason: Abort reason, if aborted
        artifact_path: Storage key of the artifact, if completed
    """
    session_id: str
    file_name: str
    total_size: int
    total_chunks: int
    state: SessionState = SessionState.OPEN
    received: Set[int] = field(default_factory=set)
    reason: Optional[str] = None
    artifact_path: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def record_chunk(self, ordinal: int) -> None:
        """Remember that a chunk was persisted."""
        if self.state is not SessionState.OPEN:
            raise SessionStateError(
                f"Session {self.session_id} is {self.state.value}, cannot accept chunk {ordinal}"
            )
        self.received.add(ordinal)
        self._touch()

    def begin_assembly(self) -> None:
        self._move_to(SessionState.ASSEMBLING)

    def complete(self, artifact_path: str) -> None:
        self._move_to(SessionState.COMPLETED)
        self.artifact_path = artifact_path

    def abort(self, reason: str) -> None:
        self._move_to(SessionState.ABORTED)
        self.reason = reason

    def to_dict(self) -> dict:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary representation
        """
        return {
            'sessionId': self.session_id,
            'filename': self.file_name,
            'totalSize': self.total_size,
            'totalChunks': self.total_chunks,
            'state': self.state.value,
            'receivedChunks': sorted(self.received),
            'reason': self.reason,
            'createdAt': self.created_at.isoformat(),
            'updatedAt': self.updated_at.isoformat(),
        }

    def _move_to(self, target: SessionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise SessionStateError(
                f"Session {self.session_id} cannot move from {self.state.value} to {target.value}"
            )
        self.state = target
        self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now()
