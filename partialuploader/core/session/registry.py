"""
In-process session registry.

Tracks the state of every session a receiver has seen.
"""
from collections import OrderedDict
from typing import Dict, Optional

from ..logging import get_logger
from .models import UploadSession

logger = get_logger('receiver.sessions')


class SessionRegistry:
    """
    Registry of upload sessions keyed by session id.

    Active sessions are kept until they finish. Finished sessions move to a
    bounded history so their outcome can still be looked up.

    Example:
        >>> registry = SessionRegistry()
        >>> session = registry.open("abc", "report.pdf", 25, 3)
        >>> registry.get("abc") is session
        True
    """

    def __init__(self, history_limit: int = 1024):
        """
        Initialize registry.

        Args:
            history_limit: Number of finished sessions to remember
        """
        self._active: Dict[str, UploadSession] = {}
        self._history: "OrderedDict[str, UploadSession]" = OrderedDict()
        self._history_limit = history_limit

    def open(
        self,
        session_id: str,
        file_name: str,
        total_size: int,
        total_chunks: int
    ) -> UploadSession:
        """
        Return the open session for session_id, creating it if needed.

        A chunk that arrives for a finished session starts a new transfer
        under the same id.
        """
        session = self._active.get(session_id)
        if session is not None and not session.state.is_terminal:
            return session

        session = UploadSession(
            session_id=session_id,
            file_name=file_name,
            total_size=total_size,
            total_chunks=total_chunks
        )
        self._active[session_id] = session
        self._history.pop(session_id, None)
        logger.debug(f"Session {session_id} opened for {file_name} ({total_chunks} chunks)")
        return session

    def get(self, session_id: str) -> Optional[UploadSession]:
        """Returns the active or finished session, if known."""
        return self._active.get(session_id) or self._history.get(session_id)

    def finish(self, session: UploadSession) -> None:
        """Move a terminal session to the history."""
        if self._active.get(session.session_id) is session:
            del self._active[session.session_id]
        self._history[session.session_id] = session
        self._history.move_to_end(session.session_id)
        while len(self._history) > self._history_limit:
            self._history.popitem(last=False)

    def __len__(self) -> int:
        return len(self._active)
