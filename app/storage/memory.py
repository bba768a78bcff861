import logging
import threading
import time
from typing import Callable, Dict, Optional, Sequence

from app.config import settings
from app.models.artifact import PageArtifact, Session
from app.storage.base import SessionStore, new_session_id

logger = logging.getLogger(__name__)


class InMemorySessionStore(SessionStore):
    """Process-local store. Expired sessions are dropped on access and by ``sweep``."""

    def __init__(
        self,
        ttl_seconds: float = settings.SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = new_session_id,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._id_factory = id_factory
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def _is_expired(self, session: Session, now: float) -> bool:
        return now - session.created_at >= self.ttl_seconds

    def _live_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._is_expired(session, self._clock()):
                del self._sessions[session_id]
                return None
            return session

    def create(self, artifacts: Sequence[PageArtifact]) -> str:
        pages = {a.index: a for a in artifacts}
        with self._lock:
            session_id = self._id_factory()
            while session_id in self._sessions:
                session_id = self._id_factory()
            self._sessions[session_id] = Session(
                session_id=session_id,
                pages=pages,
                created_at=self._clock(),
            )
        logger.info("Created session %s with %d page(s)", session_id, len(pages))
        return session_id

    def get(self, session_id: str, page_index: int) -> Optional[PageArtifact]:
        session = self._live_session(session_id)
        if session is None:
            return None
        return session.page(page_index)

    def page_count(self, session_id: str) -> Optional[int]:
        session = self._live_session(session_id)
        return None if session is None else len(session.pages)

    def expire(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def sweep(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [sid for sid, s in self._sessions.items() if self._is_expired(s, now)]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info("Swept %d expired session(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for s in self._sessions.values() if not self._is_expired(s, now))
