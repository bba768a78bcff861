import secrets
import time
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from app.models.artifact import PageArtifact


def new_session_id() -> str:
    """Hex nanosecond timestamp plus 64 random bits, e.g. ``17f0c3a1b2d4e5f6-9a3b...``."""
    return f"{time.time_ns():x}-{secrets.token_hex(8)}"


class SessionStore(ABC):
    """Time-bounded storage for the pages of one split, keyed by session id.

    Sessions are write-once: ``create`` makes all pages visible at the same time
    and nothing refreshes the TTL afterwards.
    """

    @abstractmethod
    def create(self, artifacts: Sequence[PageArtifact]) -> str:
        pass

    @abstractmethod
    def get(self, session_id: str, page_index: int) -> Optional[PageArtifact]:
        pass

    @abstractmethod
    def page_count(self, session_id: str) -> Optional[int]:
        """Number of pages in a live session, or None if it does not exist."""

    @abstractmethod
    def expire(self, session_id: str) -> None:
        pass

    def sweep(self) -> int:
        """Drop expired sessions; returns how many were removed."""
        return 0

    @abstractmethod
    def __len__(self) -> int:
        pass
