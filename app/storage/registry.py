"""Process-wide session store, created lazily on first use."""
import threading
from typing import Optional

from app.config import settings
from app.errors import SessionStoreUnavailableError
from app.storage.base import SessionStore
from app.storage.memory import InMemorySessionStore
from app.storage.redis_store import RedisSessionStore, connect

_store: Optional[SessionStore] = None
_store_lock = threading.Lock()


def _build_store(kind: str) -> SessionStore:
    if kind == "memory":
        return InMemorySessionStore()
    if kind == "redis":
        return RedisSessionStore(connect())
    raise SessionStoreUnavailableError(f"Unknown SESSION_STORE {kind!r}; expected 'memory' or 'redis'")


def get_session_store() -> SessionStore:
    """FastAPI dependency returning the shared store."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = _build_store(settings.SESSION_STORE)
    return _store


def reset_session_store() -> None:
    global _store
    with _store_lock:
        _store = None
