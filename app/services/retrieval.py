from app.errors import RetrievalError, RetrievalReason
from app.models.artifact import PageArtifact
from app.security.validators import is_valid_session_id
from app.storage.base import SessionStore


def retrieve_page(store: SessionStore, session_id: str, page_index: int) -> PageArtifact:
    """Look up one stored page, telling an unknown session apart from an unknown page."""
    if not is_valid_session_id(session_id):
        raise RetrievalError(RetrievalReason.SESSION_NOT_FOUND)
    artifact = store.get(session_id, page_index)
    if artifact is not None:
        return artifact
    # Checked after the page lookup so a session expiring in between reads as expired
    if store.page_count(session_id) is None:
        raise RetrievalError(RetrievalReason.SESSION_NOT_FOUND)
    raise RetrievalError(RetrievalReason.PAGE_NOT_FOUND)
