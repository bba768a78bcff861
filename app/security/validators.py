import re
from typing import Optional

from app.config import settings
from app.errors import SplitError, SplitReason

MAX_DOCUMENT_BYTES = settings.MAX_DOCUMENT_BYTES
# Largest request body that can still decode to MAX_DOCUMENT_BYTES: base64 growth plus a JSON envelope
MAX_UPLOAD_BYTES = MAX_DOCUMENT_BYTES * 4 // 3 + 64 * 1024

# Hex nanosecond timestamp, a dash, then 16 hex random characters
SESSION_ID_PATTERN = re.compile(r"^[0-9a-f]{1,20}-[0-9a-f]{16}$")


def validate_document_size(size: int, max_size: int = MAX_DOCUMENT_BYTES) -> None:
    """Raise SplitError(TOO_LARGE) if size exceeds max_size (default 6 MB)."""
    if size > max_size:
        mb = max_size // (1024 * 1024)
        actual_mb = size / (1024 * 1024)
        raise SplitError(
            SplitReason.TOO_LARGE,
            f"{actual_mb:.2f}MB exceeds maximum allowed size of {mb}MB",
            size=size,
        )


def validate_declared_length(
    content_length: Optional[str],
    max_upload: int = MAX_UPLOAD_BYTES,
    max_size: int = MAX_DOCUMENT_BYTES,
) -> None:
    """Reject a request from its Content-Length header before the body is read."""
    if not content_length or not content_length.strip().isdigit():
        return
    declared = int(content_length)
    if declared > max_upload:
        validate_document_size(declared, max_size)


def is_valid_session_id(session_id: Optional[str]) -> bool:
    return bool(session_id) and SESSION_ID_PATTERN.match(session_id) is not None


def parse_page_index(raw: Optional[str]) -> int:
    """Parse the ``page`` query parameter into a non-negative 0-based index."""
    if raw is None or not raw.strip():
        raise ValueError("Missing page parameter")
    try:
        index = int(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid page parameter: {raw!r}")
    if index < 0:
        raise ValueError(f"Page index must be non-negative, got {index}")
    return index
