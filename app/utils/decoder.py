"""Normalize an inbound request body into the raw bytes of the uploaded PDF.

Clients may send the document three ways: as base64 already flagged by the
transport (``Content-Transfer-Encoding: base64``), as a raw ``application/pdf``
body, or as a JSON object with the base64 document under the ``pdf`` key.
``classify_body`` picks the encoding from headers only; ``decode_body`` applies
the matching strategy.
"""
import base64
import binascii
import json
from enum import Enum
from typing import Optional, Union

from app.config import settings
from app.errors import DecodeError, DecodeReason

NATIVE_PDF_CONTENT_TYPES = (
    "application/pdf",
    "application/x-pdf",
    "application/octet-stream",
)
STRUCTURED_CONTENT_TYPES = ("application/json",)


class BodyEncoding(str, Enum):
    PREFLAGGED_BASE64 = "preflagged_base64"
    NATIVE_BINARY = "native_binary"
    STRUCTURED_JSON = "structured_json"
    UNKNOWN = "unknown"


def _media_type(content_type: Optional[str]) -> str:
    """Strip parameters (charset, boundary) and normalize case."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def classify_body(is_base64: bool, content_type: Optional[str]) -> BodyEncoding:
    if is_base64:
        return BodyEncoding.PREFLAGGED_BASE64
    media_type = _media_type(content_type)
    if media_type in NATIVE_PDF_CONTENT_TYPES:
        return BodyEncoding.NATIVE_BINARY
    if media_type in STRUCTURED_CONTENT_TYPES or media_type.endswith("+json"):
        return BodyEncoding.STRUCTURED_JSON
    return BodyEncoding.UNKNOWN


def _b64decode(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        value = value.strip()
        # Browsers reading files with FileReader.readAsDataURL prepend "data:...;base64,"
        if value.startswith("data:") and "," in value:
            value = value.split(",", 1)[1]
    try:
        return base64.b64decode(value, validate=False)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(DecodeReason.INVALID_BASE64, str(e))


def _payload_from_json(raw: bytes, field: str) -> Union[str, bytes]:
    try:
        parsed = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(DecodeReason.MISSING_PAYLOAD, f"Malformed JSON body: {e}")
    if not isinstance(parsed, dict):
        raise DecodeError(DecodeReason.MISSING_PAYLOAD, "JSON body must be an object")
    value = parsed.get(field)
    if not isinstance(value, str) or not value.strip():
        raise DecodeError(DecodeReason.MISSING_PAYLOAD, f"Field '{field}' is missing or empty")
    return value


def decode_body(
    raw: bytes,
    is_base64: bool = False,
    content_type: Optional[str] = None,
    *,
    payload_field: str = settings.PAYLOAD_FIELD,
) -> bytes:
    """Return the decoded PDF bytes or raise DecodeError. Never returns an empty buffer."""
    encoding = classify_body(is_base64, content_type)

    if encoding == BodyEncoding.PREFLAGGED_BASE64:
        document = _b64decode(raw)
    elif encoding == BodyEncoding.STRUCTURED_JSON:
        document = _b64decode(_payload_from_json(raw, payload_field))
    else:
        # NATIVE_BINARY and UNKNOWN both take the body as-is
        document = bytes(raw or b"")

    if not document:
        raise DecodeError(DecodeReason.EMPTY_PAYLOAD)
    return document


def read_mode_field(raw: bytes, content_type: Optional[str]) -> Optional[str]:
    """Return the optional ``mode`` field of a JSON body, or None for other bodies."""
    if classify_body(False, content_type) != BodyEncoding.STRUCTURED_JSON:
        return None
    try:
        parsed = json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        return None
    if isinstance(parsed, dict) and isinstance(parsed.get("mode"), str):
        return parsed["mode"]
    return None
