"""Error taxonomy for decoding, splitting and retrieval.

Every error carries the HTTP status it maps to, a short client-facing message
and optional details. Routes convert them to ``{"error", "details"}`` bodies.
"""
from enum import Enum
from typing import Optional


class DecodeReason(str, Enum):
    EMPTY_PAYLOAD = "empty_payload"
    MISSING_PAYLOAD = "missing_payload"
    INVALID_BASE64 = "invalid_base64"


class SplitReason(str, Enum):
    TOO_LARGE = "too_large"
    INVALID_DOCUMENT = "invalid_document"
    PAGE_COPY_FAILED = "page_copy_failed"


class RetrievalReason(str, Enum):
    SESSION_NOT_FOUND = "session_not_found"
    PAGE_NOT_FOUND = "page_not_found"


class PdfSplitError(Exception):
    status_code = 500
    message = "Failed to process PDF"

    def __init__(self, details: Optional[str] = None):
        super().__init__(details or self.message)
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class DecodeError(PdfSplitError):
    status_code = 400

    _MESSAGES = {
        DecodeReason.EMPTY_PAYLOAD: "No PDF data provided",
        DecodeReason.MISSING_PAYLOAD: "No PDF data found in request body",
        DecodeReason.INVALID_BASE64: "PDF data is not valid base64",
    }

    def __init__(self, reason: DecodeReason, details: Optional[str] = None):
        self.reason = reason
        self.message = self._MESSAGES[reason]
        super().__init__(details)


class SplitError(PdfSplitError):
    def __init__(
        self,
        reason: SplitReason,
        details: Optional[str] = None,
        *,
        size: Optional[int] = None,
        page_index: Optional[int] = None,
    ):
        self.reason = reason
        self.size = size
        self.page_index = page_index
        if reason == SplitReason.TOO_LARGE:
            self.status_code = 413
            self.message = "PDF file too large"
        super().__init__(details)


class RetrievalError(PdfSplitError):
    status_code = 404

    _MESSAGES = {
        RetrievalReason.SESSION_NOT_FOUND: "Session not found or expired",
        RetrievalReason.PAGE_NOT_FOUND: "Page not found",
    }

    def __init__(self, reason: RetrievalReason):
        self.reason = reason
        self.message = self._MESSAGES[reason]
        super().__init__(None)


class SessionStoreUnavailableError(PdfSplitError):
    status_code = 503
    message = "Session store unavailable"
