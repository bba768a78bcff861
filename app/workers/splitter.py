"""Split a PDF into one single-page PDF per page using pypdf."""
import io
import logging
from typing import List, Optional

from pypdf import PdfReader, PdfWriter

from app.errors import SplitError, SplitReason
from app.models.artifact import PageArtifact
from app.security.validators import MAX_DOCUMENT_BYTES, validate_document_size

logger = logging.getLogger(__name__)


def _open_document(data: bytes) -> PdfReader:
    try:
        reader = PdfReader(io.BytesIO(data))
        # Page tree is parsed lazily; touch it here so a broken tree fails as an invalid document
        len(reader.pages)
    except Exception as e:  # pypdf raises its own errors as well as builtins on corrupt input
        raise SplitError(SplitReason.INVALID_DOCUMENT, f"Could not read PDF: {e}")
    return reader


def _copy_page(reader: PdfReader, index: int) -> bytes:
    writer = PdfWriter()
    writer.add_page(reader.pages[index])
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def split_document(data: bytes, max_size: Optional[int] = None) -> List[PageArtifact]:
    """
    Split ``data`` into single-page PDFs, in ascending page order.
    The size limit is enforced before the document is parsed. A failure on any
    page aborts the whole split; a document with no pages yields an empty list.
    """
    validate_document_size(len(data), max_size or MAX_DOCUMENT_BYTES)

    reader = _open_document(data)
    total = len(reader.pages)

    artifacts = []
    for i in range(total):
        try:
            page_bytes = _copy_page(reader, i)
        except Exception as e:
            raise SplitError(
                SplitReason.PAGE_COPY_FAILED,
                f"Failed to copy page {i + 1}: {e}",
                page_index=i,
            )
        artifacts.append(PageArtifact(index=i, data=page_bytes, size=len(page_bytes)))

    logger.info("Split %d byte document into %d page(s)", len(data), total)
    return artifacts
