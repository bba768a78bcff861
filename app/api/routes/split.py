import base64
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from app.api.routes.common import cors_headers, error_response, json_error
from app.config import settings
from app.errors import PdfSplitError
from app.models.artifact import ResponseMode, SplitFile, SplitResponse
from app.security.validators import validate_declared_length
from app.storage.base import SessionStore
from app.storage.registry import get_session_store
from app.utils.decoder import decode_body, read_mode_field
from app.workers.splitter import split_document

logger = logging.getLogger(__name__)

router = APIRouter()
CORS_HEADERS = cors_headers("POST, OPTIONS")


def _resolve_mode(value: Optional[str]) -> ResponseMode:
    """Raise ValueError for anything other than inline/referenced."""
    return ResponseMode((value or settings.DEFAULT_RESPONSE_MODE).strip().lower())


def _is_preflagged_base64(request: Request) -> bool:
    return request.headers.get("content-transfer-encoding", "").strip().lower() == "base64"


@router.options("/split-pdf")
def split_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/split-pdf")
async def split_pdf(
    request: Request,
    mode: Optional[str] = None,
    store: SessionStore = Depends(get_session_store),
):
    """
    Split the uploaded PDF into one PDF per page.

    ``mode=inline`` embeds every page as base64; ``mode=referenced`` keeps the
    pages in a short-lived session and returns a download link per page.
    """
    try:
        validate_declared_length(request.headers.get("content-length"))
    except PdfSplitError as e:
        logger.warning("Rejected split request: %s (%s)", e.message, e.details or "-")
        return error_response(e, CORS_HEADERS)

    raw = await request.body()
    content_type = request.headers.get("content-type")

    try:
        response_mode = _resolve_mode(mode or read_mode_field(raw, content_type))
    except ValueError:
        return json_error(
            400,
            "Invalid mode",
            f"Expected one of: {', '.join(m.value for m in ResponseMode)}",
            CORS_HEADERS,
        )

    session_id = None
    try:
        document = decode_body(raw, _is_preflagged_base64(request), content_type)
        artifacts = await run_in_threadpool(split_document, document)
        if response_mode == ResponseMode.REFERENCED:
            session_id = await run_in_threadpool(store.create, artifacts)
    except PdfSplitError as e:
        logger.warning("Rejected split request: %s (%s)", e.message, e.details or "-")
        return error_response(e, CORS_HEADERS)
    except Exception as e:
        logger.exception("Unexpected failure while splitting PDF")
        return json_error(500, "Failed to process PDF", str(e), CORS_HEADERS)

    if session_id is not None:
        download_base = request.url_for("download_page")
        files = [
            SplitFile(
                page=a.page,
                filename=a.filename,
                size=a.size,
                download_url=str(download_base.include_query_params(session=session_id, page=a.index)),
            )
            for a in artifacts
        ]
    else:
        files = [
            SplitFile(
                page=a.page,
                filename=a.filename,
                size=a.size,
                data=base64.b64encode(a.data).decode("ascii"),
            )
            for a in artifacts
        ]

    logger.info(
        "Split PDF into %d page(s)",
        len(artifacts),
        extra={"mode": response_mode.value, "session": session_id},
    )
    payload = SplitResponse(total_pages=len(artifacts), files=files, session=session_id)
    return JSONResponse(payload.model_dump(by_alias=True, exclude_none=True), headers=CORS_HEADERS)


@router.api_route("/split-pdf", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "TRACE"])
def split_method_not_allowed():
    return json_error(405, "Method not allowed", headers=CORS_HEADERS)
