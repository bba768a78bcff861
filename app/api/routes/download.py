import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.api.routes.common import cors_headers, error_response, json_error
from app.errors import RetrievalError
from app.security.validators import parse_page_index
from app.services.retrieval import retrieve_page
from app.storage.base import SessionStore
from app.storage.registry import get_session_store

logger = logging.getLogger(__name__)

router = APIRouter()
CORS_HEADERS = cors_headers("GET, OPTIONS")


@router.options("/download-page")
def download_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.get("/download-page")
def download_page(
    session: Optional[str] = None,
    page: Optional[str] = None,
    store: SessionStore = Depends(get_session_store),
):
    """Return one page of a referenced-mode split as a PDF attachment."""
    if not session or not session.strip():
        return json_error(400, "Missing session or page parameter", "session is required", CORS_HEADERS)
    try:
        page_index = parse_page_index(page)
    except ValueError as e:
        return json_error(400, "Missing session or page parameter", str(e), CORS_HEADERS)

    try:
        artifact = retrieve_page(store, session.strip(), page_index)
    except RetrievalError as e:
        logger.info("Download miss for session %s page %d: %s", session, page_index, e.reason.value)
        return error_response(e, CORS_HEADERS)
    except Exception as e:
        logger.exception("Unexpected failure while downloading page")
        return json_error(500, "Failed to download page", str(e), CORS_HEADERS)

    headers = {
        **CORS_HEADERS,
        "Content-Disposition": f'attachment; filename="{artifact.filename}"',
        "Content-Length": str(artifact.size),
    }
    return Response(content=artifact.data, media_type="application/pdf", headers=headers)


@router.api_route("/download-page", methods=["HEAD", "POST", "PUT", "PATCH", "DELETE", "TRACE"])
def download_method_not_allowed():
    return json_error(405, "Method not allowed", headers=CORS_HEADERS)
