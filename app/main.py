import asyncio
import logging

from fastapi import FastAPI, Request

from app.api.routes import download, health, split
from app.api.routes.common import error_response
from app.errors import PdfSplitError
from app.logging_config import configure_logging
from app.workers.sweeper import sweep_loop

configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="PDF Page Splitter API",
    version="0.1",
    description="Split an uploaded PDF into one PDF per page. Pages are returned inline or as short-lived download links.",
)

app.include_router(health.router, tags=["Health"])
app.include_router(split.router, tags=["Split"])
app.include_router(download.router, tags=["Split"])


@app.exception_handler(PdfSplitError)
async def pdf_split_error_handler(request: Request, exc: PdfSplitError):
    """Errors raised outside a route body, e.g. while resolving the session store."""
    if request.url.path.endswith("/download-page"):
        headers = download.CORS_HEADERS
    else:
        headers = split.CORS_HEADERS
    logger.warning("Request failed before reaching route: %s (%s)", exc.message, exc.details or "-")
    return error_response(exc, headers)


@app.on_event("startup")
async def startup_event():
    app.state.sweep_task = asyncio.create_task(sweep_loop())
    logger.info("Session sweep loop started")
