"""Shared helpers for the split and download routes: CORS headers and JSON error bodies."""
from typing import Dict, Optional

from fastapi.responses import JSONResponse

from app.errors import PdfSplitError


def cors_headers(methods: str) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Allow-Methods": methods,
    }


def json_error(
    status_code: int,
    error: str,
    details: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(body, status_code=status_code, headers=headers)


def error_response(exc: PdfSplitError, headers: Dict[str, str]) -> JSONResponse:
    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=headers)
