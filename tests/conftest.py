"""Shared fixtures: in-process PDF generation and an app client with a fresh session store."""
from __future__ import annotations

import io
from typing import Callable

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfWriter

from app.main import app
from app.storage.memory import InMemorySessionStore
from app.storage.registry import get_session_store

BASE_WIDTH = 200


def build_pdf(pages: int) -> bytes:
    """A PDF with ``pages`` blank pages; page i is ``BASE_WIDTH + i`` points wide."""
    writer = PdfWriter()
    for i in range(pages):
        writer.add_blank_page(width=BASE_WIDTH + i, height=300)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def make_pdf() -> Callable[[int], bytes]:
    return build_pdf


@pytest.fixture
def base_width() -> int:
    return BASE_WIDTH


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore(ttl_seconds=600)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_session_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
