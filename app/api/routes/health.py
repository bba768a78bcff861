from fastapi import APIRouter, Depends

from app.storage.base import SessionStore
from app.storage.registry import get_session_store

router = APIRouter()


@router.get("/health")
def health(store: SessionStore = Depends(get_session_store)):
    return {"status": "ok", "sessions": len(store)}
