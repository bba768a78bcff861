import asyncio
import logging

from app.config import settings
from app.storage.registry import get_session_store

logger = logging.getLogger(__name__)


async def sweep_loop(interval: float = settings.SESSION_SWEEP_INTERVAL_SECONDS):
    """Periodically drop expired split sessions from the shared store."""
    while True:
        await asyncio.sleep(interval)
        try:
            get_session_store().sweep()
        except Exception:
            logger.exception("Session sweep failed")
