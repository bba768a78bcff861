import logging
import math
from typing import Callable, Optional, Sequence

import redis as r
from redis.client import Redis
from redis.exceptions import WatchError

from app.config import settings
from app.models.artifact import PageArtifact
from app.storage.base import SessionStore, new_session_id

logger = logging.getLogger(__name__)

KEY_PREFIX = "pdf_session:"
COUNT_FIELD = "count"


def connect(host: str = settings.REDIS_HOST, port: int = settings.REDIS_PORT, db: int = settings.REDIS_DB) -> Redis:
    return r.Redis(host=host, port=port, db=db, decode_responses=False)


class RedisSessionStore(SessionStore):
    """
    Shared store for multi-process deployments.

    Each session is a single hash (``count`` plus one field per page index) written
    in one MULTI/EXEC with an EXPIRE, so Redis evicts the whole session at once.
    """

    def __init__(
        self,
        client: Redis,
        ttl_seconds: float = settings.SESSION_TTL_SECONDS,
        id_factory: Callable[[], str] = new_session_id,
    ):
        self._redis = client
        self.ttl_seconds = ttl_seconds
        self._id_factory = id_factory

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{KEY_PREFIX}{session_id}"

    def create(self, artifacts: Sequence[PageArtifact]) -> str:
        mapping = {COUNT_FIELD: len(artifacts)}
        for artifact in artifacts:
            mapping[str(artifact.index)] = artifact.data
        ttl = max(1, math.ceil(self.ttl_seconds))

        # Existence check and write form one optimistic transaction under WATCH
        with self._redis.pipeline() as pipe:
            while True:
                session_id = self._id_factory()
                key = self._key(session_id)
                try:
                    pipe.watch(key)
                    if pipe.exists(key):
                        pipe.unwatch()
                        continue
                    pipe.multi()
                    pipe.hset(key, mapping=mapping)
                    pipe.expire(key, ttl)
                    pipe.execute()
                    break
                except WatchError:
                    continue
        logger.info("Created session %s with %d page(s) in redis", session_id, len(artifacts))
        return session_id

    def get(self, session_id: str, page_index: int) -> Optional[PageArtifact]:
        if page_index < 0:
            return None
        data = self._redis.hget(self._key(session_id), str(page_index))
        if data is None:
            return None
        return PageArtifact(index=page_index, data=data, size=len(data))

    def page_count(self, session_id: str) -> Optional[int]:
        raw = self._redis.hget(self._key(session_id), COUNT_FIELD)
        return None if raw is None else int(raw)

    def expire(self, session_id: str) -> None:
        self._redis.delete(self._key(session_id))

    def __len__(self) -> int:
        return sum(1 for _ in self._redis.scan_iter(match=f"{KEY_PREFIX}*"))
