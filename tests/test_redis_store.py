"""RedisSessionStore against a tiny in-test fake of the redis client commands it uses."""
import fnmatch

import pytest
from redis.exceptions import WatchError

from app.errors import RetrievalError, RetrievalReason
from app.models.artifact import PageArtifact
from app.services.retrieval import retrieve_page
from app.storage.redis_store import KEY_PREFIX, RedisSessionStore


class _FakePipeline:
    def __init__(self, client):
        self._client = client
        self._ops = []
        self._watched = {}

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.reset()

    def reset(self):
        self._ops = []
        self._watched = {}

    def watch(self, key):
        self._watched[key] = self._client.versions.get(key, 0)

    def unwatch(self):
        self._watched = {}

    def exists(self, key):
        return self._client.exists(key)

    def multi(self):
        if self._client.on_multi is not None:
            self._client.on_multi(self._client)

    def hset(self, key, mapping):
        self._ops.append(("hset", key, mapping))
        return self

    def expire(self, key, seconds):
        self._ops.append(("expire", key, seconds))
        return self

    def execute(self):
        ops, watched = self._ops, self._watched
        self.reset()
        if any(self._client.versions.get(k, 0) != v for k, v in watched.items()):
            raise WatchError("watched key changed")
        for op, key, arg in ops:
            if op == "hset":
                self._client.write(key, arg)
            else:
                self._client.ttls[key] = arg


class FakeRedis:
    def __init__(self):
        self.hashes = {}
        self.ttls = {}
        self.versions = {}
        self.on_multi = None

    def write(self, key, mapping):
        self.hashes.setdefault(key, {}).update(
            {k: v if isinstance(v, bytes) else str(v).encode() for k, v in mapping.items()}
        )
        self.versions[key] = self.versions.get(key, 0) + 1

    def pipeline(self, transaction=True):
        return _FakePipeline(self)

    def exists(self, key):
        return int(key in self.hashes)

    def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    def delete(self, *keys):
        for key in keys:
            self.hashes.pop(key, None)
            self.ttls.pop(key, None)
            self.versions[key] = self.versions.get(key, 0) + 1

    def scan_iter(self, match="*"):
        return [k for k in list(self.hashes) if fnmatch.fnmatch(k, match)]


def _artifacts(n):
    return [PageArtifact(index=i, data=b"page-%d" % i, size=6) for i in range(n)]


def test_create_writes_one_hash_with_ttl():
    client = FakeRedis()
    store = RedisSessionStore(client, ttl_seconds=600)
    session_id = store.create(_artifacts(2))

    key = KEY_PREFIX + session_id
    assert client.ttls[key] == 600
    assert store.page_count(session_id) == 2
    assert store.get(session_id, 1).data == b"page-1"
    assert store.get(session_id, 2) is None
    assert store.get(session_id, -1) is None
    assert len(store) == 1


def test_expire_removes_session_and_is_idempotent():
    store = RedisSessionStore(FakeRedis())
    session_id = store.create(_artifacts(1))
    store.expire(session_id)
    store.expire(session_id)

    with pytest.raises(RetrievalError) as exc_info:
        retrieve_page(store, session_id, 0)
    assert exc_info.value.reason == RetrievalReason.SESSION_NOT_FOUND


def test_page_not_found_distinguished():
    store = RedisSessionStore(FakeRedis())
    session_id = store.create(_artifacts(1))
    with pytest.raises(RetrievalError) as exc_info:
        retrieve_page(store, session_id, 5)
    assert exc_info.value.reason == RetrievalReason.PAGE_NOT_FOUND


def test_existing_key_forces_new_id():
    client = FakeRedis()
    client.hashes[KEY_PREFIX + "a-1"] = {"count": b"0"}
    ids = iter(["a-1", "a-2"])
    store = RedisSessionStore(client, id_factory=lambda: next(ids))
    assert store.create(_artifacts(1)) == "a-2"


def test_id_claimed_by_another_process_mid_transaction_is_retried():
    client = FakeRedis()
    other_key = KEY_PREFIX + "a-1"

    def _other_writer(c):
        # Another process writes the same key between WATCH and EXEC, once
        if other_key not in c.hashes:
            c.write(other_key, {"count": 1, "0": b"theirs"})

    client.on_multi = _other_writer
    ids = iter(["a-1", "a-2"])
    store = RedisSessionStore(client, id_factory=lambda: next(ids))

    assert store.create(_artifacts(1)) == "a-2"
    assert client.hashes[other_key]["0"] == b"theirs"
    assert store.get("a-2", 0).data == b"page-0"


def test_pages_are_keyed_by_artifact_index():
    store = RedisSessionStore(FakeRedis())
    session_id = store.create([PageArtifact(index=2, data=b"x", size=1)])
    assert store.get(session_id, 2).data == b"x"
    assert store.get(session_id, 0) is None
