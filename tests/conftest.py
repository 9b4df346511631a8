"""Shared pytest fixtures for all tests."""

import base64
import io
import time

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from common.constants import SESSION_TTL_SECONDS
from filestore.blob_storage import BlobStore
from filestore.container import build_container
from filestore.database import Database
from filestore.main import create_app
from filestore.session_store import SessionStore


class FakeRedis:
    """
    In-memory stand-in for the subset of the redis client the session store
    uses. Expiry is evaluated against a clock that tests can move forward.
    """

    def __init__(self):
        self.data = {}
        self.offset = 0.0
        self.available = True

    def _now(self):
        return time.monotonic() + self.offset

    def advance(self, seconds):
        self.offset += seconds

    def _live(self, key):
        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._now():
            del self.data[key]
            return None
        return value

    def set(self, key, value, ex=None):
        expires_at = self._now() + ex if ex is not None else None
        self.data[key] = (value, expires_at)
        return True

    def get(self, key):
        return self._live(key)

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self._live(key) is not None:
                del self.data[key]
                removed += 1
        return removed

    def ping(self):
        if not self.available:
            import redis
            raise redis.ConnectionError("connection refused")
        return True


class RecordingQueue:
    """
    Thumbnail queue double that records (user_id, file_id) pairs.
    """

    def __init__(self):
        self.jobs = []
        self.fail_with = None

    def enqueue(self, user_id, file_id):
        if self.fail_with is not None:
            raise self.fail_with
        self.jobs.append((user_id, file_id))
        return f"job-{len(self.jobs)}"


@pytest.fixture
def database(tmp_path):
    """
    Temporary metadata database with the schema applied.
    """
    db = Database(str(tmp_path / "data" / "metadata.db"))
    db.init_schema()
    return db


@pytest.fixture
def blob_store(tmp_path):
    return BlobStore(str(tmp_path / "files"))


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def session_store(fake_redis):
    return SessionStore(fake_redis, SESSION_TTL_SECONDS)


@pytest.fixture
def thumbnail_queue():
    return RecordingQueue()


@pytest.fixture
def container(database, blob_store, session_store, thumbnail_queue):
    return build_container(database, blob_store, session_store, thumbnail_queue)


@pytest.fixture
def auth_service(container):
    return container.auth_service


@pytest.fixture
def file_service(container):
    return container.file_service


@pytest.fixture
def client(container):
    """Create FastAPI test client over the injected stores."""
    return TestClient(create_app(container))


def basic_auth(email, password):
    credentials = base64.b64encode(f"{email}:{password}".encode()).decode()
    return f"Basic {credentials}"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


def make_image_bytes(width=800, height=600, image_format="PNG", color=(200, 30, 30)):
    output = io.BytesIO()
    Image.new("RGB", (width, height), color).save(output, format=image_format)
    return output.getvalue()


@pytest.fixture
def png_bytes():
    return make_image_bytes()
