# /tests/conftest.py
import sys
import os
import json
import tempfile
from unittest.mock import patch

import pytest
from flask import Flask

# --- Path and environment setup (must run before importing the app) ---
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('FLASK_ENV', 'testing')
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='relay-test-logs-'))

from relay_app import create_app

TEST_CONFIG = {
    "TESTING": True,
    "DEBUG": False,
    "OPENAI_API_KEY": "sk-test",
    "OPENAI_ASSISTANT_ID": "asst_test",
    "OPENAI_API_BASE": "https://api.test/v1",
    "OPENAI_BETA_HEADER": "assistants=v1",
    "THREAD_TTL_SECONDS": 86400,
    "THREAD_CACHE_PREFIX": "",
}


class FakeRedis:
    """In-memory stand-in for the Redis calls the relay makes, with TTL support."""

    def __init__(self):
        self.now = 0.0
        self.store = {}
        self.get_calls = 0
        self.set_calls = 0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def get(self, key):
        self.get_calls += 1
        entry = self.store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.now >= expires_at:
            del self.store[key]
            return None
        return value

    def set(self, key, value, ex=None):
        self.set_calls += 1
        self.store[key] = (value, self.now + ex if ex is not None else None)
        return True

    def ttl(self, key):
        entry = self.store.get(key)
        if entry is None or entry[1] is None:
            return -1
        return int(entry[1] - self.now)

    def ping(self):
        return True


class FakeResponse:
    """Mimics the parts of ``requests.Response`` the relay uses."""

    def __init__(self, status_code=200, json_body=None, text="", chunks=None):
        self.status_code = status_code
        self._json = json_body
        self.text = text if json_body is None else json.dumps(json_body)
        self.chunks = list(chunks or [])
        self.close_calls = 0

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        return self._json

    def iter_content(self, chunk_size=None):
        for chunk in self.chunks:
            yield chunk

    def close(self):
        self.close_calls += 1


def sse_lines(*lines: str) -> bytes:
    return "".join(f"{line}\n" for line in lines).encode("utf-8")


def delta_line(text: str) -> str:
    return "data: " + json.dumps({"event": "thread.message.delta", "data": {"delta": text}}, ensure_ascii=False)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def app(fake_redis) -> Flask:
    """ Creates the test application instance using the factory. """
    test_app = create_app()
    test_app.config.from_mapping(TEST_CONFIG)
    test_app.redis_client = fake_redis
    yield test_app


@pytest.fixture
def client(app: Flask):
    """ Provides a Flask test client. """
    return app.test_client()


@pytest.fixture
def http_session_cls():
    """Patches the requests.Session class the app builds its shared provider session from."""
    with patch('relay_app.extensions.requests.Session') as session_cls:
        yield session_cls


@pytest.fixture
def mock_http(http_session_cls):
    """Yields the ``post`` mock of the shared provider session."""
    return http_session_cls.return_value.post
