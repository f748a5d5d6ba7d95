"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from typing import Any

import pytest

# Settings are read once at import time.
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("APP_VERSION", "9.9.9")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CACHE_WARM_ON_STARTUP", "false")

from servicehealth.services import probe_registry  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the redis asyncio client."""

    def __init__(self, data: dict[str, Any] | None = None, error: Exception | None = None):
        self._data: dict[str, Any] = dict(data or {})
        self._error = error
        self.expirations: dict[str, int | None] = {}
        self.closed = False

    async def get(self, key: str) -> Any:
        if self._error is not None:
            raise self._error
        return self._data.get(key)

    async def set(self, key: str, value: Any, ex: int | None = None) -> bool:
        if self._error is not None:
            raise self._error
        self._data[key] = value
        self.expirations[key] = ex
        return True

    async def aclose(self) -> None:
        self.closed = True


class BrokenEngine:
    """Engine double whose connection attempts always fail."""

    def __init__(self, error: Exception):
        self._error = error

    def connect(self):
        raise self._error


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture(autouse=True)
def reset_probe_registry(monkeypatch):
    """Give every test fresh dependency singletons."""

    monkeypatch.setattr(probe_registry, "_engine", None)
    monkeypatch.setattr(probe_registry, "_cache_client", None)
    monkeypatch.setattr(probe_registry, "_aggregator", None)
    yield
