"""HTTP tests for the welcome, liveness and readiness endpoints."""

from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from conftest import FakeRedis
from servicehealth.core.config import get_settings
from servicehealth.dependencies import get_health_aggregator, get_probe_factory
from servicehealth.errors import ProbeAdvisory
from servicehealth.main import app
from servicehealth.services import probe_registry
from servicehealth.services.health_aggregator import HealthAggregator


async def _succeeds() -> None:
    return None


async def _cache_empty() -> None:
    raise ProbeAdvisory("Cache key 'health-check' is not populated.")


async def _connection_refused() -> None:
    raise ConnectionRefusedError("connection refused")


@pytest.fixture
def client():
    app.dependency_overrides[get_health_aggregator] = lambda: HealthAggregator(timeout=0.5)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def use_probes(*probes):
    app.dependency_overrides[get_probe_factory] = lambda: (lambda: list(probes))


class TestWelcome:
    def test_root_returns_service_details(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "Service Health"
        assert data["version"] == "9.9.9"
        assert data["docs"] == "/api/docs"
        assert data["message"].startswith("Welcome")


class TestLiveness:
    def test_health_reports_environment_and_version(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"status", "timestamp", "environment", "version"}
        assert data["status"] == "healthy"
        assert data["environment"] == "testing"
        assert data["version"] == "9.9.9"
        assert datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00")).tzinfo is not None

    def test_health_never_consults_probes(self, client):
        calls = []

        def factory():
            calls.append("built")
            return [("database", _connection_refused)]

        app.dependency_overrides[get_probe_factory] = lambda: factory

        response = client.get("/health")

        assert response.status_code == 200
        assert calls == []


class TestReadiness:
    def test_all_dependencies_ok(self, client):
        use_probes(("database", _succeeds), ("cache", _succeeds))

        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "checks": {"database": "ok", "cache": "ok"}}

    def test_missing_cache_entry_is_a_warning(self, client):
        use_probes(("database", _succeeds), ("cache", _cache_empty))

        response = client.get("/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"] == {"database": "ok", "cache": "warning"}
        assert data["details"] == {"cache": "Cache key 'health-check' is not populated."}

    def test_database_failure_is_not_ready(self, client):
        use_probes(("database", _connection_refused), ("cache", _succeeds))

        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json() == {
            "status": "not ready",
            "checks": {"database": "error", "cache": "ok"},
            "details": {"database": "connection refused"},
        }

    def test_checks_keep_registration_order(self, client):
        use_probes(("queue", _succeeds), ("database", _succeeds), ("cache", _cache_empty))

        response = client.get("/ready")

        assert list(response.json()["checks"]) == ["queue", "database", "cache"]

    def test_probe_assembly_failure_degrades_to_flat_error(self, client):
        def factory():
            raise RuntimeError("database driver missing")

        app.dependency_overrides[get_probe_factory] = lambda: factory

        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "not ready", "error": "database driver missing"}

    def test_aggregator_failure_degrades_to_flat_error(self, client):
        use_probes(("database", _succeeds), ("database", _succeeds))

        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "not ready", "error": "Duplicate probe name 'database'."}


class TestLifecycle:
    def test_startup_warms_cache_and_shutdown_closes_it(self, monkeypatch):
        fake = FakeRedis()
        monkeypatch.setattr(probe_registry, "_cache_client", fake)
        monkeypatch.setattr(get_settings(), "CACHE_WARM_ON_STARTUP", True)
        monkeypatch.setattr(get_settings(), "CACHE_HEALTH_TTL_SECONDS", 30)

        with TestClient(app):
            assert fake.expirations == {"health-check": 30}

        assert fake.closed is True

    def test_warm_up_failure_does_not_block_startup(self, monkeypatch):
        monkeypatch.setattr(probe_registry, "_cache_client", FakeRedis(error=ConnectionError("redis down")))
        monkeypatch.setattr(get_settings(), "CACHE_WARM_ON_STARTUP", True)

        with TestClient(app) as test_client:
            assert test_client.get("/health").status_code == 200
