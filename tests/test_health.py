import pytest
from fastapi.testclient import TestClient

from farmconnect.api.routes import health as health_routes
from farmconnect.main import app


async def _ok_check() -> dict[str, str]:
    return {"status": "ok"}


def _patch_checks(monkeypatch, **overrides) -> None:
    for name in ("_check_database", "_check_redis", "_check_celery_worker"):
        monkeypatch.setattr(health_routes, name, overrides.get(name, _ok_check))


def test_health_ok(monkeypatch) -> None:
    _patch_checks(monkeypatch)

    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "checks": {
            "database": {"status": "ok"},
            "redis": {"status": "ok"},
            "celery": {"status": "ok"},
        },
    }


def test_live_ok() -> None:
    response = TestClient(app).get("/live")
    assert response.status_code == 200
    assert response.json() == {"status": "live"}


def test_health_degrades_when_lock_store_is_down(monkeypatch) -> None:
    async def _failed_redis() -> dict[str, str]:
        return {"status": "failed", "error": "redis_unavailable"}

    _patch_checks(monkeypatch, _check_redis=_failed_redis)

    response = TestClient(app).get("/health")

    assert response.status_code == 503
    payload = response.json()
    assert payload["status"] == "degraded"
    assert payload["checks"]["redis"] == {"status": "failed", "error": "redis_unavailable"}


def test_ready_ignores_celery_workers(monkeypatch) -> None:
    async def _failed_celery() -> dict[str, str]:
        raise AssertionError("readiness must not call workers")

    _patch_checks(monkeypatch, _check_celery_worker=_failed_celery)

    response = TestClient(app).get("/ready")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ready",
        "checks": {
            "database": {"status": "ok"},
            "redis": {"status": "ok"},
        },
    }


def test_ready_not_ready_when_catalog_store_is_down(monkeypatch) -> None:
    async def _failed_database() -> dict[str, str]:
        return {"status": "failed", "error": "database_unavailable"}

    _patch_checks(monkeypatch, _check_database=_failed_database)

    response = TestClient(app).get("/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


@pytest.mark.asyncio
async def test_database_check_sanitizes_exception(monkeypatch) -> None:
    class _BrokenSession:
        async def __aenter__(self):
            raise RuntimeError("password=secret")

        async def __aexit__(self, exc_type, exc, tb) -> bool:
            return False

    monkeypatch.setattr(health_routes, "SessionLocal", lambda: _BrokenSession())

    result = await health_routes._check_database()
    assert result == {"status": "failed", "error": "database_unavailable"}


@pytest.mark.asyncio
async def test_redis_check_reports_unexpected_ping(monkeypatch) -> None:
    class _OddRedis:
        async def ping(self) -> str:
            return "PONG?"

        async def aclose(self) -> None:
            return None

    class _RedisFactory:
        @staticmethod
        def from_url(url: str) -> _OddRedis:
            del url
            return _OddRedis()

    monkeypatch.setattr(health_routes, "Redis", _RedisFactory)

    result = await health_routes._check_redis()
    assert result == {"status": "failed", "error": "redis_unexpected_ping_response"}


def test_celery_check_counts_workers(monkeypatch) -> None:
    class _Inspector:
        def ping(self) -> dict[str, dict[str, str]]:
            return {"worker@a": {"ok": "pong"}, "worker@b": {"ok": "pong"}}

    class _Control:
        def inspect(self, timeout: float) -> _Inspector:
            return _Inspector()

    monkeypatch.setattr(health_routes.celery_app, "control", _Control())

    assert health_routes._check_celery_worker_sync() == {"status": "ok", "workers": 2}


def test_celery_check_sanitizes_exception(monkeypatch) -> None:
    class _BrokenControl:
        def inspect(self, timeout: float):
            raise RuntimeError("broker-url=redis://secret")

    monkeypatch.setattr(health_routes.celery_app, "control", _BrokenControl())

    result = health_routes._check_celery_worker_sync()
    assert result == {"status": "failed", "error": "celery_unavailable"}
