import pytest
from fastapi.testclient import TestClient

from loan_office.core import health as health_module
from loan_office.db.session import get_database
from loan_office.main import app
from conftest import FailingAsyncSession, FakeAsyncSession

client = TestClient(app)


class _StubDatabase:
    """Hands out one prepared session through ``Database.session()``'s context-manager protocol."""

    def __init__(self, session) -> None:
        self._session = session

    def session(self):
        return self

    async def __aenter__(self):
        return self._session

    async def __aexit__(self, *exc_info):
        return False


@pytest.fixture(autouse=True)
def _mock_env(monkeypatch):
    monkeypatch.setattr(health_module.settings, "environment", "test")
    app.dependency_overrides[get_database] = lambda: _StubDatabase(FakeAsyncSession())
    yield
    app.dependency_overrides.clear()


def test_health_live_returns_ok() -> None:
    response = client.get("/api/v1/health/live")
    assert response.status_code == 200
    payload = response.json()
    assert payload.get("status") == "ok"
    assert "timestamp" in payload


def test_health_ready_ok(monkeypatch) -> None:
    async def ok_db(database):
        return {"status": "ok"}

    monkeypatch.setattr(health_module, "_check_db", ok_db)

    response = client.get("/api/v1/health/ready")
    assert response.status_code == 200
    payload = response.json()
    assert payload.get("status") == "ok"
    assert payload.get("ready") is True
    assert payload.get("environment") == "test"
    assert payload["checks"]["database"]["status"] == "ok"
    assert payload["checks"]["api"]["version"] == health_module.APP_VERSION


def test_health_ready_degraded(monkeypatch) -> None:
    async def bad_db(database):
        return {"status": "error", "error": "database unreachable"}

    monkeypatch.setattr(health_module, "_check_db", bad_db)

    response = client.get("/api/v1/health/ready")
    assert response.status_code == 200
    payload = response.json()
    assert payload.get("status") == "degraded"
    assert payload.get("ready") is False
    assert payload["checks"]["database"]["status"] == "error"


def test_legacy_health_route_reports_readiness(monkeypatch) -> None:
    async def ok_db(database):
        return {"status": "ok"}

    monkeypatch.setattr(health_module, "_check_db", ok_db)

    response = client.get("/api/v1/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload.get("ready") is True
    assert payload.get("version") == health_module.APP_VERSION


@pytest.mark.asyncio
async def test_check_db_pings_the_store() -> None:
    session = FakeAsyncSession()

    assert await health_module._check_db(_StubDatabase(session)) == {"status": "ok"}
    assert len(session.statements) == 1


@pytest.mark.asyncio
async def test_check_db_reports_unreachable_store() -> None:
    result = await health_module._check_db(_StubDatabase(FailingAsyncSession()))

    assert result == {"status": "error", "error": "database unreachable"}
