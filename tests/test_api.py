"""
TESTES - API HTTP
=================

App montada com fonte e store em memória (sem rede, sem banco).
"""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from imoveis_sync.api.main import create_app
from imoveis_sync.domain.exceptions import FetchError
from tests.utils import FEED_DOWN, FakeSource, FakeStore, make_listing


def make_client(settings, source=None, store=None, **kwargs) -> TestClient:
    app = create_app(settings=settings, source=source or FakeSource(), store=store)
    return TestClient(app, **kwargs)


# =============================================================================
# BÁSICO
# =============================================================================

def test_root_lists_endpoints(test_settings):
    with make_client(test_settings) as client:
        response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "running"
    assert body["endpoints"]["db_sync"] == "POST /imoveis/db-sync"


def test_unknown_route_returns_json_404(test_settings):
    with make_client(test_settings) as client:
        response = client.get("/nao-existe")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Route GET /nao-existe not found"
    assert "timestamp" in body


def test_unhandled_error_returns_json_500(test_settings):
    source = FakeSource(error=RuntimeError("bug"))
    with make_client(test_settings, source=source, raise_server_exceptions=False) as client:
        response = client.get("/imoveis")

    assert response.status_code == 500
    assert response.json()["error"] == "Internal Server Error"
    assert response.json()["path"] == "/imoveis"


def test_health_without_database(test_settings):
    with make_client(test_settings) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "not_configured"


def test_health_with_database(test_settings):
    with make_client(test_settings, store=FakeStore()) as client:
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["checks"]["database"] == "ok"


def test_health_database_down_returns_503(test_settings):
    store = FakeStore()

    async def ping():
        return False

    store.ping = ping
    with make_client(test_settings, store=store) as client:
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


# =============================================================================
# FEED
# =============================================================================

def test_list_imoveis(test_settings):
    source = FakeSource([make_listing("A1"), make_listing("A2")])
    with make_client(test_settings, source=source) as client:
        response = client.get("/imoveis")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "public, max-age=300"
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert body["data"][0]["codigo_imovel"] == "A1"
    assert body["data"][0]["fotos"] == []


def test_list_imoveis_fetch_failure(test_settings):
    with make_client(test_settings, source=FakeSource(error=FEED_DOWN)) as client:
        response = client.get("/imoveis")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Failed to fetch real estate data:")


def test_list_imoveis_sql(test_settings):
    source = FakeSource([make_listing("A1", titulo_imovel="Casa D'Água")])
    with make_client(test_settings, source=source) as client:
        response = client.get("/imoveis/sql")
        legacy = client.get("/imoveis-sql")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["data"][0].startswith('INSERT INTO "public"."imoveis_vale"')
    assert "'Casa D''Água'" in body["data"][0]
    assert legacy.json()["data"] == body["data"]


def test_list_imoveis_sql_fetch_failure(test_settings):
    source = FakeSource(error=FetchError("No data received from external API"))
    with make_client(test_settings, source=source) as client:
        response = client.get("/imoveis/sql")

    assert response.status_code == 500
    assert "No data received" in response.json()["error"]


# =============================================================================
# SINCRONIZAÇÃO
# =============================================================================

def test_db_sync(test_settings):
    store = FakeStore(active=["A", "B", "C"])
    source = FakeSource([make_listing(code) for code in ("B", "C", "D")])
    with make_client(test_settings, source=source, store=store) as client:
        response = client.post("/imoveis/db-sync")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert (body["added"], body["updated"], body["deleted"]) == (1, 2, 1)
    assert body["errors"] == []
    assert store.closed is True


def test_db_sync_partial_failure_still_200(test_settings):
    store = FakeStore(fail_codes=["N1"])
    source = FakeSource([make_listing("N0"), make_listing("N1")])
    with make_client(test_settings, source=source, store=store) as client:
        response = client.post("/db-sync")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["added"] == 1
    assert len(body["errors"]) == 1


def test_db_sync_without_database_returns_503(test_settings):
    with make_client(test_settings) as client:
        response = client.post("/imoveis/db-sync")

    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "error": "Database not configured",
        "timestamp": response.json()["timestamp"],
    }


def test_db_sync_in_progress_returns_409(test_settings):
    store = FakeStore()
    with make_client(test_settings, store=store) as client:
        client.app.state.sync_lock = MagicMock(locked=MagicMock(return_value=True))
        response = client.post("/imoveis/db-sync")

    assert response.status_code == 409
    assert response.json()["error"] == "Synchronization already in progress"
    assert store.operations == []


def test_sync_stats(test_settings):
    store = FakeStore(active=["A", "B"])
    source = FakeSource([make_listing("A")])
    with make_client(test_settings, source=source, store=store) as client:
        before = client.get("/imoveis/sync-stats").json()
        client.post("/imoveis/db-sync")
        after = client.get("/imoveis/sync-stats").json()

    assert before == {"total_properties": 2, "active_properties": 2, "last_sync": None}
    assert after["active_properties"] == 1
    assert after["last_sync"] is not None
