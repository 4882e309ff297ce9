# tests/test_health.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from product_api.core.settings import Settings
from product_api.main import create_app
from tests.helpers import BASE, BrokenRepository, _assert_status, create_product


EXPECTED = {"status": "UP", "service": "product-api-test"}


@pytest.mark.timeout(5)
def test_health_ok(client: TestClient):
    r = client.get(f"{BASE}/health")
    _assert_status(r, 200)
    assert r.headers["content-type"].startswith("application/json")
    assert r.json() == EXPECTED


@pytest.mark.timeout(5)
def test_health_alias_for_dashboard(client: TestClient):
    r = client.get("/api/health")
    _assert_status(r, 200)
    assert r.json() == EXPECTED


@pytest.mark.timeout(5)
def test_health_is_stable_with_data(client: TestClient):
    """Stored data never changes the payload."""
    create_product(client)
    r1 = client.get(f"{BASE}/health")
    r2 = client.get(f"{BASE}/health")
    assert r1.json() == r2.json() == EXPECTED


@pytest.mark.timeout(5)
def test_health_does_not_touch_repository(settings: Settings):
    app = create_app(repository=BrokenRepository(), settings=settings)
    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.get(f"{BASE}/health")
        _assert_status(r, 200)
        assert r.json() == EXPECTED
        # while the products themselves fail
        _assert_status(c.get(BASE), 500)


@pytest.mark.timeout(5)
def test_service_name_comes_from_settings():
    app = create_app(
        repository=BrokenRepository(),
        settings=Settings(SERVICE_NAME="catalog", REPOSITORY_BACKEND="memory"),
    )
    with TestClient(app) as c:
        assert c.get(f"{BASE}/health").json() == {"status": "UP", "service": "catalog"}
