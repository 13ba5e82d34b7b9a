# tests/test_api_integration.py
"""
Integration Tests for the bragi-probe HTTP API.

Focus
-----
These tests verify the HTTP contract (camelCase body, enum values, 404s).
No real network is touched: the app factory receives a fabricated environment
list and an `httpx.MockTransport`.

Scenarios
---------
1. **Health Check**: Verify service is up without probing anything.
2. **Unreachable Frontend**: A dead environment is described as data in a 200.
3. **Full Chain**: Indices outside the backend prefix never appear.
4. **No Caching**: Each call is a fresh probe run.
5. **Error Handling**: Unknown environment names return 404.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from conftest import (
    DEV_STATUS,
    MUNIN_ADMIN_FR,
    OTHER_ADMIN_FR,
    healthy_routes,
    route_transport,
)
from fastapi.testclient import TestClient

from bragi_probe import __version__
from bragi_probe.api.app import create_app
from bragi_probe.core.environments import EnvironmentSpec
from bragi_probe.core.settings import Settings

DEV = EnvironmentSpec(name="dev", base_url="http://dev.example:4000")
STAGING = EnvironmentSpec(name="staging", base_url="http://bragi.dev.example:4000")


def _client(
    settings: Settings, environments: list[EnvironmentSpec], routes: dict[str, Any]
) -> TestClient:
    app = create_app(
        settings=settings, environments=environments, transport=route_transport(routes)
    )
    return TestClient(app)


@pytest.fixture  # type: ignore[misc]
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Client over two environments: `dev` is down, `staging` is fully up."""
    routes = healthy_routes(indices=[OTHER_ADMIN_FR, MUNIN_ADMIN_FR])
    with _client(settings, [DEV, STAGING], routes) as c:
        yield c


def test_health_check(client: TestClient) -> None:
    """GET /health should return 200 OK, version info and the environment count."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__
    assert data["environments"] == 2


def test_unreachable_frontend_is_reported_not_raised(settings: Settings) -> None:
    with _client(settings, [DEV], {}) as client:
        response = client.get("/environments")

    assert response.status_code == 200
    body = response.json()
    assert body["environmentsCount"] == 1
    (env,) = body["environments"]
    assert env["label"] == "dev"
    assert env["status"] == "BRAGI_NOT_AVAILABLE"
    assert env["elasticsearch"] is None


def test_list_environments_contract(client: TestClient) -> None:
    body = client.get("/environments").json()

    assert body["environmentsCount"] == len(body["environments"]) == 2
    dev, staging = body["environments"]
    assert dev["label"] == "dev"
    assert dev["status"] == "BRAGI_NOT_AVAILABLE"

    assert staging["status"] == "AVAILABLE"
    assert staging["version"] == "v1.14.0"
    es = staging["elasticsearch"]
    assert es["status"] == "AVAILABLE"
    assert es["indexPrefix"] == "munin"
    assert es["name"] == "dev-cluster"
    assert [i["label"] for i in es["indices"]] == ["munin_admin_fr"]

    index = es["indices"][0]
    assert index["placeType"] == "admin"
    assert index["coverage"] == "fr"
    assert index["private"] == "PUBLIC"
    assert index["count"] == 1234
    assert index["createdAt"].startswith("2020-06-12T09:30:15")
    assert index["updatedAt"] == staging["updatedAt"] == es["updatedAt"]


def test_backend_down_keeps_environment_available(settings: Settings) -> None:
    routes = {f"{STAGING.base_url}/status": DEV_STATUS}
    with _client(settings, [STAGING], routes) as client:
        env = client.get("/environments").json()["environments"][0]

    assert env["status"] == "AVAILABLE"
    assert env["elasticsearch"]["status"] == "NOT_AVAILABLE"
    assert env["elasticsearch"]["indices"] == []


def test_each_call_probes_again(client: TestClient) -> None:
    first = client.get("/environments").json()
    second = client.get("/environments").json()

    assert first["environments"][1]["updatedAt"] != second["environments"][1]["updatedAt"]


def test_single_environment_and_unknown_name(client: TestClient) -> None:
    response = client.get("/environments/staging")
    assert response.status_code == 200
    assert response.json()["label"] == "staging"

    missing = client.get("/environments/qa")
    assert missing.status_code == 404
    assert "not a known environment" in missing.json()["detail"]
    assert missing.json()["known"] == ["dev", "staging"]


def test_environments_loaded_from_file_at_startup(tmp_path: Path, settings: Settings) -> None:
    env_file = tmp_path / "env.json"
    env_file.write_text(json.dumps([{"env": "dev", "url": DEV.base_url}]), encoding="utf-8")
    file_settings = settings.model_copy(update={"environments_file": env_file})

    app = create_app(settings=file_settings, transport=route_transport({}))
    with TestClient(app) as client:
        body = client.get("/environments").json()

    assert [e["label"] for e in body["environments"]] == ["dev"]
