from __future__ import annotations

from io import BytesIO
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from dashdeploy.errors import ProviderLookupError, ProviderRequestError
from dashdeploy.main import app

PARAMS = {"stage": "dev", "region": "us-east-1"}


@pytest.fixture
def mock_fetch(project, deployed_api):
    with patch("dashdeploy.main.load_project", return_value=project), patch(
        "dashdeploy.main.fetch_deployed_api", return_value=deployed_api
    ) as mock_fetch:
        yield mock_fetch


@pytest.fixture
def client(mock_fetch) -> TestClient:
    return TestClient(app)


def test_root(client) -> None:
    assert client.get("/").json()["service"] == "dash-deploy"


def test_regions(client) -> None:
    assert "us-east-1" in client.get("/api/regions").json()["regions"]


def test_orphaned_endpoints(client, mock_fetch) -> None:
    resp = client.get("/api/orphaned-endpoints", params=PARAMS)
    assert resp.status_code == 200
    assert [r["endpoint"] for r in resp.json()] == ["users~DELETE"]
    assert mock_fetch.call_args.args[1:] == ("dev", "us-east-1")


def test_orphaned_endpoints_requires_stage(client) -> None:
    assert client.get("/api/orphaned-endpoints", params={"region": "us-east-1"}).status_code == 422


def test_orphaned_endpoints_unknown_api(client, mock_fetch) -> None:
    mock_fetch.side_effect = ProviderLookupError("REST API 'shop' was not found")
    resp = client.get("/api/orphaned-endpoints", params={"stage": "prod", "region": "us-east-1"})
    assert resp.status_code == 404
    assert "shop" in resp.json()["detail"]


def test_orphaned_endpoints_provider_failure(client, mock_fetch) -> None:
    mock_fetch.side_effect = ProviderRequestError("throttled")
    assert client.get("/api/orphaned-endpoints", params=PARAMS).status_code == 502


def test_export(client) -> None:
    resp = client.get("/api/orphaned-endpoints/export", params=PARAMS)
    assert resp.status_code == 200
    assert "orphaned-endpoints-dev-us-east-1.xlsx" in resp.headers["content-disposition"]
    ws = load_workbook(BytesIO(resp.content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0] == ("Function", "Endpoint", "Method", "Resource ID", "Console URL")
    assert rows[1][:4] == ("users", "users~DELETE", "DELETE", "res-users")
