from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from dashdeploy.inventory import DeployedApi, DeployedResource
from dashdeploy.project import parse_project

PROJECT_DATA = {
    "name": "shop",
    "stages": {
        "dev": {
            "regions": {
                "us-east-1": {"variables": {"apiGatewayApi": "shop-api"}},
            }
        },
        "prod": {
            "regions": {
                "us-east-1": {},
                "eu-west-1": {"variables": {}},
            }
        },
    },
    "functions": {
        "users": {
            "path": "functions/users",
            "endpoints": [{"path": "users", "method": "GET"}],
            "events": [{"name": "users-nightly", "type": "schedule"}],
        },
        "orders": {
            "path": "functions/orders",
            "endpoints": [
                {"path": "orders", "method": "GET"},
                {"path": "orders", "method": "POST"},
            ],
        },
    },
}


@pytest.fixture
def project(tmp_path: Path):
    return parse_project(PROJECT_DATA, tmp_path)


@pytest.fixture
def deployed_resources() -> list[DeployedResource]:
    return [
        DeployedResource(id="root1", path_part="", path="/"),
        DeployedResource(
            id="res-users",
            path_part="users",
            path="/users",
            resource_methods={"GET": {}, "DELETE": {}},
        ),
        DeployedResource(
            id="res-orders",
            path_part="orders",
            path="/orders",
            resource_methods={"GET": {}, "POST": {}},
        ),
    ]


@pytest.fixture
def deployed_api(deployed_resources) -> DeployedApi:
    return DeployedApi(name="shop-api", id="api123", region="us-east-1", resources=deployed_resources)


def make_apigw_client(rest_api_pages: list[dict], resource_pages: list[dict]) -> MagicMock:
    """API Gateway client mock whose paginators return the given pages."""
    client = MagicMock()
    paginators = {
        "get_rest_apis": MagicMock(),
        "get_resources": MagicMock(),
    }
    paginators["get_rest_apis"].paginate.return_value = rest_api_pages
    paginators["get_resources"].paginate.return_value = resource_pages
    client.get_paginator.side_effect = lambda op: paginators[op]
    client.paginators = paginators
    return client


@pytest.fixture
def apigw_client() -> MagicMock:
    return make_apigw_client(
        rest_api_pages=[
            {"items": [{"id": "other", "name": "other-api"}]},
            {"items": [{"id": "api123", "name": "shop-api"}, {"id": "dup", "name": "shop-api"}]},
        ],
        resource_pages=[
            {"items": [{"id": "root1", "path": "/"}]},
            {
                "items": [
                    {
                        "id": "res-users",
                        "pathPart": "users",
                        "path": "/users",
                        "resourceMethods": {"GET": {}, "DELETE": {}},
                    }
                ]
            },
        ],
    )


@pytest.fixture
def session(apigw_client) -> MagicMock:
    sess = MagicMock()
    sess.client.return_value = apigw_client
    return sess
