"""Remote inventory: API Gateway resources deployed for a stage/region. Reusable by CLI and FastAPI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dashdeploy.config import MAX_PAGE_LIMIT
from dashdeploy.errors import ProviderLookupError, ProviderRequestError
from dashdeploy.project import API_NAME_VARIABLE, Project

logger = logging.getLogger(__name__)


def api_resource_console_url(region: str, api_id: str, resource_id: str) -> str:
    """AWS API Gateway console URL for a REST API resource (for hyperlinks in web app)."""
    return (
        f"https://{region}.console.aws.amazon.com/apigateway/home"
        f"?region={region}#/apis/{api_id}/resources/{resource_id}"
    )


@dataclass
class DeployedResource:
    """One resource of a deployed REST API, with the methods attached to it."""

    id: str
    path_part: str
    path: str = ""
    resource_methods: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "DeployedResource":
        return cls(
            id=item.get("id", ""),
            path_part=item.get("pathPart", ""),
            path=item.get("path", ""),
            # The root resource and bare path segments carry no resourceMethods key.
            resource_methods=dict(item.get("resourceMethods") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path_part": self.path_part,
            "path": self.path,
            "methods": list(self.resource_methods),
        }


def resolve_rest_api_name(project: Project, stage: str, region: str) -> str:
    """REST API name for the stage/region: the apiGatewayApi variable, else the project name."""
    return project.get_variables(stage, region).get(API_NAME_VARIABLE) or project.name


def resolve_api_id_by_name(apigw_client: Any, name: str) -> str:
    """
    Find the id of the REST API called ``name``.

    Pages through get_rest_apis; the first API with a matching name wins.

    Raises:
        ProviderLookupError: no REST API has that name.
        ProviderRequestError: the listing call failed.
    """
    try:
        paginator = apigw_client.get_paginator("get_rest_apis")
        for page in paginator.paginate():
            for api in page.get("items", []):
                if api.get("name") == name:
                    return api["id"]
    except (ClientError, BotoCoreError) as e:
        logger.exception("API Gateway error listing REST APIs: %s", e)
        raise ProviderRequestError(f"Failed to list REST APIs: {e}") from e
    raise ProviderLookupError(f"REST API '{name}' was not found")


def list_api_resources(
    apigw_client: Any,
    api_id: str,
    *,
    page_limit: int = MAX_PAGE_LIMIT,
) -> list[DeployedResource]:
    """
    All resources of a REST API, with their methods embedded.

    Args:
        apigw_client: boto3 API Gateway client for the region.
        api_id: REST API id.
        page_limit: Resources requested per call (API Gateway caps this at 500).

    Returns:
        DeployedResource list in the order API Gateway returns them.
    """
    page_limit = max(1, min(page_limit, MAX_PAGE_LIMIT))
    try:
        paginator = apigw_client.get_paginator("get_resources")
        resources: list[DeployedResource] = []
        for page in paginator.paginate(
            restApiId=api_id,
            embed=["methods"],
            PaginationConfig={"PageSize": page_limit},
        ):
            items = page.get("items", [])
            logger.debug("Fetched %d resources of %s", len(items), api_id)
            resources.extend(DeployedResource.from_api(item) for item in items)
        return resources
    except (ClientError, BotoCoreError) as e:
        logger.exception("API Gateway error listing resources of %s: %s", api_id, e)
        raise ProviderRequestError(f"Failed to list resources of REST API {api_id}: {e}") from e


@dataclass
class DeployedApi:
    """A resolved REST API and its resources for one stage/region."""

    name: str
    id: str
    region: str
    resources: list[DeployedResource] = field(default_factory=list)

    def console_url(self, resource: DeployedResource) -> str:
        return api_resource_console_url(self.region, self.id, resource.id)


def apigateway_client(session: boto3.Session, region: str) -> Any:
    try:
        return session.client("apigateway", region_name=region)
    except BotoCoreError as e:
        logger.exception("Could not create API Gateway client in %s", region)
        raise ProviderRequestError(f"Could not create API Gateway client in {region}: {e}") from e


def fetch_deployed_api(
    project: Project,
    stage: str,
    region: str,
    *,
    session: boto3.Session | None = None,
    page_limit: int = MAX_PAGE_LIMIT,
) -> DeployedApi:
    """Resolve the project's REST API for stage/region and list its deployed resources."""
    session = session or boto3.Session()
    rest_api_name = resolve_rest_api_name(project, stage, region)
    apigw = apigateway_client(session, region)
    api_id = resolve_api_id_by_name(apigw, rest_api_name)
    logger.info("Resolved REST API %s to %s in %s (%s)", rest_api_name, api_id, region, stage)
    return DeployedApi(
        name=rest_api_name,
        id=api_id,
        region=region,
        resources=list_api_resources(apigw, api_id, page_limit=page_limit),
    )


def fetch_deployed_resources(
    project: Project,
    stage: str,
    region: str,
    *,
    session: boto3.Session | None = None,
    page_limit: int = MAX_PAGE_LIMIT,
) -> list[DeployedResource]:
    return fetch_deployed_api(
        project, stage, region, session=session, page_limit=page_limit
    ).resources
