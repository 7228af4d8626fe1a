"""
Action table: action name -> handler.

Every handler is called as ``handler(stage, region, names, **context)`` and
returns a mapping of name -> result. Deploy handlers come from other packages
through the ``dashdeploy.actions`` entry point group or ``register_action``;
endpoint removal ships built in.
"""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from typing import Any, Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dashdeploy.errors import ActionNotRegisteredError, DashDeployError, ProviderLookupError, ProviderRequestError
from dashdeploy.inventory import apigateway_client, fetch_deployed_api
from dashdeploy.orphans import find_deployed_resource
from dashdeploy.project import Project, split_endpoint_key

logger = logging.getLogger(__name__)

FUNCTION_DEPLOY = "function deploy"
ENDPOINT_DEPLOY = "endpoint deploy"
EVENT_DEPLOY = "event deploy"
ENDPOINT_REMOVE = "endpoint remove"

ENTRY_POINT_GROUP = "dashdeploy.actions"

Action = Callable[..., dict[str, Any]]
ActionTable = dict[str, Action]


def register_action(table: ActionTable, name: str, handler: Action) -> None:
    if name in table:
        logger.info("Replacing handler for action '%s'", name)
    table[name] = handler


def get_action(table: ActionTable, name: str) -> Action:
    try:
        return table[name]
    except KeyError:
        raise ActionNotRegisteredError(name) from None


def load_entry_point_actions(table: ActionTable, group: str = ENTRY_POINT_GROUP) -> ActionTable:
    """Register handlers advertised by installed packages; entry point name is the action name."""
    for ep in entry_points(group=group):
        try:
            handler = ep.load()
        except Exception as e:
            raise DashDeployError(f"Failed to load action '{ep.name}' from {ep.value}: {e}") from e
        register_action(table, ep.name, handler)
    return table


def make_endpoint_remover(project: Project, session: boto3.Session | None = None) -> Action:
    """Built-in ``endpoint remove``: deletes deployed methods and redeploys the stage."""

    def remove_endpoints(
        stage: str,
        region: str,
        names: list[str],
        skip_local_validation: bool = False,
        description: str | None = None,
        **_context: Any,
    ) -> dict[str, Any]:
        if not skip_local_validation:
            local_keys = project.endpoint_keys()
            unknown = [n for n in names if n not in local_keys]
            if unknown:
                raise DashDeployError(f"Endpoints not defined locally: {', '.join(unknown)}")

        sess = session or boto3.Session()
        api = fetch_deployed_api(project, stage, region, session=sess)
        apigw = apigateway_client(sess, region)

        # Resolve everything first so an unknown name changes nothing remotely.
        targets = []
        for name in names:
            path_part, method = split_endpoint_key(name)
            resource = find_deployed_resource(path_part, api.resources)
            if resource is None or method not in resource.resource_methods:
                raise ProviderLookupError(f"Endpoint '{name}' is not deployed in {region} ({stage})")
            targets.append((name, resource, method))

        removed: dict[str, Any] = {}
        failed_name, cause = None, None
        for name, resource, method in targets:
            try:
                apigw.delete_method(restApiId=api.id, resourceId=resource.id, httpMethod=method)
            except (ClientError, BotoCoreError) as e:
                logger.exception("API Gateway error removing %s: %s", name, e)
                failed_name, cause = name, e
                break
            logger.info("Removed %s from REST API %s", name, api.id)
            removed[name] = {"resource_id": resource.id, "http_method": method, "removed": True}

        # Methods already deleted only take effect once the stage is redeployed.
        if removed:
            kwargs = {"restApiId": api.id, "stageName": stage}
            if description:
                kwargs["description"] = description
            try:
                apigw.create_deployment(**kwargs)
            except (ClientError, BotoCoreError) as e:
                logger.exception("API Gateway error deploying stage %s: %s", stage, e)
                if cause is None:
                    raise ProviderRequestError(
                        f"Failed to deploy stage {stage} of REST API {api.id}: {e}", partial=removed
                    ) from e

        if cause is not None:
            raise ProviderRequestError(
                f"Failed to remove endpoint {failed_name}: {cause}", partial=removed
            ) from cause
        return removed

    return remove_endpoints


def default_actions(project: Project, session: boto3.Session | None = None) -> ActionTable:
    table: ActionTable = {ENDPOINT_REMOVE: make_endpoint_remover(project, session)}
    return load_entry_point_actions(table)
