"""
``dash deploy``: pick stage and region, reconcile local definitions with the
deployed REST API, let the operator choose, then deploy/remove the choices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import boto3

from dashdeploy import config, prompts
from dashdeploy.actions import default_actions
from dashdeploy.dispatch import DeployActions, DeploymentOutcome, dispatch
from dashdeploy.errors import DashDeployError, NotInteractiveError
from dashdeploy.inventory import fetch_deployed_resources
from dashdeploy.orphans import compute_orphans
from dashdeploy.project import Project, list_local_functions
from dashdeploy.selection import build_checklist, partition_selection

logger = logging.getLogger(__name__)


@dataclass
class DashDeployRequest:
    stage: str | None = None
    region: str | None = None
    alias_function: str | None = None
    alias_endpoint: str | None = None
    alias_rest_api: str | None = None
    description: str | None = None

    def action_context(self) -> dict[str, Any]:
        """Options handed through to every action; their meaning belongs to the action."""
        return {
            "alias_function": self.alias_function,
            "alias_endpoint": self.alias_endpoint,
            "alias_rest_api": self.alias_rest_api,
            "description": self.description,
        }


def dash_deploy(
    request: DashDeployRequest,
    *,
    project: Project,
    session: boto3.Session | None = None,
    actions: DeployActions | None = None,
    interactive: bool | None = None,
    cwd: Path | None = None,
) -> DeploymentOutcome:
    """
    Run the interactive deploy.

    Raises:
        NotInteractiveError: before any prompt or remote call, when stdin/stdout is not a terminal.
        ProviderLookupError: the stage/region's REST API does not exist.
        ProviderRequestError: listing resources failed; DispatchError when a deploy stage failed.
        SelectionCancelledError: the operator aborted a prompt.
    """
    if interactive is None:
        interactive = config.is_interactive()
    if not interactive:
        raise NotInteractiveError()

    stage = prompts.prompt_select_stage("Choose a Stage: ", request.stage, project.get_stages())
    region = prompts.prompt_select_region(
        "Choose a Region in this Stage: ", request.region, project.get_regions(stage)
    )

    session = session or boto3.Session()
    deployed = fetch_deployed_resources(
        project, stage, region, session=session, page_limit=config.get_page_limit()
    )
    functions = list_local_functions(project, cwd)
    orphans = compute_orphans(functions, deployed)
    logger.info(
        "%d local functions, %d orphaned endpoints in %s (%s)",
        len(functions),
        sum(len(v) for v in orphans.values()),
        region,
        stage,
    )

    checklist = build_checklist(functions, orphans)
    picked = prompts.prompt_select_multi("Select the assets you wish to deploy:", checklist, "Deploy")
    selection = partition_selection(picked)
    if selection.is_empty():
        logger.info("Nothing selected")
        return DeploymentOutcome()

    if actions is None:
        actions = DeployActions(default_actions(project, session), **request.action_context())
    return dispatch(selection, stage, region, actions)


Command = Callable[..., DeploymentOutcome]

COMMANDS: dict[str, Command] = {
    "dash deploy": dash_deploy,
}


def run_command(name: str, request: Any, **kwargs: Any) -> DeploymentOutcome:
    try:
        handler = COMMANDS[name]
    except KeyError:
        raise DashDeployError(f"Unknown command '{name}'") from None
    return handler(request, **kwargs)
