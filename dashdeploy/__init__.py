"""Dash deploy - reconcile local functions with API Gateway and deploy interactively."""

from dashdeploy.command import COMMANDS, DashDeployRequest, dash_deploy
from dashdeploy.dispatch import DeployActions, DeploymentOutcome, dispatch
from dashdeploy.orphans import OrphanSet, compute_orphans, find_deployed_resource
from dashdeploy.regions import get_regions
from dashdeploy.selection import (
    Choice,
    Header,
    SelectionResult,
    build_checklist,
    build_choices,
    partition_selection,
)

__all__ = [
    "COMMANDS",
    "DashDeployRequest",
    "dash_deploy",
    "DeployActions",
    "DeploymentOutcome",
    "dispatch",
    "OrphanSet",
    "compute_orphans",
    "find_deployed_resource",
    "get_regions",
    "Choice",
    "Header",
    "SelectionResult",
    "build_checklist",
    "build_choices",
    "partition_selection",
]
