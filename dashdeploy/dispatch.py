"""Run the operator's selection through the deploy/remove actions and collect the results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from dashdeploy.actions import (
    ENDPOINT_DEPLOY,
    ENDPOINT_REMOVE,
    EVENT_DEPLOY,
    FUNCTION_DEPLOY,
    Action,
    ActionTable,
    get_action,
)
from dashdeploy.errors import DispatchError
from dashdeploy.selection import SelectionResult

logger = logging.getLogger(__name__)


@dataclass
class DeploymentOutcome:
    """Per-kind results. A kind nobody selected keeps an empty mapping."""

    deployed_functions: dict[str, Any] = field(default_factory=dict)
    deployed_endpoints: dict[str, Any] = field(default_factory=dict)
    deployed_events: dict[str, Any] = field(default_factory=dict)
    removed_endpoints: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "deployed_functions": dict(self.deployed_functions),
            "deployed_endpoints": dict(self.deployed_endpoints),
            "deployed_events": dict(self.deployed_events),
            "removed_endpoints": dict(self.removed_endpoints),
        }


class DeployActions:
    """
    The four operations dispatch needs, looked up lazily in an action table.

    Lookup happens only when a stage runs, so a missing deploy handler matters
    only if the operator actually selected something of that kind.
    """

    def __init__(self, table: ActionTable, **context: Any) -> None:
        self.table = table
        self.context = {k: v for k, v in context.items() if v is not None}

    def _call(self, name: str, stage: str, region: str, names: list[str], **kwargs: Any) -> dict[str, Any]:
        action: Action = get_action(self.table, name)
        return action(stage, region, list(names), **kwargs, **self.context)

    def deploy_functions(self, stage: str, region: str, names: list[str]) -> dict[str, Any]:
        return self._call(FUNCTION_DEPLOY, stage, region, names)

    def deploy_endpoints(self, stage: str, region: str, names: list[str]) -> dict[str, Any]:
        return self._call(ENDPOINT_DEPLOY, stage, region, names)

    def deploy_events(self, stage: str, region: str, names: list[str]) -> dict[str, Any]:
        return self._call(EVENT_DEPLOY, stage, region, names)

    def remove_endpoints(
        self, stage: str, region: str, names: list[str], skip_local_validation: bool = False
    ) -> dict[str, Any]:
        return self._call(ENDPOINT_REMOVE, stage, region, names, skip_local_validation=skip_local_validation)


def dispatch(
    selection: SelectionResult,
    stage: str,
    region: str,
    actions: DeployActions,
) -> DeploymentOutcome:
    """
    Deploy functions, then endpoints, then events, then remove orphaned endpoints.

    A stage with nothing selected is skipped without calling its action. The
    first failing stage stops the run: DispatchError carries the stage name and
    the outcome recorded so far, including any partial result the failing
    action reported.
    """
    outcome = DeploymentOutcome()
    stages = (
        (FUNCTION_DEPLOY, selection.functions, "deployed_functions",
         lambda names: actions.deploy_functions(stage, region, names)),
        (ENDPOINT_DEPLOY, selection.endpoints, "deployed_endpoints",
         lambda names: actions.deploy_endpoints(stage, region, names)),
        (EVENT_DEPLOY, selection.events, "deployed_events",
         lambda names: actions.deploy_events(stage, region, names)),
        (ENDPOINT_REMOVE, selection.removal_endpoints, "removed_endpoints",
         lambda names: actions.remove_endpoints(stage, region, names, skip_local_validation=True)),
    )

    for stage_name, names, attr, run in stages:
        if not names:
            continue
        logger.info("%s: %d selected in %s (%s)", stage_name, len(names), region, stage)
        try:
            result = run(list(names))
        except Exception as e:
            logger.error("%s failed in %s (%s): %s", stage_name, region, stage, e)
            # Keep what the failing action finished before it stopped.
            partial = getattr(e, "partial", None)
            if partial:
                setattr(outcome, attr, dict(partial))
            raise DispatchError(stage_name, outcome, e) from e
        setattr(outcome, attr, dict(result or {}))
    return outcome
