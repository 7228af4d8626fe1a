"""Interactive prompts (stage, region, checklist) built on questionary."""

from __future__ import annotations

import logging
from dataclasses import replace

import questionary

from dashdeploy.errors import ProjectConfigError, SelectionCancelledError
from dashdeploy.selection import Choice, Header

logger = logging.getLogger(__name__)


def _select_one(message: str, default: str | None, candidates: list[str], what: str) -> str:
    if default:
        if default not in candidates:
            raise ProjectConfigError(f"{what.capitalize()} '{default}' is not one of: {', '.join(candidates)}")
        return default
    if not candidates:
        raise ProjectConfigError(f"No {what}s are defined in this project")
    if len(candidates) == 1:
        # Auto-select if only one candidate exists
        logger.debug("Only one %s defined, using %s", what, candidates[0])
        return candidates[0]

    selected = questionary.select(message, choices=candidates).ask()
    if selected is None:
        raise SelectionCancelledError(f"No {what} selected")
    return selected


def prompt_select_stage(message: str, default: str | None, stages: list[str]) -> str:
    return _select_one(message, default, stages, "stage")


def prompt_select_region(message: str, default: str | None, regions: list[str]) -> str:
    return _select_one(message, default, regions, "region")


def prompt_select_multi(
    message: str,
    checklist: list[Header | Choice],
    confirm_label: str = "Deploy",
) -> list[Choice]:
    """
    Show the checklist and return every Choice with ``toggled`` set.

    Headers are rendered as separators and never come back.
    """
    q_choices: list[questionary.Choice | questionary.Separator] = []
    choices: list[Choice] = []
    for entry in checklist:
        if isinstance(entry, Header):
            q_choices.append(questionary.Separator(f"-- {entry.label}"))
            continue
        q_choices.append(questionary.Choice(title=entry.label, value=len(choices)))
        choices.append(entry)
    if not choices:
        logger.warning("Nothing to select")
        return []

    picked = questionary.checkbox(
        message,
        choices=q_choices,
        instruction=f"(space to toggle, enter to {confirm_label.lower()})",
    ).ask()
    if picked is None:
        raise SelectionCancelledError("Selection cancelled")

    picked_set = set(picked)
    return [replace(c, toggled=i in picked_set) for i, c in enumerate(choices)]
