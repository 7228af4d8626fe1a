"""Checklist offered to the operator, and the partition of what they picked."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from dashdeploy.project import FunctionDef, split_endpoint_key

KIND_FUNCTION = "function"
KIND_ENDPOINT = "endpoint"
KIND_EVENT = "event"

REMOVAL_PREFIX = "x endpoint removal"


@dataclass(frozen=True)
class Header:
    """Non-selectable grouping entry, one per function."""

    label: str


@dataclass
class Choice:
    kind: str
    value: str
    label: str
    function: str
    removal: bool = False
    toggled: bool = False

    @property
    def uniqueness_kind(self) -> str:
        return "endpoint-removal" if self.removal else self.kind


@dataclass
class SelectionResult:
    functions: list[str] = field(default_factory=list)
    endpoints: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    removal_endpoints: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.functions or self.endpoints or self.events or self.removal_endpoints)

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected_functions": list(self.functions),
            "selected_endpoints": list(self.endpoints),
            "selected_events": list(self.events),
            "selected_removal_endpoints": list(self.removal_endpoints),
        }


def _removal_label(orphan: str) -> str:
    path_part, method = split_endpoint_key(orphan)
    return f"{REMOVAL_PREFIX} - {path_part} - {method}"


def build_checklist(
    functions: Iterable[FunctionDef], orphans: Mapping[str, list[str]]
) -> list[Header | Choice]:
    """
    Checklist entries grouped by function.

    Per function, in order: a header, the function itself, its endpoints, its
    orphaned endpoints (as removal choices), then its events.
    """
    entries: list[Header | Choice] = []
    for func in functions:
        name = func.name
        entries.append(Header(label=name))
        entries.append(Choice(KIND_FUNCTION, name, f"function - {name}", name))
        for ep in func.endpoints:
            entries.append(Choice(KIND_ENDPOINT, ep.key, f"endpoint - {ep.path} - {ep.method}", name))
        for orphan in orphans.get(name, []):
            entries.append(Choice(KIND_ENDPOINT, orphan, _removal_label(orphan), name, removal=True))
        for ev in func.events:
            entries.append(Choice(KIND_EVENT, ev.name, f"event - {ev.name} - {ev.type}", name))
    return entries


def build_choices(
    functions: Iterable[FunctionDef], orphans: Mapping[str, list[str]]
) -> list[Choice]:
    return [e for e in build_checklist(functions, orphans) if isinstance(e, Choice)]


def partition_selection(choices: Iterable[Choice]) -> SelectionResult:
    """Split toggled choices into the four selections, keeping checklist order."""
    result = SelectionResult()
    for choice in choices:
        if not choice.toggled:
            continue
        if choice.removal and choice.kind == KIND_ENDPOINT:
            result.removal_endpoints.append(choice.value)
        elif choice.kind == KIND_FUNCTION:
            result.functions.append(choice.value)
        elif choice.kind == KIND_ENDPOINT:
            result.endpoints.append(choice.value)
        elif choice.kind == KIND_EVENT:
            result.events.append(choice.value)
    return result
