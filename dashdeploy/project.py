"""
Local project definitions: functions, their HTTP endpoints and event triggers.

The project file is YAML: a name, stages with their regions and region
variables, and functions keyed by name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from dashdeploy.errors import ProjectConfigError

logger = logging.getLogger(__name__)

# Region variable naming the REST API; falls back to the project name.
API_NAME_VARIABLE = "apiGatewayApi"


def endpoint_key(path: str, method: str) -> str:
    """Key used for endpoints in choices and actions: ``<path>~<method>``."""
    return f"{path}~{method}"


def split_endpoint_key(key: str) -> tuple[str, str]:
    path, sep, method = key.rpartition("~")
    if not sep or not path or not method:
        raise ValueError(f"Not an endpoint key: {key!r}")
    return path, method


@dataclass(frozen=True)
class EndpointDef:
    path: str
    method: str
    function: str

    @property
    def key(self) -> str:
        return endpoint_key(self.path, self.method)


@dataclass(frozen=True)
class EventDef:
    name: str
    type: str


@dataclass
class FunctionDef:
    name: str
    path: str = ""
    endpoints: list[EndpointDef] = field(default_factory=list)
    events: list[EventDef] = field(default_factory=list)


@dataclass
class Project:
    name: str
    root: Path
    stages: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)
    functions: list[FunctionDef] = field(default_factory=list)

    def get_stages(self) -> list[str]:
        return list(self.stages)

    def get_regions(self, stage: str) -> list[str]:
        if stage not in self.stages:
            raise ProjectConfigError(f"Stage '{stage}' is not defined in project '{self.name}'")
        return list(self.stages[stage])

    def get_variables(self, stage: str, region: str) -> dict[str, Any]:
        regions = self.stages.get(stage, {})
        if region not in regions:
            raise ProjectConfigError(
                f"Region '{region}' is not defined in stage '{stage}' of project '{self.name}'"
            )
        return dict(regions[region].get("variables") or {})

    def endpoint_keys(self) -> set[str]:
        return {e.key for f in self.functions for e in f.endpoints}


def _parse_function(name: str, raw: Any) -> FunctionDef:
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ProjectConfigError(f"Function '{name}' must be a mapping")

    endpoints = []
    for ep in raw.get("endpoints") or []:
        try:
            endpoints.append(EndpointDef(path=str(ep["path"]), method=str(ep["method"]), function=name))
        except (KeyError, TypeError):
            raise ProjectConfigError(f"Function '{name}': endpoints need 'path' and 'method'") from None

    events = []
    seen_events: set[str] = set()
    for ev in raw.get("events") or []:
        try:
            event = EventDef(name=str(ev["name"]), type=str(ev["type"]))
        except (KeyError, TypeError):
            raise ProjectConfigError(f"Function '{name}': events need 'name' and 'type'") from None
        if event.name in seen_events:
            raise ProjectConfigError(f"Function '{name}': duplicate event '{event.name}'")
        seen_events.add(event.name)
        events.append(event)

    return FunctionDef(name=name, path=str(raw.get("path") or name), endpoints=endpoints, events=events)


def _parse_stages(raw: Any) -> dict[str, dict[str, dict[str, Any]]]:
    stages: dict[str, dict[str, dict[str, Any]]] = {}
    for stage, stage_conf in (raw or {}).items():
        regions: dict[str, dict[str, Any]] = {}
        for region, region_conf in ((stage_conf or {}).get("regions") or {}).items():
            regions[str(region)] = dict(region_conf or {})
        stages[str(stage)] = regions
    return stages


def parse_project(data: dict[str, Any], root: Path) -> Project:
    if not isinstance(data, dict) or not data.get("name"):
        raise ProjectConfigError("Project file must define a 'name'")
    functions_raw = data.get("functions") or {}
    if not isinstance(functions_raw, dict):
        raise ProjectConfigError("'functions' must be a mapping of name to definition")
    functions = [_parse_function(str(n), f) for n, f in functions_raw.items()]

    # Actions address endpoints and events by key alone, so keys must not collide.
    endpoint_owner: dict[str, str] = {}
    event_owner: dict[str, str] = {}
    for func in functions:
        for ep in func.endpoints:
            if ep.key in endpoint_owner:
                raise ProjectConfigError(
                    f"Endpoint '{ep.key}' is declared by both '{endpoint_owner[ep.key]}' and '{func.name}'"
                )
            endpoint_owner[ep.key] = func.name
        for ev in func.events:
            if ev.name in event_owner and event_owner[ev.name] != func.name:
                raise ProjectConfigError(
                    f"Event '{ev.name}' is declared by both '{event_owner[ev.name]}' and '{func.name}'"
                )
            event_owner[ev.name] = func.name

    return Project(
        name=str(data["name"]),
        root=root,
        stages=_parse_stages(data.get("stages")),
        functions=functions,
    )


def load_project(path: Path) -> Project:
    """Read and validate the project file at ``path``."""
    if not path.exists():
        raise ProjectConfigError(f"Project file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ProjectConfigError(f"Failed to parse {path}: {e}") from e
    project = parse_project(data, path.resolve().parent)
    logger.debug("Loaded project %s with %d functions from %s", project.name, len(project.functions), path)
    return project


def list_local_functions(project: Project, cwd: Path | None = None) -> list[FunctionDef]:
    """
    Functions in scope for the current working directory.

    From the project root (or outside the project) every function is in scope.
    Inside the project, only functions whose directory is at or below ``cwd``,
    or that contain ``cwd``, are returned. Project order is kept.
    """
    cwd = (cwd or Path.cwd()).resolve()
    root = project.root.resolve()
    if cwd == root or not cwd.is_relative_to(root):
        return list(project.functions)

    scoped = []
    for func in project.functions:
        func_dir = (root / func.path).resolve()
        if func_dir.is_relative_to(cwd) or cwd.is_relative_to(func_dir):
            scoped.append(func)
    return scoped
