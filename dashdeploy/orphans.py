"""
Orphaned endpoints: HTTP methods deployed under a function's API resource
that no local endpoint of that function declares any more.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from dashdeploy.inventory import DeployedApi, DeployedResource
from dashdeploy.project import FunctionDef, endpoint_key

# Function name -> orphan keys ("<pathPart>~<method>") in remote order.
OrphanSet = dict[str, list[str]]


@dataclass
class OrphanedEndpointResult:
    """Result for a single orphaned endpoint."""

    function: str
    path_part: str
    method: str
    resource_id: str
    console_url: str = ""

    @property
    def key(self) -> str:
        return endpoint_key(self.path_part, self.method)

    def to_dict(self) -> dict[str, Any]:
        return {
            "function": self.function,
            "endpoint": self.key,
            "path_part": self.path_part,
            "method": self.method,
            "resource_id": self.resource_id,
            "console_url": self.console_url,
        }


def find_deployed_resource(
    name: str, deployed: Iterable[DeployedResource]
) -> DeployedResource | None:
    """First deployed resource whose path part equals ``name``, or None."""
    for resource in deployed:
        if resource.path_part == name:
            return resource
    return None


def _orphaned_methods(func: FunctionDef, resource: DeployedResource | None) -> list[str]:
    if resource is None:
        return []
    local_methods = {e.method for e in func.endpoints}
    # Only the method is compared: the resource is already matched by function name.
    return [m for m in resource.resource_methods if m not in local_methods]


def find_orphaned_endpoints(func: FunctionDef, deployed: Iterable[DeployedResource]) -> list[str]:
    """Orphan keys for one function. Empty when nothing is deployed under its name."""
    resource = find_deployed_resource(func.name, deployed)
    return [endpoint_key(resource.path_part, m) for m in _orphaned_methods(func, resource)]


def compute_orphans(
    functions: Iterable[FunctionDef], deployed: Iterable[DeployedResource]
) -> OrphanSet:
    """Orphan keys for every function, keyed by function name."""
    deployed = list(deployed)
    return {func.name: find_orphaned_endpoints(func, deployed) for func in functions}


def orphan_report(functions: Iterable[FunctionDef], api: DeployedApi) -> list[OrphanedEndpointResult]:
    """Flat list of orphaned endpoints with console links, for listings and exports."""
    results: list[OrphanedEndpointResult] = []
    for func in functions:
        resource = find_deployed_resource(func.name, api.resources)
        for method in _orphaned_methods(func, resource):
            results.append(
                OrphanedEndpointResult(
                    function=func.name,
                    path_part=resource.path_part,
                    method=method,
                    resource_id=resource.id,
                    console_url=api.console_url(resource),
                )
            )
    return results
