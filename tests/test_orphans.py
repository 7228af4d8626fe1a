from __future__ import annotations

from dashdeploy.inventory import DeployedResource
from dashdeploy.orphans import (
    compute_orphans,
    find_deployed_resource,
    find_orphaned_endpoints,
    orphan_report,
)
from dashdeploy.project import EndpointDef, FunctionDef


def _func(name: str, *methods: str) -> FunctionDef:
    return FunctionDef(name=name, endpoints=[EndpointDef(name, m, name) for m in methods])


def test_users_delete_is_orphaned(project, deployed_resources) -> None:
    orphans = compute_orphans(project.functions, deployed_resources)
    assert orphans == {"users": ["users~DELETE"], "orders": []}


def test_function_without_deployed_resource_has_no_orphans() -> None:
    func = _func("payments", "GET")
    deployed = [DeployedResource(id="r", path_part="users", resource_methods={"GET": {}})]
    assert find_orphaned_endpoints(func, deployed) == []
    assert compute_orphans([func], deployed) == {"payments": []}


def test_empty_listing_has_no_orphans() -> None:
    assert compute_orphans([_func("users", "GET")], []) == {"users": []}


def test_deployed_resource_without_methods() -> None:
    deployed = [DeployedResource(id="r", path_part="users")]
    assert find_orphaned_endpoints(_func("users"), deployed) == []


def test_methods_compared_case_sensitively_in_remote_order() -> None:
    deployed = [
        DeployedResource(
            id="r",
            path_part="users",
            resource_methods={"PUT": {}, "get": {}, "GET": {}, "DELETE": {}},
        )
    ]
    assert find_orphaned_endpoints(_func("users", "GET"), deployed) == [
        "users~PUT",
        "users~get",
        "users~DELETE",
    ]


def test_function_without_endpoints_orphans_every_method() -> None:
    deployed = [DeployedResource(id="r", path_part="users", resource_methods={"GET": {}, "POST": {}})]
    assert find_orphaned_endpoints(_func("users"), deployed) == ["users~GET", "users~POST"]


def test_path_is_not_rechecked() -> None:
    func = FunctionDef(name="users", endpoints=[EndpointDef("users/{id}", "GET", "users")])
    deployed = [DeployedResource(id="r", path_part="users", resource_methods={"GET": {}})]
    assert find_orphaned_endpoints(func, deployed) == []


def test_first_matching_resource_wins() -> None:
    first = DeployedResource(id="a", path_part="users", resource_methods={"POST": {}})
    second = DeployedResource(id="b", path_part="users", resource_methods={"DELETE": {}})
    assert find_deployed_resource("users", [first, second]) is first
    assert find_orphaned_endpoints(_func("users"), [first, second]) == ["users~POST"]


def test_find_deployed_resource_absent() -> None:
    assert find_deployed_resource("users", []) is None


def test_compute_orphans_accepts_iterators(project, deployed_resources) -> None:
    orphans = compute_orphans(iter(project.functions), iter(deployed_resources))
    assert orphans["users"] == ["users~DELETE"]


def test_orphan_report(project, deployed_api) -> None:
    results = orphan_report(project.functions, deployed_api)
    assert len(results) == 1
    assert results[0].to_dict() == {
        "function": "users",
        "endpoint": "users~DELETE",
        "path_part": "users",
        "method": "DELETE",
        "resource_id": "res-users",
        "console_url": deployed_api.console_url(deployed_api.resources[1]),
    }
