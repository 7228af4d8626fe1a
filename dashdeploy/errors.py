"""Errors raised by dash-deploy. Scripts turn these into a message and exit status 1."""

from __future__ import annotations

from typing import Any


class DashDeployError(Exception):
    """Base class for every error dash-deploy raises on purpose."""


class NotInteractiveError(DashDeployError):
    def __init__(self, message: str = "Sorry, this is only available in interactive mode") -> None:
        super().__init__(message)


class ProjectConfigError(DashDeployError):
    """Project file is missing or malformed."""


class ProviderLookupError(DashDeployError):
    """A named remote resource (REST API) could not be resolved."""


class ProviderRequestError(DashDeployError):
    """
    A call to the provider failed.

    ``partial`` maps the names an action finished before the failure to their
    results; it is empty when nothing was changed remotely.
    """

    def __init__(self, message: str, *, partial: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.partial = dict(partial or {})


class DispatchError(ProviderRequestError):
    """
    A dispatch stage failed.

    ``outcome`` holds whatever the earlier stages recorded before the failure,
    so callers can still report what was deployed.
    """

    def __init__(self, stage: str, outcome: Any, cause: BaseException) -> None:
        super().__init__(f"{stage} failed: {cause}")
        self.stage = stage
        self.outcome = outcome


class ActionNotRegisteredError(DashDeployError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No handler registered for action '{name}'")
        self.name = name


class SelectionCancelledError(DashDeployError):
    """The operator aborted a prompt."""
