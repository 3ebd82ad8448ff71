"""
Typed workflow triggers.

Triggers render to entries of the workflow's `on:` map and combine with `|`:

    wf.on(on_push(branches=["main"]) | on_pull_request() | on_workflow_dispatch())

`Workflow.on(event, options)` remains available for events without a helper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .workflow import Workflow


# =============================================================================
# Dispatch / call inputs
# =============================================================================


@dataclass
class TriggerInput:
    """Base class for `workflow_dispatch` / `workflow_call` inputs."""

    description: str | None = None
    required: bool = False

    type_name = "string"

    def _default(self) -> Any:
        return None

    def to_gha_dict(self) -> dict[str, Any]:
        """Convert to the input's `on:` entry."""
        d: dict[str, Any] = {}
        if self.description is not None:
            d["description"] = self.description
        d["required"] = self.required
        d["type"] = self.type_name
        default = self._default()
        if default is not None:
            d["default"] = default
        return d


@dataclass
class StringInput(TriggerInput):
    default: str | None = None

    def _default(self) -> Any:
        return self.default


@dataclass
class BoolInput(TriggerInput):
    default: bool | None = None

    type_name = "boolean"

    def _default(self) -> Any:
        return self.default


@dataclass
class NumberInput(TriggerInput):
    default: int | float | None = None

    type_name = "number"

    def _default(self) -> Any:
        return self.default


@dataclass
class ChoiceInput(TriggerInput):
    """A dropdown of fixed options (dispatch only)."""

    options: list[str] = field(default_factory=list)
    default: str | None = None

    type_name = "choice"

    def _default(self) -> Any:
        return self.default

    def to_gha_dict(self) -> dict[str, Any]:
        d = super().to_gha_dict()
        d["options"] = list(self.options)
        return d


def _inputs_dict(inputs: dict[str, TriggerInput | dict[str, Any]]) -> dict[str, Any]:
    return {
        name: value.to_gha_dict() if isinstance(value, TriggerInput) else dict(value)
        for name, value in inputs.items()
    }


# =============================================================================
# Triggers
# =============================================================================


@dataclass
class Trigger:
    """Base class for workflow triggers."""

    def __or__(self, other: Trigger) -> CombinedTrigger:
        """Combine triggers with OR."""
        return CombinedTrigger([self, other])

    def to_gha_dict(self) -> dict[str, Any]:
        """Convert to GHA 'on:' dict format."""
        raise NotImplementedError


@dataclass
class CombinedTrigger(Trigger):
    """Multiple triggers combined with OR."""

    triggers: list[Trigger]

    def __or__(self, other: Trigger) -> CombinedTrigger:
        return CombinedTrigger(self.triggers + [other])

    def to_gha_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for trigger in self.triggers:
            result.update(trigger.to_gha_dict())
        return result


def _filters(**filters: list[str] | None) -> dict[str, Any] | None:
    config = {key.replace("_", "-"): value for key, value in filters.items() if value}
    return config or None


@dataclass
class PushTrigger(Trigger):
    """Trigger on push events."""

    branches: list[str] | None = None
    branches_ignore: list[str] | None = None
    tags: list[str] | None = None
    tags_ignore: list[str] | None = None
    paths: list[str] | None = None
    paths_ignore: list[str] | None = None

    def to_gha_dict(self) -> dict[str, Any]:
        return {
            "push": _filters(
                branches=self.branches,
                branches_ignore=self.branches_ignore,
                tags=self.tags,
                tags_ignore=self.tags_ignore,
                paths=self.paths,
                paths_ignore=self.paths_ignore,
            )
        }


@dataclass
class PullRequestTrigger(Trigger):
    """Trigger on pull request events (`pull_request_target` with `target=True`)."""

    branches: list[str] | None = None
    branches_ignore: list[str] | None = None
    types: list[str] | None = None
    paths: list[str] | None = None
    paths_ignore: list[str] | None = None
    target: bool = False

    def to_gha_dict(self) -> dict[str, Any]:
        event = "pull_request_target" if self.target else "pull_request"
        return {
            event: _filters(
                branches=self.branches,
                branches_ignore=self.branches_ignore,
                types=self.types,
                paths=self.paths,
                paths_ignore=self.paths_ignore,
            )
        }


@dataclass
class ScheduleTrigger(Trigger):
    """Trigger on one or more cron schedules."""

    crons: list[str]

    def to_gha_dict(self) -> dict[str, Any]:
        return {"schedule": [{"cron": cron} for cron in self.crons]}


@dataclass
class WorkflowDispatchTrigger(Trigger):
    """Trigger on manual workflow dispatch."""

    inputs: dict[str, TriggerInput | dict[str, Any]] = field(default_factory=dict)

    def to_gha_dict(self) -> dict[str, Any]:
        if self.inputs:
            return {"workflow_dispatch": {"inputs": _inputs_dict(self.inputs)}}
        return {"workflow_dispatch": None}


@dataclass
class WorkflowCallTrigger(Trigger):
    """Make the workflow reusable from other workflows' jobs."""

    inputs: dict[str, TriggerInput | dict[str, Any]] = field(default_factory=dict)
    outputs: dict[str, dict[str, Any]] = field(default_factory=dict)
    secrets: dict[str, dict[str, Any]] = field(default_factory=dict)

    def to_gha_dict(self) -> dict[str, Any]:
        config: dict[str, Any] = {}
        if self.inputs:
            config["inputs"] = _inputs_dict(self.inputs)
        if self.outputs:
            config["outputs"] = self.outputs
        if self.secrets:
            config["secrets"] = self.secrets
        return {"workflow_call": config or None}


@dataclass
class WorkflowRunTrigger(Trigger):
    """
    Trigger when other workflows run.

    Workflows may be given as `Workflow` objects; they are rendered as their
    display names when the owning workflow renders, so they may be defined
    later in the same file.
    """

    workflows: list[str | Workflow]
    types: list[str] | None = None
    branches: list[str] | None = None

    def to_gha_dict(self) -> dict[str, Any]:
        config: dict[str, Any] = {"workflows": list(self.workflows)}
        if self.types:
            config["types"] = self.types
        if self.branches:
            config["branches"] = self.branches
        return {"workflow_run": config}


# Convenience functions for creating triggers
def on_push(
    branches: list[str] | None = None,
    tags: list[str] | None = None,
    paths: list[str] | None = None,
    *,
    branches_ignore: list[str] | None = None,
    tags_ignore: list[str] | None = None,
    paths_ignore: list[str] | None = None,
) -> PushTrigger:
    """Create a push trigger."""
    return PushTrigger(
        branches=branches,
        branches_ignore=branches_ignore,
        tags=tags,
        tags_ignore=tags_ignore,
        paths=paths,
        paths_ignore=paths_ignore,
    )


def on_pull_request(
    branches: list[str] | None = None,
    types: list[str] | None = None,
    paths: list[str] | None = None,
    *,
    branches_ignore: list[str] | None = None,
    paths_ignore: list[str] | None = None,
    target: bool = False,
) -> PullRequestTrigger:
    """Create a pull request trigger."""
    return PullRequestTrigger(
        branches=branches,
        branches_ignore=branches_ignore,
        types=types,
        paths=paths,
        paths_ignore=paths_ignore,
        target=target,
    )


def on_schedule(cron: str, *crons: str) -> ScheduleTrigger:
    """Create a schedule trigger."""
    return ScheduleTrigger(crons=[cron, *crons])


def on_workflow_dispatch(inputs: dict[str, TriggerInput | dict[str, Any]] | None = None) -> WorkflowDispatchTrigger:
    """Create a workflow dispatch trigger."""
    return WorkflowDispatchTrigger(inputs=dict(inputs or {}))


def on_workflow_call(
    inputs: dict[str, TriggerInput | dict[str, Any]] | None = None,
    outputs: dict[str, dict[str, Any]] | None = None,
    secrets: dict[str, dict[str, Any]] | None = None,
) -> WorkflowCallTrigger:
    """Create a reusable-workflow trigger."""
    return WorkflowCallTrigger(inputs=dict(inputs or {}), outputs=dict(outputs or {}), secrets=dict(secrets or {}))


def on_workflow_run(
    workflows: list[str | Workflow],
    types: list[str] | None = None,
    branches: list[str] | None = None,
) -> WorkflowRunTrigger:
    """Create a trigger on other workflows' runs."""
    return WorkflowRunTrigger(workflows=list(workflows), types=types, branches=branches)
