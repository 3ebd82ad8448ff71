"""
The Workflow builder: triggers, global settings and an ordered map of jobs.

    ci = (
        workflow("CI")
        .on(on_push(branches=["main"]) | on_pull_request())
        .job("lint", job().runs_on("ubuntu-latest").step(actions.checkout()))
    )
    ci.file_name  # "ci"

Rendering (`to_json()`) is a pure projection and may be repeated freely.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Union

from .context import Context, context
from .errors import CompositionError, ValidationError
from .jobs import Job
from .render import to_plain, to_record
from .triggers import Trigger
from .utils import Resolvable, kebab_case, resolve

JobLike = Union[Job, Callable[[Job], Job]]


class Workflow:
    """A workflow definition rendered to `<file_name>.yml`."""

    def __init__(self, name: str, file_name: str | None = None):
        if not name:
            raise CompositionError("A workflow needs a non-empty name")
        self.name = name
        self.file_name = file_name if file_name is not None else kebab_case(name)
        self._on: dict[str, Any] = {}
        self._permissions: Any = None
        self._env: Any = None
        self._defaults: Any = None
        self._concurrency: Any = None
        self._jobs: dict[str, Job] = {}

    def __str__(self) -> str:
        """User-friendly string representation."""
        triggers = ", ".join(self._on) or "-"
        return f"Workflow({self.name}) - {len(self._jobs)} job(s), on: {triggers} -> {self.file_name}.yml"

    __repr__ = __str__

    def _context(self) -> Context:
        return context()

    def on(self, event: str | Trigger, options: Any = None) -> Workflow:
        """
        Add a trigger.

        Either a `Trigger` (each event it renders is applied), or an event name
        with its options; empty options mean "any activity" and render as
        `null`. Setting the same event twice replaces the earlier options.
        """
        if isinstance(event, Trigger):
            if options is not None:
                raise CompositionError("Options cannot be combined with a Trigger; pass them to the trigger factory")
            for name, value in event.to_gha_dict().items():
                self._on[name] = value
        else:
            if options is False or (isinstance(options, (Mapping, list, tuple, str)) and not options):
                options = None
            self._on[str(event)] = options
        return self

    def permissions(self, value: Resolvable[Any]) -> Workflow:
        """Set default permissions for all jobs; `False` clears them."""
        value = resolve(value, self._context)
        self._permissions = None if value is False else value
        return self

    def env(self, value: Resolvable[Mapping[str, Any]]) -> Workflow:
        self._env = resolve(value, self._context)
        return self

    def defaults(self, value: Resolvable[Mapping[str, Any]]) -> Workflow:
        self._defaults = resolve(value, self._context)
        return self

    def concurrency(self, value: Resolvable[Any]) -> Workflow:
        self._concurrency = resolve(value, self._context)
        return self

    def job(self, job_id: str, value: JobLike) -> Workflow:
        """Add a job; either a `Job` or a function completing a fresh one."""
        if isinstance(value, Job):
            new_job = value
        elif callable(value):
            new_job = value(Job())
            if not isinstance(new_job, Job):
                raise CompositionError(f"Job builder for '{job_id}' must return a Job, got {type(new_job).__name__}")
        else:
            raise CompositionError(f"Expected a Job or a job builder for '{job_id}', got {type(value).__name__}")
        self._jobs[job_id] = new_job
        return self

    def jobs(self, values: Mapping[str, JobLike]) -> Workflow:
        """Add several jobs, keeping the given order."""
        for job_id, value in values.items():
            self.job(job_id, value)
        return self

    @property
    def job_ids(self) -> tuple[str, ...]:
        return tuple(self._jobs)

    def get_job(self, job_id: str) -> Job:
        return self._jobs[job_id]

    def dangling_needs(self) -> list[tuple[str, str]]:
        """(job id, needed id) pairs whose needed job is not part of this workflow."""
        return [
            (job_id, needed)
            for job_id, job in self._jobs.items()
            for needed in job.needed_jobs
            if needed not in self._jobs
        ]

    def _render_on(self) -> dict[str, Any] | None:
        if not self._on:
            return None
        rendered = {}
        for event, options in self._on.items():
            if event == "workflow_run" and isinstance(options, Mapping) and "workflows" in options:
                options = {
                    **options,
                    "workflows": [w.name if isinstance(w, Workflow) else w for w in options["workflows"]],
                }
            rendered[event] = to_plain(options)
        return rendered

    def to_json(self) -> dict[str, Any]:
        """
        Render the workflow as an ordered record.

        Raises:
            ValidationError: listing the violations of every job.

        """
        errors = []
        jobs: dict[str, Any] = {}
        for job_id, job in self._jobs.items():
            try:
                jobs[job_id] = job.to_json(job_id)
            except ValidationError as e:
                errors.append(e)
        if errors:
            raise ValidationError.collect(f"Invalid workflow configuration: '{self.name}'", errors)

        record = {"name": self.name}
        record.update(
            to_record(
                [
                    ("on", self._render_on()),
                    ("permissions", self._permissions),
                    ("env", self._env),
                    ("defaults", self._defaults),
                    ("concurrency", self._concurrency),
                    ("jobs", jobs or None),
                ]
            )
        )
        return record


def workflow(name: str, file_name: str | None = None) -> Workflow:
    """Create a workflow."""
    return Workflow(name, file_name)
