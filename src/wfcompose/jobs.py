"""
The Job builder: a named unit of execution within a workflow.

A job either runs its own steps on a runner, or calls a reusable workflow
through `uses`:

    build = (
        job()
        .runs_on("ubuntu-latest")
        .strategy({"matrix": {"python": ["3.11", "3.12"]}})
        .step(actions.checkout())
        .step(lambda s: s.run(expr.concat("uv run --python ", ctx.matrix["python"], " pytest")))
    )

While a job is assembled it records the names later callbacks may reference:
matrix axes, needed jobs, step ids (with the outputs their commands set) and
service containers. Callbacks receive a `Context` whose typed helpers check
names against those records; referencing `ctx.axis("os")` in a job without an
`os` axis raises `CompositionError` on the spot.

Structural problems are only reported by `to_json()`, all at once.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Union

from .context import Context, KnownNames, context
from .errors import CompositionError, JobError, StepError, StructuralError, ValidationError
from .output import dbg
from .render import to_record
from .step import Step
from .utils import Resolvable, as_list, resolve

if TYPE_CHECKING:
    from .workflow import Workflow

StepLike = Union[Step, Callable[[Step], Step]]

_MATRIX_ROW_KEYS = ("include", "exclude")


def _matrix_axes(strategy: Any) -> tuple[str, ...] | None:
    """Axis names declared by a strategy, or None when the matrix is computed at run time."""
    if not isinstance(strategy, Mapping) or "matrix" not in strategy:
        return ()
    matrix = strategy["matrix"]
    if not isinstance(matrix, Mapping):
        return None

    axes = [str(key) for key in matrix if key not in _MATRIX_ROW_KEYS]
    include = matrix.get("include")
    if isinstance(include, (list, tuple)):
        for row in include:
            if isinstance(row, Mapping):
                axes.extend(str(key) for key in row if str(key) not in axes)
    elif include is not None:
        return None
    return tuple(dict.fromkeys(axes))


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple)):
        return len(value) == 0
    return False


class Job:
    """A job of a workflow."""

    def __init__(self) -> None:
        self._name: Any = None
        self._permissions: Any = None
        self._needs: list[str] | None = None
        self._if: Any = None
        self._runs_on: Any = None
        self._environment: Any = None
        self._concurrency: Any = None
        self._outputs: Any = None
        self._env: Any = None
        self._defaults: Any = None
        self._timeout_minutes: Any = None
        self._strategy: Any = None
        self._max_parallel: Any = None
        self._continue_on_error: Any = None
        self._container: Any = None
        self._services: Any = None
        self._uses: Any = None
        self._with: Any = None
        self._secrets: Any = None
        self._steps: list[Step] = []

        self.matrix_axes: tuple[str, ...] | None = ()
        """Matrix axis names, or None when the matrix is computed at run time."""
        self.service_names: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"Job(name={self._name!r}, steps={len(self._steps)})"

    # -- Bookkeeping -------------------------------------------------------

    @property
    def needed_jobs(self) -> tuple[str, ...]:
        return tuple(self._needs or ())

    @property
    def step_ids(self) -> tuple[str, ...]:
        return tuple(s.step_id for s in self._steps if s.step_id is not None)

    @property
    def step_outputs(self) -> dict[str, frozenset[str]]:
        """Step id -> names of the outputs its commands set."""
        return {s.step_id: frozenset(s.outputs) for s in self._steps if s.step_id is not None}

    def known_names(self) -> KnownNames:
        """Names registered so far, for checking context references in callbacks."""
        return KnownNames(
            matrix_axes=self.matrix_axes,
            needs=self.needed_jobs,
            step_outputs=self.step_outputs,
            services=self.service_names,
        )

    def _context(self) -> Context:
        return context(self.known_names())

    # -- Setters -----------------------------------------------------------

    def name(self, value: Resolvable[Any]) -> Job:
        self._name = resolve(value, self._context)
        return self

    def permissions(self, value: Resolvable[Any]) -> Job:
        """Set job permissions: a scope map, `read-all` / `write-all`, or `False` to clear."""
        value = resolve(value, self._context)
        self._permissions = None if value is False else value
        return self

    def needs(self, value: Resolvable[str | list[str]]) -> Job:
        """Jobs that must complete before this one. Outputs of these become referenceable."""
        self._needs = [str(item) for item in as_list(resolve(value, self._context))]
        return self

    def if_(self, value: Resolvable[Any]) -> Job:
        self._if = resolve(value, self._context)
        return self

    def runs_on(self, value: Resolvable[Any]) -> Job:
        """The runner label (or list of labels) the job runs on."""
        self._runs_on = resolve(value, self._context)
        return self

    def environment(self, value: Resolvable[Any]) -> Job:
        """A deployment environment: its name, or `{"name": ..., "url": ...}`."""
        self._environment = resolve(value, self._context)
        return self

    def concurrency(self, value: Resolvable[Any]) -> Job:
        """A concurrency group name, or `{"group": ..., "cancel-in-progress": ...}`."""
        self._concurrency = resolve(value, self._context)
        return self

    def outputs(self, value: Resolvable[Mapping[str, Any]]) -> Job:
        """Job outputs (name -> expression), readable as `needs.<job>.outputs.<name>`."""
        self._outputs = resolve(value, self._context)
        return self

    def env(self, value: Resolvable[Mapping[str, Any]]) -> Job:
        self._env = resolve(value, self._context)
        return self

    def defaults(self, value: Resolvable[Mapping[str, Any]]) -> Job:
        self._defaults = resolve(value, self._context)
        return self

    def timeout_minutes(self, value: Resolvable[Any]) -> Job:
        self._timeout_minutes = resolve(value, self._context)
        return self

    def strategy(self, value: Resolvable[Mapping[str, Any]]) -> Job:
        """
        Set the matrix strategy.

        The matrix is rendered as given and expanded by the runner. Its axis
        names (and keys introduced by `include` rows) become referenceable
        through `ctx.axis()`.
        """
        self._strategy = resolve(value, self._context)
        self.matrix_axes = _matrix_axes(self._strategy)
        dbg(f"job {self._name!r}: matrix axes {self.matrix_axes}")
        return self

    def max_parallel(self, value: Resolvable[Any]) -> Job:
        self._max_parallel = resolve(value, self._context)
        return self

    def continue_on_error(self, value: Resolvable[Any]) -> Job:
        self._continue_on_error = resolve(value, self._context)
        return self

    def container(self, value: Resolvable[Any]) -> Job:
        self._container = resolve(value, self._context)
        return self

    def services(self, value: Resolvable[Mapping[str, Any]]) -> Job:
        """Service containers, keyed by name."""
        self._services = resolve(value, self._context)
        if isinstance(self._services, Mapping):
            self.service_names = tuple(str(key) for key in self._services)
        return self

    def uses(self, value: Resolvable[str | Workflow]) -> Job:
        """Call a reusable workflow: a reference string, or a `Workflow` of this repository."""
        from .workflow import Workflow

        value = resolve(value, self._context)
        if isinstance(value, Workflow):
            value = f"./.github/workflows/{value.file_name}.yml"
        self._uses = value
        return self

    def with_(self, value: Resolvable[Mapping[str, Any]]) -> Job:
        """Inputs passed to the reusable workflow."""
        self._with = resolve(value, self._context)
        return self

    def secrets(self, value: Resolvable[Any]) -> Job:
        """Secrets passed to the reusable workflow: `"inherit"` or a map."""
        self._secrets = resolve(value, self._context)
        return self

    def step(self, value: StepLike) -> Job:
        """
        Append a step.

        Either a `Step`, or a function completing a fresh step. The fresh step
        resolves its own callbacks against this job's registered names.
        """
        if isinstance(value, Step):
            new_step = value
        elif callable(value):
            new_step = value(Step(known=self.known_names()))
            if not isinstance(new_step, Step):
                raise CompositionError(f"Step builder must return a Step, got {type(new_step).__name__}")
        else:
            raise CompositionError(f"Expected a Step or a step builder, got {type(value).__name__}")
        self._steps.append(new_step)
        return self

    def steps(self, values: list[StepLike]) -> Job:
        """Append several steps in order."""
        for value in values:
            self.step(value)
        return self

    # -- Rendering ---------------------------------------------------------

    def validate(self, job_id: str | None = None) -> list[StructuralError]:
        """Return every structural violation of this job."""
        label = self._label(job_id)
        errors: list[StructuralError] = []

        if self._steps and self._uses is not None:
            errors.append(JobError(f"The job '{label}' defines both 'steps' and 'uses'; only one is allowed."))
        elif not self._steps and self._uses is None:
            errors.append(JobError(f"The job '{label}' requires either 'steps' or a 'uses' property."))

        if self._steps and _is_empty(self._runs_on):
            errors.append(JobError(f"The job '{label}' is missing the following properties: 'runs-on'."))

        seen: set[str] = set()
        for step_id in self.step_ids:
            if step_id in seen:
                errors.append(StepError(f"The job '{label}' has more than one step with id '{step_id}'."))
            seen.add(step_id)
        return errors

    def _label(self, job_id: str | None) -> str:
        if job_id is not None:
            return job_id
        if isinstance(self._name, str):
            return self._name
        return "<unnamed>"

    def to_json(self, job_id: str | None = None) -> dict[str, Any]:
        """
        Render the job as an ordered record.

        Raises:
            ValidationError: listing every structural violation of the job.

        """
        errors = self.validate(job_id)
        if errors:
            raise ValidationError(f"Invalid Job configuration: '{self._label(job_id)}'", errors)

        return to_record(
            [
                ("name", self._name),
                ("permissions", self._permissions),
                ("needs", self._needs),
                ("if", self._if),
                ("runs-on", self._runs_on),
                ("environment", self._environment),
                ("concurrency", self._concurrency),
                ("outputs", self._outputs),
                ("env", self._env),
                ("defaults", self._defaults),
                ("timeout-minutes", self._timeout_minutes),
                ("strategy", self._strategy),
                ("max-parallel", self._max_parallel),
                ("continue-on-error", self._continue_on_error),
                ("container", self._container),
                ("services", self._services),
                ("uses", self._uses),
                ("with", self._with),
                ("secrets", self._secrets),
                ("steps", [s.to_json() for s in self._steps] if self._steps else None),
            ]
        )


def job() -> Job:
    """Create an empty job."""
    return Job()
