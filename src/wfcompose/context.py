"""
References into the runner's ambient data.

A `ContextPath` is an immutable chain of segments such as
`needs.build.outputs.version`. It never evaluates anything: it only renders
the dotted reference that the runner resolves at run time.

Builder callbacks receive a `Context`, a small tree of root paths
(`ctx.github`, `ctx.matrix`, `ctx.needs`, ...) built once per callback call:

    job.runs_on(lambda ctx: expr(ctx.matrix["os"]))

The typed helpers (`ctx.axis("os")`, `ctx.need_output("build", "version")`)
additionally check the name against what the owning job has declared so far.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from .errors import CompositionError


@runtime_checkable
class PathLike(Protocol):
    """Anything that can report its own segment chain."""

    @property
    def segments(self) -> Sequence[str]: ...


def is_path(value: Any) -> bool:
    """True if `value` can be used as a context path fragment."""
    if isinstance(value, ContextPath):
        return True
    if isinstance(value, (str, bytes)) or not isinstance(value, PathLike):
        return False
    segments = value.segments
    return isinstance(segments, (list, tuple)) and all(isinstance(s, str) for s in segments)


def path_string(value: PathLike) -> str:
    """Render any path-like value as its dotted form."""
    return ".".join(value.segments)


@dataclass(frozen=True)
class ContextPath:
    """An immutable dotted reference into the runner context."""

    _segments: tuple[str, ...] = ()

    @property
    def segments(self) -> tuple[str, ...]:
        return self._segments

    def append(self, *segments: str) -> ContextPath:
        """Return a new path with `segments` appended."""
        for segment in segments:
            if not isinstance(segment, str) or not segment:
                raise CompositionError(f"Context path segments must be non-empty strings, got {segment!r}")
        return ContextPath(self._segments + tuple(segments))

    def __getitem__(self, segment: str) -> ContextPath:
        return self.append(segment)

    def __getattr__(self, segment: str) -> ContextPath:
        """`ctx.github.ref` is `ctx.github["ref"]`. Use `[...]` for names like `event-name`."""
        if segment.startswith("_"):
            raise AttributeError(segment)
        return self.append(segment)

    def __str__(self) -> str:
        return ".".join(self._segments)

    def __repr__(self) -> str:
        return f"ContextPath({self})"

    def to_json(self) -> str:
        return str(self)


def path(*segments: str) -> ContextPath:
    """Build a context path from its segments."""
    return ContextPath().append(*segments)


@dataclass(frozen=True)
class KnownNames:
    """
    Names declared so far by the builder that owns a callback.

    `None` means "not tracked": lookups against it are never checked.
    """

    matrix_axes: tuple[str, ...] | None = None
    needs: tuple[str, ...] | None = None
    step_outputs: Mapping[str, frozenset[str]] | None = None
    services: tuple[str, ...] | None = None


def _check(kind: str, name: str, known: Sequence[str] | Mapping[str, Any] | None) -> None:
    if known is None or name in known:
        return
    available = ", ".join(known) or "(none)"
    raise CompositionError(f"Unknown {kind} '{name}'. Declared: {available}")


@dataclass(frozen=True)
class Context:
    """The root context paths available to builder callbacks."""

    known: KnownNames = field(default_factory=KnownNames)
    github: ContextPath = field(default_factory=lambda: path("github"))
    env: ContextPath = field(default_factory=lambda: path("env"))
    vars: ContextPath = field(default_factory=lambda: path("vars"))
    job: ContextPath = field(default_factory=lambda: path("job"))
    jobs: ContextPath = field(default_factory=lambda: path("jobs"))
    steps: ContextPath = field(default_factory=lambda: path("steps"))
    runner: ContextPath = field(default_factory=lambda: path("runner"))
    secrets: ContextPath = field(default_factory=lambda: path("secrets"))
    strategy: ContextPath = field(default_factory=lambda: path("strategy"))
    matrix: ContextPath = field(default_factory=lambda: path("matrix"))
    needs: ContextPath = field(default_factory=lambda: path("needs"))
    inputs: ContextPath = field(default_factory=lambda: path("inputs"))

    def axis(self, name: str) -> ContextPath:
        """`matrix.<name>`, checked against the declared matrix axes."""
        _check("matrix axis", name, self.known.matrix_axes)
        return self.matrix[name]

    def need_output(self, job_id: str, output: str) -> ContextPath:
        """`needs.<job_id>.outputs.<output>`, checked against the job's `needs`."""
        _check("needed job", job_id, self.known.needs)
        return self.needs.append(job_id, "outputs", output)

    def step(self, step_id: str) -> ContextPath:
        """`steps.<step_id>`, checked against the steps added so far."""
        _check("step id", step_id, self.known.step_outputs)
        return self.steps[step_id]

    def step_output(self, step_id: str, output: str) -> ContextPath:
        """`steps.<step_id>.outputs.<output>`."""
        return self.step(step_id).append("outputs", output)

    def service(self, name: str) -> ContextPath:
        """`job.services.<name>`, checked against the declared services."""
        _check("service", name, self.known.services)
        return self.job.append("services", name)

    def secret(self, name: str) -> ContextPath:
        return self.secrets[name]

    def input(self, name: str) -> ContextPath:
        return self.inputs[name]

    def env_var(self, name: str) -> ContextPath:
        return self.env[name]


def context(known: KnownNames | None = None) -> Context:
    """Build a fresh context tree."""
    return Context(known=known or KnownNames())


# Unchecked default context, for building expressions outside callbacks.
ctx = context()
