"""
The Step builder: one task inside a job.

A step either invokes an action (`uses`) or runs an inline script (`run`).
Every setter returns the step, so steps read as a chain:

    step().id("version").name("Read version").run(
        commands.set_output("version", "1.2.3"),
    )

Setters accept a plain value or a callback of the ambient `Context`, which is
resolved immediately.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .commands import Command, text
from .context import Context, KnownNames, context, is_path
from .errors import CompositionError
from .expr import Expression
from .render import to_record
from .utils import Resolvable, resolve


def _script_line(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, (Command, Expression)) or is_path(item):
        return text(item)
    raise CompositionError(f"Cannot use a value of type {type(item).__name__} as a script line")


class Step:
    """A single step of a job."""

    def __init__(self, *, known: KnownNames | None = None):
        self._known = known
        self._id: Any = None
        self._if: Any = None
        self._name: Any = None
        self._uses: Any = None
        self._run: str | None = None
        self._shell: Any = None
        self._working_directory: Any = None
        self._with: Any = None
        self._env: Any = None
        self._continue_on_error: Any = None
        self._timeout_minutes: Any = None

        self.outputs: tuple[str, ...] = ()
        """Names of the outputs this step sets through `commands.set_output`."""
        self.exported_env: tuple[str, ...] = ()
        """Names of the environment variables this step exports through `commands.set_env`."""

    def _context(self) -> Context:
        return context(self._known)

    def __repr__(self) -> str:
        label = self._id if self._id is not None else self._name
        return f"Step({label!r})"

    @property
    def step_id(self) -> str | None:
        return self._id

    def id(self, value: Resolvable[str]) -> Step:
        """Set the identifier used to reference the step (`steps.<id>`)."""
        self._id = resolve(value, self._context)
        return self

    def if_(self, value: Resolvable[Any]) -> Step:
        """Only run the step when the condition holds."""
        self._if = resolve(value, self._context)
        return self

    def name(self, value: Resolvable[Any]) -> Step:
        self._name = resolve(value, self._context)
        return self

    def uses(self, value: Resolvable[str]) -> Step:
        """Run an action, e.g. `actions/checkout@v4`."""
        self._uses = resolve(value, self._context)
        return self

    def run(self, commands: Resolvable[Any]) -> Step:
        """
        Run one or more script lines, joined with newlines.

        Accepts strings, `Command`s, expressions and context paths (the latter
        two are interpolation-wrapped). Replaces any earlier script.
        """
        value = resolve(commands, self._context)
        items = list(value) if isinstance(value, (list, tuple)) else [value]
        self._run = "\n".join(_script_line(item) for item in items)

        commands_ = [item for item in items if isinstance(item, Command)]
        self.outputs = tuple(c.output for c in commands_ if c.output is not None)
        self.exported_env = tuple(c.env for c in commands_ if c.env is not None)
        return self

    def shell(self, value: Resolvable[Any]) -> Step:
        self._shell = resolve(value, self._context)
        return self

    def working_directory(self, value: Resolvable[Any]) -> Step:
        self._working_directory = resolve(value, self._context)
        return self

    def with_(self, inputs: Resolvable[Mapping[str, Any]]) -> Step:
        """Set the action inputs."""
        self._with = resolve(inputs, self._context)
        return self

    def env(self, variables: Resolvable[Mapping[str, Any]]) -> Step:
        self._env = resolve(variables, self._context)
        return self

    def continue_on_error(self, value: Resolvable[Any]) -> Step:
        self._continue_on_error = resolve(value, self._context)
        return self

    def timeout_minutes(self, value: Resolvable[Any]) -> Step:
        self._timeout_minutes = resolve(value, self._context)
        return self

    def to_json(self) -> dict[str, Any]:
        """Render the step as an ordered record; unset fields are left out."""
        return to_record(
            [
                ("if", self._if),
                ("id", self._id),
                ("name", self._name),
                ("uses", self._uses),
                ("run", self._run),
                ("shell", self._shell),
                ("working-directory", self._working_directory),
                ("with", self._with),
                ("env", self._env),
                ("continue-on-error", self._continue_on_error),
                ("timeout-minutes", self._timeout_minutes),
            ]
        )


def step(*, known: KnownNames | None = None) -> Step:
    """Create an empty step."""
    return Step(known=known)
