"""
Workflow commands: single lines a step runs to talk to the runner.

Commands set outputs and environment variables, add log annotations and
mask values. Pass them (or lists of them) to `Step.run()`:

    step().id("version").run(commands.set_output("version", "1.2.3"))

A command remembers the output / environment variable it sets so the job
can track which step outputs exist; the rendered line is unaffected.
"""

from __future__ import annotations

from typing import Any

from .context import is_path
from .expr import Expression


class Command:
    """A single rendered runner directive."""

    def __init__(self, value: str, *, output: str | None = None, env: str | None = None):
        self._value = value
        self.output = output
        """Name of the step output this command sets, if any."""
        self.env = env
        """Name of the environment variable this command exports, if any."""

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Command({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Command):
            return (self._value, self.output, self.env) == (other._value, other.output, other.env)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._value, self.output, self.env))

    def to_json(self) -> str:
        return str(self)


def text(value: Any) -> str:
    """Render a value for use inside a shell line; expressions are interpolated."""
    if isinstance(value, Expression):
        return value.wrap()
    if is_path(value):
        return Expression.create(value).wrap()
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def set_debug(message: Any) -> Command:
    """
    Print a debug message to the log.

    Only visible when the `ACTIONS_STEP_DEBUG` secret is set to `true`.
    """
    return Command(f"echo ::debug::{text(message)}")


def _annotation(kind: str, message: Any, properties: dict[str, Any]) -> Command:
    props = ",".join(f"{key}={text(value)}" for key, value in properties.items() if value is not None)
    if props:
        return Command(f"echo ::{kind} {props}::{text(message)}")
    return Command(f"echo ::{kind}::{text(message)}")


def set_notice(
    message: Any,
    *,
    title: Any = None,
    file: Any = None,
    col: Any = None,
    end_column: Any = None,
    line: Any = None,
    end_line: Any = None,
) -> Command:
    """
    Create a notice annotation, optionally tied to a file position.

    Example:
        set_notice("Deprecated API", file="app.py", line=1, col=5, end_column=7)

    """
    return _annotation(
        "notice",
        message,
        {"title": title, "file": file, "col": col, "endColumn": end_column, "line": line, "endLine": end_line},
    )


def set_warning(
    message: Any,
    *,
    title: Any = None,
    file: Any = None,
    col: Any = None,
    end_column: Any = None,
    line: Any = None,
    end_line: Any = None,
) -> Command:
    """Create a warning annotation, optionally tied to a file position."""
    return _annotation(
        "warning",
        message,
        {"title": title, "file": file, "col": col, "endColumn": end_column, "line": line, "endLine": end_line},
    )


def set_error(
    message: Any,
    *,
    title: Any = None,
    file: Any = None,
    col: Any = None,
    end_column: Any = None,
    line: Any = None,
    end_line: Any = None,
) -> Command:
    """Create an error annotation, optionally tied to a file position."""
    return _annotation(
        "error",
        message,
        {"title": title, "file": file, "col": col, "endColumn": end_column, "line": line, "endLine": end_line},
    )


def set_mask(value: Any) -> Command:
    """
    Mask a value so it is redacted from the log.

    Each whitespace separated word is replaced with `*`.
    """
    return Command(f"echo ::add-mask::{text(value)}")


def set_output(name: str, value: Any) -> Command:
    """Set a step output, readable as `steps.<id>.outputs.<name>`."""
    return Command(f'echo "{name}={text(value)}" >> $GITHUB_OUTPUT', output=name)


def set_env(name: str, value: Any) -> Command:
    """
    Export an environment variable to every subsequent step of the job.

    The step that sets the variable does not see the new value.
    """
    return Command(f'echo "{name}={text(value)}" >> $GITHUB_ENV', env=name)


def group(title: str, commands: list[Command | str]) -> list[Command | str]:
    """Nest the output of `commands` inside an expandable log group."""
    return [Command(f'echo "::group::{title}"'), *commands, Command('echo "::endgroup::"')]
