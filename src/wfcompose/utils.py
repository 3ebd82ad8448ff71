"""Small helpers shared by the builders."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, TypeVar, Union

T = TypeVar("T")

# Acronym runs, capitalized words, lowercase runs and digit runs.
_WORD_RE = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z]|[^A-Za-z]|$)|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def kebab_case(name: str) -> str:
    """
    Convert a display name to kebab-case.

    Examples:
        "My CI workflow" -> "my-ci-workflow"
        "releaseNotes"   -> "release-notes"
        "HTTPServer"     -> "http-server"

    """
    return "-".join(word.lower() for word in _WORD_RE.findall(name))


def resolve(value: Any, make_context: Callable[[], Any]) -> Any:
    """
    Resolve a value that may be given as a callback of the ambient context.

    Builder setters accept either a plain value or a function taking the
    context. Callbacks are invoked immediately; the context is only built
    when one is actually passed.
    """
    if callable(value) and not isinstance(value, type):
        return value(make_context())
    return value


def as_list(value: Any) -> list[Any]:
    """Wrap a single value in a list; lists and tuples are copied."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


# A setter argument: the value itself, or a callback taking the ambient context.
Resolvable = Union[T, Callable[[Any], T]]
