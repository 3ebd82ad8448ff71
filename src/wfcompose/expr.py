"""
Expressions in the runner's `${{ ... }}` syntax.

An `Expression` is an ordered list of fragments (raw text, context paths and
nested expressions) rendered by plain concatenation. The functions in this
module compose expressions the way the runner's grammar expects them:

    from wfcompose import expr as e
    from wfcompose.context import ctx

    cond = e.eq(ctx.github.ref, "refs/heads/main") & e.success()
    str(cond)    # "(github.ref == 'refs/heads/main') && success()"
    cond.wrap()  # "${{ (github.ref == 'refs/heads/main') && success() }}"

`&`, `|` and `~` parenthesize operands built from binary operators, so the
rendered condition keeps Python's grouping. The plain functions (`and_`,
`or_`, `not_`) splice their operands as given; use `group()` with them.

Raw Python values passed to an operator or function become literals: strings
are single-quoted (with `'` doubled), booleans render as `true`/`false` and
`None` as `null`. Nothing here is evaluated at build time.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any, Union

from .context import ContextPath, PathLike, is_path, path_string
from .errors import CompositionError

Fragment = Union[str, ContextPath, PathLike, "Expression"]


class Operator(str, Enum):
    """Binary operators of the runner's expression grammar."""

    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    EQUAL = "=="
    NOT_EQUAL = "!="
    AND = "&&"
    OR = "||"


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Expression:
    """An expression evaluated by the runner."""

    def __init__(self) -> None:
        self._contents: list[Fragment] = []
        # Binary operator results need parentheses when used as an operand
        self._compound = False

    @classmethod
    def create(cls, *items: Any) -> Expression:
        """Create an expression from raw fragments. `None` items are skipped."""
        expression = cls()
        expression.add(*items)
        return expression

    @staticmethod
    def is_expression(value: Any) -> bool:
        return isinstance(value, Expression)

    def add(self, *items: Any) -> Expression:
        """Append raw fragments in place and return self."""
        for item in items:
            if item is None:
                continue
            if isinstance(item, Enum):
                item = item.value
            if isinstance(item, (str, Expression)) or is_path(item):
                self._contents.append(item)
            elif isinstance(item, (bool, int, float)):
                self._contents.append(_format_scalar(item))
            else:
                raise CompositionError(f"Cannot use a value of type {type(item).__name__} in an expression")
        return self

    @property
    def contents(self) -> tuple[Fragment, ...]:
        return tuple(self._contents)

    def __str__(self) -> str:
        parts = []
        for item in self._contents:
            if isinstance(item, (str, Expression, ContextPath)):
                parts.append(str(item))
            else:
                parts.append(path_string(item))
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Expression({self})"

    def wrap(self) -> str:
        """
        Render as an interpolation `${{ <expression> }}`.

        This is the only way to embed an expression in a plain string field.
        Wrapping is not idempotent: wrapping an already wrapped string nests.
        """
        return f"${{{{ {self} }}}}"

    def to_json(self) -> str:
        return self.wrap()

    def __and__(self, other: Any) -> Expression:
        """Logical AND (`&&`). Compound operands are parenthesized."""
        return and_(_operand(self), _operand(other))

    def __rand__(self, other: Any) -> Expression:
        return and_(_operand(other), _operand(self))

    def __or__(self, other: Any) -> Expression:
        """Logical OR (`||`). Compound operands are parenthesized."""
        return or_(_operand(self), _operand(other))

    def __ror__(self, other: Any) -> Expression:
        return or_(_operand(other), _operand(self))

    def __invert__(self) -> Expression:
        """Logical NOT (`!`). A compound operand is parenthesized."""
        return not_(_operand(self))

    def __bool__(self) -> bool:
        """Raise error - expressions are evaluated by the runner, not by Python."""
        raise CompositionError(
            "Expressions cannot be used in Python control flow.\n"
            "They are rendered into the workflow and evaluated by the runner."
        )


def literal(value: Any) -> str | ContextPath | PathLike | Expression:
    """Convert a raw Python value to an expression literal."""
    if isinstance(value, Expression) or is_path(value):
        return value
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return "null"
    if isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    if isinstance(value, (bool, int, float)):
        return _format_scalar(value)
    if isinstance(value, Sequence):
        return Expression.create(*_comma_separated([literal(item) for item in value]))
    raise CompositionError(f"Cannot use a value of type {type(value).__name__} as an expression literal")


def _comma_separated(items: list[Any]) -> list[Any]:
    result: list[Any] = []
    for index, item in enumerate(items):
        if index:
            result.append(", ")
        result.append(item)
    return result


def expr(content: Any) -> Expression:
    """Wrap a single value (path, expression or literal) as an expression."""
    return Expression.create(literal(content))


def wrap(content: Any) -> str:
    """Render any expression content as an interpolation `${{ <content> }}`."""
    return Expression.create(content).wrap()


def op(lhs: Any, operator: Operator | str, rhs: Any) -> Expression:
    """Compare or combine `lhs` and `rhs` with a binary operator."""
    operator = Operator(operator)
    expression = Expression.create(literal(lhs), " ", operator.value, " ", literal(rhs))
    expression._compound = True
    return expression


def and_(lhs: Any, rhs: Any) -> Expression:
    return op(lhs, Operator.AND, rhs)


def or_(lhs: Any, rhs: Any) -> Expression:
    return op(lhs, Operator.OR, rhs)


def eq(lhs: Any, rhs: Any) -> Expression:
    return op(lhs, Operator.EQUAL, rhs)


def not_eq(lhs: Any, rhs: Any) -> Expression:
    return op(lhs, Operator.NOT_EQUAL, rhs)


def lt(lhs: Any, rhs: Any) -> Expression:
    return op(lhs, Operator.LESS_THAN, rhs)


def lte(lhs: Any, rhs: Any) -> Expression:
    return op(lhs, Operator.LESS_THAN_OR_EQUAL, rhs)


def gt(lhs: Any, rhs: Any) -> Expression:
    return op(lhs, Operator.GREATER_THAN, rhs)


def gte(lhs: Any, rhs: Any) -> Expression:
    return op(lhs, Operator.GREATER_THAN_OR_EQUAL, rhs)


def not_(content: Any) -> Expression:
    """Negate the truthiness of the content."""
    return Expression.create("!", literal(content))


def group(expression: Any) -> Expression:
    """Wrap in parentheses to create a logical grouping."""
    return Expression.create("(", literal(expression), ")")


def _operand(value: Any) -> Any:
    if isinstance(value, Expression) and value._compound:
        return group(value)
    return value


def _call(name: str, *arguments: Any) -> Expression:
    return Expression.create(f"{name}(", *_comma_separated([literal(a) for a in arguments]), ")")


def contains(search: Any, item: Any) -> Expression:
    """
    True if `search` contains `item`.

    For an array, checks membership; for a string, checks for a substring.
    Not case sensitive.
    """
    return _call("contains", search, item)


def starts_with(search_string: Any, search_value: Any) -> Expression:
    """True when `search_string` starts with `search_value` (not case sensitive)."""
    return _call("startsWith", search_string, search_value)


def ends_with(search_string: Any, search_value: Any) -> Expression:
    """True when `search_string` ends with `search_value` (not case sensitive)."""
    return _call("endsWith", search_string, search_value)


def format(string_to_format: str, *replacements: Any) -> Expression:
    """
    Replace `{N}` placeholders in the string with the replacement values.

    Curly braces are escaped by doubling them.
    """
    return _call("format", string_to_format, *replacements)


def join(array: Any, separator: Any = None) -> Expression:
    """Join the values of `array` into a string, with `,` as the default separator."""
    if separator is None:
        return _call("join", array)
    return _call("join", array, separator)


def to_json(value: Any) -> Expression:
    """Pretty-print `value` as JSON."""
    return _call("toJSON", value)


def from_json(value: Any) -> Expression:
    """Parse a JSON string into a runner value."""
    return _call("fromJSON", value)


def hash_files(pattern: str, *patterns: str) -> Expression:
    """Hash of the files matching the glob patterns."""
    return _call("hashFiles", pattern, *patterns)


def concat(first: Any, second: Any, *rest: Any) -> str:
    """
    Concatenate text and expressions into a plain string.

    Strings are kept as-is; every other item is wrapped individually, so the
    result is text with embedded interpolations, not a single interpolation:

        concat("v", ctx.needs["build"].outputs["version"], "-rc")
        # "v${{ needs.build.outputs.version }}-rc"

    """
    items = (first, second, *rest)
    return "".join(item if isinstance(item, str) else Expression.create(item).wrap() for item in items)


# Status check functions


def always() -> Expression:
    """Always run, even when cancelled."""
    return Expression.create("always()")


def success() -> Expression:
    """True when none of the previous steps have failed or been cancelled."""
    return Expression.create("success()")


def failure() -> Expression:
    """True when any previous step (or ancestor job) failed."""
    return Expression.create("failure()")


def cancelled() -> Expression:
    """True if the workflow was cancelled."""
    return Expression.create("cancelled()")
