"""Error types raised while building and rendering workflows.

Structural problems found while rendering a job or workflow are collected
rather than raised one at a time, so a single `ValidationError` reports
every violation found in that render pass.
"""

from __future__ import annotations

from collections.abc import Iterable


class WfcomposeError(Exception):
    """Base class for all wfcompose errors.

    Carries an optional list of child errors, which are listed in `str()`.
    """

    def __init__(self, message: str, errors: Iterable[BaseException] = ()):
        super().__init__(message)
        self.message = message
        self.errors: list[BaseException] = list(errors)

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        lines = [self.message]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)


class StructuralError(WfcomposeError, ValueError):
    """A builder violates one of its structural invariants."""


class JobError(StructuralError):
    """A job is misconfigured."""


class StepError(StructuralError):
    """A step is misconfigured."""


class WorkflowError(StructuralError):
    """A workflow (or a set of workflows) is misconfigured."""


class ValidationError(StructuralError):
    """Aggregate of every structural violation found in one render pass."""

    @classmethod
    def collect(cls, message: str, errors: Iterable[BaseException]) -> ValidationError:
        """Build an aggregate, flattening nested aggregates into one list."""
        flat: list[BaseException] = []
        for error in errors:
            if isinstance(error, ValidationError):
                flat.extend(error.errors)
            else:
                flat.append(error)
        return cls(message, flat)


class CompositionError(WfcomposeError, TypeError):
    """An expression or context reference was composed incorrectly."""


class WriteError(WfcomposeError):
    """One or more workflow files could not be written."""
