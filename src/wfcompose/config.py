"""
Output configuration: which workflows go where.

A config module (by default `.github/wfcompose.py`) exposes a `workflows`
attribute, usually built with `define_workflows()`:

    workflows = define_workflows([ci, release], cleanup_root=True)

Environment variables:
    WFCOMPOSE_ROOT: default output directory when none is given.
    WFCOMPOSE_DEBUG: enable debug output.
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import unquote, urlparse

from pydantic import BaseModel

from .output import dbg
from .workflow import Workflow

DEFAULT_CONFIG_FILE = Path(".github") / "wfcompose.py"
DEFAULT_WORKFLOWS_DIR = Path(".github") / "workflows"


class WorkflowOutput(BaseModel):
    """Workflows together with where (and how) to write them."""

    workflows: list[Workflow]
    root_directory: Path
    cleanup_root: bool = False

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def __str__(self) -> str:
        names = ", ".join(w.file_name for w in self.workflows)
        return f"WorkflowOutput({names}) -> {self.root_directory}"


def find_git_root() -> Path | None:
    """Find the git repository root directory."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            timeout=10,
        )
        if result.returncode == 0:
            return Path(result.stdout.strip())
        return None
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None


def resolve_root_directory(root_directory: str | Path | None = None) -> Path:
    """
    Resolve an output directory to an absolute path.

    Absolute paths are kept, relative paths are resolved against the current
    directory and `file:` URLs are converted to paths. Without a value,
    `WFCOMPOSE_ROOT` is used, falling back to `.github/workflows` in the git
    root (or the current directory outside a repository).
    """
    if root_directory is None:
        env_root = os.environ.get("WFCOMPOSE_ROOT")
        if env_root:
            dbg(f"Using WFCOMPOSE_ROOT={env_root}")
            return resolve_root_directory(env_root)
        base = find_git_root() or Path.cwd()
        return base / DEFAULT_WORKFLOWS_DIR

    if isinstance(root_directory, str) and root_directory.startswith("file:"):
        root_directory = Path(unquote(urlparse(root_directory).path))

    path = Path(root_directory)
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


def define_workflows(
    workflows: Iterable[Workflow],
    root_directory: str | Path | None = None,
    cleanup_root: bool = False,
) -> WorkflowOutput:
    """
    Bundle workflows with their output directory.

    Args:
        workflows: The workflows to render, in output order.
        root_directory: Output directory (see `resolve_root_directory`).
        cleanup_root: Delete everything in the directory before writing.

    """
    output = WorkflowOutput(
        workflows=list(workflows),
        root_directory=resolve_root_directory(root_directory),
        cleanup_root=cleanup_root,
    )
    dbg(str(output))
    return output
