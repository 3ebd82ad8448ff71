"""
Rendering workflows to files, and checking files on disk are up to date.

    generate([ci, release], ".github/workflows")
    diff = check([ci, release], ".github/workflows")
    if diff:
        print(diff)

Every workflow is rendered (and validated) before anything on disk changes.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from .config import WorkflowOutput
from .diff import unified_diff
from .errors import ValidationError, WorkflowError, WriteError
from .output import dbg
from .render import generate_workflow_header, load_yaml, to_yaml
from .workflow import Workflow

MAX_WRITE_WORKERS = 8


def generate_workflows(workflows: Iterable[Workflow]) -> dict[str, dict[str, Any]]:
    """
    Render every workflow, keyed by file name, in input order.

    Raises:
        ValidationError: listing the violations of every workflow, including
            file names claimed by more than one workflow.

    """
    trees: dict[str, dict[str, Any]] = {}
    owners: dict[str, str] = {}
    errors: list[BaseException] = []

    for wf in workflows:
        if wf.file_name in owners:
            errors.append(
                WorkflowError(
                    f"The workflows '{owners[wf.file_name]}' and '{wf.name}' "
                    f"both render to '{wf.file_name}.yml'."
                )
            )
            continue
        owners[wf.file_name] = wf.name
        try:
            trees[wf.file_name] = wf.to_json()
        except ValidationError as e:
            errors.append(e)

    if errors:
        raise ValidationError.collect("Invalid workflows", errors)
    return trees


def render_workflow_file(tree: dict[str, Any]) -> str:
    """The full text of a workflow file: header, blank line, YAML."""
    return f"{generate_workflow_header()}\n{to_yaml(tree)}"


def _empty_dir(directory: Path) -> None:
    """Ensure `directory` exists and is empty."""
    if not directory.exists():
        directory.mkdir(parents=True)
        return
    for child in directory.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def _write_file(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def generate(
    workflows: Iterable[Workflow],
    root_directory: str | Path,
    cleanup_root: bool = False,
) -> None:
    """
    Write every workflow to `<root_directory>/<file_name>.yml`.

    The directory is prepared first (emptied when `cleanup_root` is set,
    created otherwise), then all files are written concurrently.

    Raises:
        ValidationError: if any workflow is invalid; nothing is written.
        OSError: if the directory cannot be prepared.
        WriteError: listing every file that could not be written.

    """
    trees = generate_workflows(workflows)
    root = Path(root_directory)

    if cleanup_root:
        dbg(f"Emptying {root}")
        _empty_dir(root)
    else:
        root.mkdir(parents=True, exist_ok=True)

    if not trees:
        return

    errors: list[BaseException] = []
    with ThreadPoolExecutor(max_workers=min(len(trees), MAX_WRITE_WORKERS)) as pool:
        futures = {
            pool.submit(_write_file, root / f"{file_name}.yml", render_workflow_file(tree)): file_name
            for file_name, tree in trees.items()
        }
        for future in as_completed(futures):
            try:
                path = future.result()
                dbg(f"Wrote {path}")
            except OSError as e:
                errors.append(e)

    if errors:
        raise WriteError(f"Failed to write {len(errors)} of {len(trees)} workflow file(s) in {root}", errors)


def _comparison_string(trees: dict[str, Any]) -> str:
    return "\n\n".join(f"File: {name}.yml\n{to_yaml(trees[name])}" for name in sorted(trees))


def read_workflow_files(root_directory: str | Path) -> dict[str, Any]:
    """Load the `*.yml` files directly inside `root_directory`, keyed by file name."""
    root = Path(root_directory)
    if not root.is_dir():
        return {}
    trees: dict[str, Any] = {}
    for path in sorted(root.glob("*.yml")):
        if not path.is_file():
            continue
        data = load_yaml(path.read_text(encoding="utf-8"))
        trees[path.stem] = data if isinstance(data, dict) else {}
    return trees


def check(workflows: Iterable[Workflow], root_directory: str | Path) -> str:
    """
    Compare the rendered workflows with the files in `root_directory`.

    Returns:
        `""` when the files are up to date, otherwise a diff where `-` lines
        are expected and `+` lines are found on disk.

    """
    expected = _comparison_string(generate_workflows(workflows))
    actual = _comparison_string(read_workflow_files(root_directory))
    return unified_diff(actual, expected)


def generate_from(output: WorkflowOutput) -> None:
    generate(output.workflows, output.root_directory, output.cleanup_root)


def check_from(output: WorkflowOutput) -> str:
    return check(output.workflows, output.root_directory)
