"""
Command line interface.

    wfcompose generate [--config .github/wfcompose.py] [--root DIR] [--clean]
    wfcompose check [--config .github/wfcompose.py] [--root DIR]

The config file is a Python module exposing `workflows`: either the result of
`define_workflows()` or a plain list of `Workflow`s.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from typing import Any, NoReturn

import click
from rich.markup import escape

from .config import DEFAULT_CONFIG_FILE, WorkflowOutput, define_workflows, find_git_root, resolve_root_directory
from .errors import WfcomposeError
from .generate import check_from, generate_from
from .output import dbg, get_console, set_debug
from .workflow import Workflow


def _default_config_path() -> Path:
    return (find_git_root() or Path.cwd()) / DEFAULT_CONFIG_FILE


def load_config(path: Path) -> WorkflowOutput:
    """Import a config module and return its workflows as a `WorkflowOutput`."""
    if not path.is_file():
        raise click.ClickException(f"Config file not found: {path}")

    spec = importlib.util.spec_from_file_location(f"_wfcompose_config_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise click.ClickException(f"Cannot load config file: {path}")
    module = importlib.util.module_from_spec(spec)
    dbg(f"Loading config from {path}")
    spec.loader.exec_module(module)

    workflows: Any = getattr(module, "workflows", None)
    if isinstance(workflows, WorkflowOutput):
        return workflows
    if isinstance(workflows, (list, tuple)) and all(isinstance(w, Workflow) for w in workflows):
        return define_workflows(workflows)
    raise click.ClickException(
        f"{path} must define `workflows` as define_workflows(...) or a list of Workflow objects"
    )


def _resolve_output(config: str | None, root: str | None, clean: bool | None = None) -> WorkflowOutput:
    output = load_config(Path(config) if config else _default_config_path())
    updates: dict[str, Any] = {}
    if root is not None:
        updates["root_directory"] = resolve_root_directory(root)
    if clean is not None:
        updates["cleanup_root"] = clean
    if updates:
        output = output.model_copy(update=updates)
    return output


def _fail(message: str) -> NoReturn:
    get_console().print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    sys.exit(1)


@click.group(name="wfcompose")
@click.option("--debug/--no-debug", default=False, help="Enable debug output")
def cli(debug: bool) -> None:
    """Compose workflow files from Python definitions."""
    set_debug(debug)


@cli.command()
@click.option("--config", "config", type=click.Path(dir_okay=False), default=None, help="Config module path")
@click.option("--root", "root", type=click.Path(file_okay=False), default=None, help="Output directory")
@click.option("--clean/--no-clean", "clean", default=None, help="Empty the output directory first")
def generate(config: str | None, root: str | None, clean: bool | None) -> None:
    """Write every workflow file."""
    output = _resolve_output(config, root, clean)
    console = get_console()
    try:
        generate_from(output)
    except (WfcomposeError, OSError) as e:
        _fail(str(e))

    for wf in output.workflows:
        console.print(f"[green]✓[/green] {escape(str(output.root_directory / f'{wf.file_name}.yml'))}", soft_wrap=True)


@cli.command()
@click.option("--config", "config", type=click.Path(dir_okay=False), default=None, help="Config module path")
@click.option("--root", "root", type=click.Path(file_okay=False), default=None, help="Output directory")
def check(config: str | None, root: str | None) -> None:
    """Check the workflow files are up to date."""
    output = _resolve_output(config, root)
    console = get_console()
    try:
        diff = check_from(output)
    except (WfcomposeError, OSError) as e:
        _fail(str(e))

    if diff:
        console.print("[red]Workflow files are out of date.[/red] Run: wfcompose generate", soft_wrap=True)
        console.print(diff, markup=False, highlight=False, soft_wrap=True)
        sys.exit(1)
    console.print("[green]All workflows up-to-date![/green]")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
