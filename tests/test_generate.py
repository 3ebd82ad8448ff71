"""Tests for writing workflow files and checking them."""

from pathlib import Path

import pytest
from ruamel.yaml import YAML

from wfcompose import actions, commands
from wfcompose import expr as e
from wfcompose.config import define_workflows
from wfcompose.errors import ValidationError, WorkflowError, WriteError
from wfcompose.generate import (
    check,
    check_from,
    generate,
    generate_from,
    generate_workflows,
    read_workflow_files,
    render_workflow_file,
)
from wfcompose.jobs import job
from wfcompose.step import step
from wfcompose.triggers import on_pull_request, on_push
from wfcompose.workflow import Workflow, workflow


def _ci(timeout: int = 10) -> Workflow:
    return (
        workflow("CI")
        .on(on_push(branches=["main"]) | on_pull_request())
        .job(
            "test",
            job()
            .runs_on("ubuntu-latest")
            .timeout_minutes(timeout)
            .strategy({"matrix": {"python": ["3.11", "3.12"]}})
            .step(actions.checkout())
            .step(actions.setup_python("3.12"))
            .step(lambda s: s.name("Test").run(lambda c: ["uv sync", e.concat("uv run --python ", c.axis("python"), " pytest")])),
        )
    )


def _release() -> Workflow:
    return (
        workflow("Release")
        .on("push", {"tags": ["v*"]})
        .job(
            "publish",
            job()
            .runs_on("ubuntu-latest")
            .step(step().id("version").run(commands.set_output("version", "1.0")))
            .outputs(lambda c: {"version": e.expr(c.step_output("version", "version"))}),
        )
    )


def _load(path: Path):
    return YAML(typ="safe", pure=True).load(path.read_text())


class TestGenerateWorkflows:
    """Tests for generate_workflows."""

    def test_keyed_by_file_name(self) -> None:
        trees = generate_workflows([_ci(), _release()])
        assert list(trees) == ["ci", "release"]
        assert trees["ci"]["name"] == "CI"

    def test_duplicate_file_names(self) -> None:
        with pytest.raises(ValidationError) as info:
            generate_workflows([workflow("CI"), workflow("Other", file_name="ci")])
        assert isinstance(info.value.errors[0], WorkflowError)
        assert "ci.yml" in str(info.value)

    def test_aggregates_errors_from_all_workflows(self) -> None:
        bad_a = workflow("A").job("x", job())
        bad_b = workflow("B").job("y", job().step(step().run("ls")))
        with pytest.raises(ValidationError) as info:
            generate_workflows([bad_a, bad_b])
        assert len(info.value.errors) == 2
        assert "'x'" in str(info.value.errors[0])
        assert "runs-on" in str(info.value.errors[1])


class TestRenderWorkflowFile:
    """Tests for the rendered file text."""

    def test_header_then_yaml(self) -> None:
        text = render_workflow_file({"name": "CI"})
        header, body = text.split("\n\n", 1)
        assert all(line.startswith("#") for line in header.splitlines())
        assert body == "name: CI\n"


class TestGenerate:
    """Tests for writing files."""

    def test_writes_one_file_per_workflow(self, tmp_path: Path) -> None:
        """Two workflows produce exactly two files with their own jobs."""
        generate([_ci(), _release()], tmp_path)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ci.yml", "release.yml"]

        ci = _load(tmp_path / "ci.yml")
        release = _load(tmp_path / "release.yml")
        assert list(ci["jobs"]) == ["test"]
        assert list(release["jobs"]) == ["publish"]
        assert ci["on"] == {"push": {"branches": ["main"]}, "pull_request": None}
        assert ci["jobs"]["test"]["strategy"]["matrix"] == {"python": ["3.11", "3.12"]}
        assert ci["jobs"]["test"]["steps"][2]["run"] == "uv sync\nuv run --python ${{ matrix.python }} pytest"
        assert release["jobs"]["publish"]["outputs"] == {"version": "${{ steps.version.outputs.version }}"}

    def test_file_starts_with_header(self, tmp_path: Path) -> None:
        generate([_ci()], tmp_path)
        text = (tmp_path / "ci.yml").read_text()
        assert text.startswith("# ====")
        assert "GENERATED FILE" in text

    def test_creates_directory(self, tmp_path: Path) -> None:
        root = tmp_path / "nested" / "workflows"
        generate([_ci()], root)
        assert (root / "ci.yml").is_file()

    def test_keeps_other_files_without_cleanup(self, tmp_path: Path) -> None:
        (tmp_path / "manual.yml").write_text("name: Manual\n")
        generate([_ci()], tmp_path)
        assert (tmp_path / "manual.yml").exists()

    def test_cleanup_root(self, tmp_path: Path) -> None:
        """Cleanup empties the directory before writing."""
        (tmp_path / "stale.yml").write_text("name: Stale\n")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "x.txt").write_text("x")
        generate([_ci()], tmp_path, cleanup_root=True)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ci.yml"]

    def test_invalid_workflow_writes_nothing(self, tmp_path: Path) -> None:
        """Validation happens before the directory is touched."""
        (tmp_path / "stale.yml").write_text("name: Stale\n")
        with pytest.raises(ValidationError):
            generate([_ci(), workflow("Bad").job("x", job())], tmp_path, cleanup_root=True)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["stale.yml"]

    def test_write_errors_are_collected(self, tmp_path: Path) -> None:
        """Failed writes are reported together; other files are still written."""
        (tmp_path / "ci.yml").mkdir()
        (tmp_path / "release.yml").mkdir()
        ok = workflow("Docs").on("push").job("build", job().runs_on("ubuntu-latest").step(step().run("make")))
        with pytest.raises(WriteError) as info:
            generate([_ci(), _release(), ok], tmp_path)
        assert len(info.value.errors) == 2
        assert all(isinstance(err, OSError) for err in info.value.errors)
        assert (tmp_path / "docs.yml").is_file()

    def test_generate_from_output(self, tmp_path: Path) -> None:
        generate_from(define_workflows([_release()], tmp_path))
        assert (tmp_path / "release.yml").is_file()


class TestCheck:
    """Tests for checking files on disk."""

    def test_up_to_date(self, tmp_path: Path) -> None:
        generate([_ci(), _release()], tmp_path)
        assert check([_ci(), _release()], tmp_path) == ""

    def test_reports_changed_field(self, tmp_path: Path) -> None:
        """Changing a job's timeout shows up in the diff."""
        generate([_ci(timeout=10), _release()], tmp_path)
        diff = check([_ci(timeout=30), _release()], tmp_path)
        assert diff
        assert "timeout-minutes: 30" in diff
        assert "timeout-minutes: 10" in diff

    def test_missing_directory(self, tmp_path: Path) -> None:
        diff = check([_ci()], tmp_path / "missing")
        assert "File: ci.yml" in diff

    def test_extra_file_on_disk(self, tmp_path: Path) -> None:
        generate([_ci()], tmp_path)
        (tmp_path / "extra.yml").write_text("name: Extra\n")
        assert "File: extra.yml" in check([_ci()], tmp_path)

    def test_ignores_comments_and_formatting(self, tmp_path: Path) -> None:
        """Only the parsed content is compared."""
        generate([_release()], tmp_path)
        path = tmp_path / "release.yml"
        path.write_text("# edited by hand\n" + path.read_text() + "\n\n")
        assert check([_release()], tmp_path) == ""

    def test_check_from_output(self, tmp_path: Path) -> None:
        output = define_workflows([_ci()], tmp_path)
        generate_from(output)
        assert check_from(output) == ""

    def test_read_workflow_files(self, tmp_path: Path) -> None:
        (tmp_path / "a.yml").write_text("name: A\n")
        (tmp_path / "b.yml").write_text("- not a mapping\n")
        (tmp_path / "c.yaml").write_text("name: C\n")
        assert read_workflow_files(tmp_path) == {"a": {"name": "A"}, "b": {}}
