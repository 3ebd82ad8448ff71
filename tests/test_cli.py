"""Tests for the CLI module."""

from pathlib import Path

from click.testing import CliRunner

from wfcompose.cli import cli

CONFIG = """
from wfcompose import define_workflows, job, step, workflow

ci = (
    workflow("CI")
    .on("push")
    .job("test", job().runs_on("ubuntu-latest").timeout_minutes({timeout}).step(step().run("pytest")))
)
release = workflow("Release").on("workflow_dispatch").job(
    "publish", job().runs_on("ubuntu-latest").step(step().run("uv publish"))
)

workflows = {workflows}
"""


def _write_config(tmp_path: Path, timeout: int = 10, workflows: str = "[ci, release]") -> Path:
    path = tmp_path / "wfcompose_config.py"
    path.write_text(CONFIG.format(timeout=timeout, workflows=workflows))
    return path


class TestGenerateCommand:
    """Tests for `wfcompose generate`."""

    def test_writes_files(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)
        out_dir = tmp_path / "workflows"
        result = CliRunner().invoke(cli, ["generate", "--config", str(config), "--root", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out_dir.iterdir()) == ["ci.yml", "release.yml"]
        assert "ci.yml" in result.output
        assert "release.yml" in result.output

    def test_define_workflows_config(self, tmp_path: Path) -> None:
        """A config may set its own root directory and cleanup policy."""
        out_dir = tmp_path / "custom"
        out_dir.mkdir()
        (out_dir / "stale.yml").write_text("name: Stale\n")
        config = _write_config(
            tmp_path, workflows=f"define_workflows([ci], {str(out_dir)!r}, cleanup_root=True)"
        )
        result = CliRunner().invoke(cli, ["generate", "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out_dir.iterdir()) == ["ci.yml"]

    def test_no_clean_overrides_config(self, tmp_path: Path) -> None:
        out_dir = tmp_path / "custom"
        out_dir.mkdir()
        (out_dir / "stale.yml").write_text("name: Stale\n")
        config = _write_config(
            tmp_path, workflows=f"define_workflows([ci], {str(out_dir)!r}, cleanup_root=True)"
        )
        result = CliRunner().invoke(cli, ["generate", "--config", str(config), "--no-clean"])
        assert result.exit_code == 0, result.output
        assert (out_dir / "stale.yml").exists()

    def test_invalid_workflow(self, tmp_path: Path) -> None:
        """Validation errors are printed and exit non-zero."""
        config = tmp_path / "bad.py"
        config.write_text(
            "from wfcompose import job, step, workflow\n"
            "workflows = [workflow('CI').job('test', job().step(step().run('x')))]\n"
        )
        result = CliRunner().invoke(cli, ["generate", "--config", str(config), "--root", str(tmp_path / "out")])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "runs-on" in result.output

    def test_missing_config(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["generate", "--config", str(tmp_path / "nope.py")])
        assert result.exit_code != 0
        assert "Config file not found" in result.output

    def test_config_without_workflows(self, tmp_path: Path) -> None:
        config = tmp_path / "empty.py"
        config.write_text("x = 1\n")
        result = CliRunner().invoke(cli, ["generate", "--config", str(config)])
        assert result.exit_code != 0
        assert "must define `workflows`" in result.output

    def test_debug_output(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)
        result = CliRunner().invoke(
            cli, ["--debug", "generate", "--config", str(config), "--root", str(tmp_path / "out")]
        )
        assert result.exit_code == 0, result.output
        assert "[debug] Loading config" in result.output


class TestCheckCommand:
    """Tests for `wfcompose check`."""

    def test_up_to_date(self, tmp_path: Path) -> None:
        config = _write_config(tmp_path)
        out_dir = str(tmp_path / "workflows")
        runner = CliRunner()
        assert runner.invoke(cli, ["generate", "--config", str(config), "--root", out_dir]).exit_code == 0

        result = runner.invoke(cli, ["check", "--config", str(config), "--root", out_dir])
        assert result.exit_code == 0, result.output
        assert "All workflows up-to-date!" in result.output

    def test_out_of_date(self, tmp_path: Path) -> None:
        """A changed field fails the check and shows up in the diff."""
        out_dir = str(tmp_path / "workflows")
        runner = CliRunner()
        config = _write_config(tmp_path, timeout=10)
        assert runner.invoke(cli, ["generate", "--config", str(config), "--root", out_dir]).exit_code == 0

        config = _write_config(tmp_path, timeout=25)
        result = runner.invoke(cli, ["check", "--config", str(config), "--root", out_dir])
        assert result.exit_code == 1
        assert "out of date" in result.output
        assert "timeout-minutes: 25" in result.output
