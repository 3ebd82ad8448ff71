"""Tests for plain-data conversion and YAML output."""

from pathlib import Path

import pytest
from ruamel.yaml import YAML

from wfcompose import commands
from wfcompose import expr as e
from wfcompose.constants import Shell
from wfcompose.context import ctx
from wfcompose.errors import CompositionError
from wfcompose.render import generate_workflow_header, to_plain, to_yaml


class TestToPlain:
    """Tests for to_plain."""

    def test_values(self) -> None:
        tree = {
            "expr": e.success(),
            "path": ctx.github["ref"],
            "command": commands.set_debug("x"),
            "enum": Shell.BASH,
            "file": Path("a/b"),
            "nested": [1, None, (True, "s")],
        }
        assert to_plain(tree) == {
            "expr": "${{ success() }}",
            "path": "github.ref",
            "command": "echo ::debug::x",
            "enum": "bash",
            "file": "a/b",
            "nested": [1, None, [True, "s"]],
        }

    def test_unsupported(self) -> None:
        with pytest.raises(CompositionError):
            to_plain({"x": object()})


class TestToYaml:
    """Tests for to_yaml."""

    def test_block_style_and_order(self) -> None:
        """Keys keep insertion order in block style."""
        text = to_yaml({"name": "CI", "on": {"push": None}, "jobs": {"a": {"runs-on": "ubuntu-latest"}}})
        assert text.splitlines()[0] == "name: CI"
        assert "jobs:\n  a:\n    runs-on: ubuntu-latest" in text
        assert text.index("name:") < text.index("on:") < text.index("jobs:")

    def test_multiline_literal(self) -> None:
        """Multi-line strings render as literal blocks."""
        text = to_yaml({"run": "echo a\necho b"})
        assert text == "run: |-\n  echo a\n  echo b\n"

    def test_round_trips_through_parser(self) -> None:
        tree = {"steps": [{"run": "a\nb", "with": {"n": 1, "flag": True}}], "on": {"push": None}}
        assert YAML(typ="safe", pure=True).load(to_yaml(tree)) == tree


class TestHeader:
    """Tests for the generated-file header."""

    def test_header(self) -> None:
        header = generate_workflow_header()
        assert header.startswith("# ====")
        assert "GENERATED FILE - DO NOT EDIT MANUALLY" in header
        assert "wfcompose generate" in header
        assert header.endswith("\n")
