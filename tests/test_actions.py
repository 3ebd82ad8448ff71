"""Tests for action step factories."""

from wfcompose import actions
from wfcompose import expr as e


class TestActions:
    """Tests for the pre-defined action steps."""

    def test_checkout(self) -> None:
        assert actions.checkout().to_json() == {"uses": "actions/checkout@v4"}
        assert actions.checkout(fetch_depth=0, submodules=True).to_json() == {
            "uses": "actions/checkout@v4",
            "with": {"fetch-depth": 0, "submodules": True},
        }

    def test_setup_python(self) -> None:
        d = actions.setup_python().to_json()
        assert d == {"uses": "actions/setup-python@v5", "with": {"python-version": "3.11"}}

    def test_setup_uv(self) -> None:
        """The default version is left to the action."""
        assert actions.setup_uv().to_json() == {"uses": "astral-sh/setup-uv@v4"}
        assert actions.setup_uv("0.5.0").to_json()["with"] == {"version": "0.5.0"}

    def test_setup_rust_and_node(self) -> None:
        assert actions.setup_rust().to_json()["with"] == {"toolchain": "stable"}
        assert actions.setup_node("22").to_json() == {"uses": "actions/setup-node@v4", "with": {"node-version": "22"}}

    def test_cache(self) -> None:
        d = actions.cache("~/.cache/uv", e.concat("uv-", e.hash_files("uv.lock")), restore_keys="uv-").to_json()
        assert d["with"] == {"path": "~/.cache/uv", "key": "uv-${{ hashFiles('uv.lock') }}", "restore-keys": "uv-"}

    def test_artifacts(self) -> None:
        assert actions.upload_artifact("wheel", "dist/").to_json()["with"] == {"name": "wheel", "path": "dist/"}
        assert actions.download_artifact().to_json() == {"uses": "actions/download-artifact@v4"}

    def test_chainable(self) -> None:
        """Factories return steps that accept further setters."""
        d = actions.checkout().name("Checkout").if_(e.success()).to_json()
        assert list(d) == ["if", "name", "uses"]
