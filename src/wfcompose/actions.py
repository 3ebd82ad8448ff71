"""
Steps for frequently used actions.

Each factory returns a `Step` with `uses` and `with` filled in; chain further
setters as usual:

    job.step(actions.checkout(fetch_depth=0).name("Checkout"))
"""

from __future__ import annotations

from typing import Any

from .step import Step


def _action_step(uses: str, **with_params: Any) -> Step:
    """Helper to create an action step; `None` parameters are left out."""
    params = {key.replace("_", "-"): value for key, value in with_params.items() if value is not None}
    s = Step().uses(uses)
    if params:
        s.with_(params)
    return s


def checkout(**kwargs: Any) -> Step:
    """
    Check out the repository.

    Args:
        **kwargs: Action inputs; underscores become dashes (`fetch_depth=0`).

    """
    return _action_step("actions/checkout@v4", **kwargs)


def setup_python(version: str = "3.11", **kwargs: Any) -> Step:
    """
    Create a setup-python step with the specified version.

    Args:
        version: Python version to install (default: "3.11")
        **kwargs: Additional parameters for the action

    """
    return _action_step("actions/setup-python@v5", python_version=version, **kwargs)


def setup_uv(version: str = "latest", **kwargs: Any) -> Step:
    """
    Create a setup-uv step.

    Args:
        version: uv version to install (default: "latest")
        **kwargs: Additional parameters for the action

    """
    return _action_step("astral-sh/setup-uv@v4", version=None if version == "latest" else version, **kwargs)


def setup_rust(toolchain: str = "stable", **kwargs: Any) -> Step:
    """
    Create a setup-rust step.

    Args:
        toolchain: Rust toolchain to install (default: "stable")
        **kwargs: Additional parameters for the action

    """
    return _action_step("dtolnay/rust-toolchain@master", toolchain=toolchain, **kwargs)


def setup_node(version: str = "20", **kwargs: Any) -> Step:
    """Create a setup-node step."""
    return _action_step("actions/setup-node@v4", node_version=version, **kwargs)


def cache(path: Any, key: Any, **kwargs: Any) -> Step:
    """
    Create a cache step.

    Args:
        path: Path(s) to cache
        key: Cache key
        **kwargs: Additional parameters (e.g., restore_keys)

    """
    return _action_step("actions/cache@v4", path=path, key=key, **kwargs)


def upload_artifact(name: Any, path: Any, **kwargs: Any) -> Step:
    return _action_step("actions/upload-artifact@v4", name=name, path=path, **kwargs)


def download_artifact(name: Any = None, path: Any = None, **kwargs: Any) -> Step:
    return _action_step("actions/download-artifact@v4", name=name, path=path, **kwargs)
