"""Pytest configuration for wfcompose tests."""

import pytest


@pytest.fixture(autouse=True)
def reset_state(monkeypatch: pytest.MonkeyPatch):
    """Reset debug/console state between tests and disable colors for CLI invocations."""
    from wfcompose.output import reset_console, set_debug

    # Rich ignores NO_COLOR when FORCE_COLOR is set
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("WFCOMPOSE_ROOT", raising=False)
    monkeypatch.delenv("WFCOMPOSE_DEBUG", raising=False)

    set_debug(False)
    reset_console()

    yield

    set_debug(False)
    reset_console()
