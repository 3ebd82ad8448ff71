"""Console output helpers.

`dbg()` only prints when debug mode is enabled
(`set_debug(True)`, `--debug` on the CLI, or `WFCOMPOSE_DEBUG=1`).
"""

from __future__ import annotations

import os

from rich.console import Console


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() not in ("", "0", "false", "no")


# Debug mode flag
_debug_mode: bool = _env_flag("WFCOMPOSE_DEBUG")

_console: Console | None = None


def set_debug(enabled: bool) -> None:
    """Enable or disable debug output."""
    global _debug_mode
    _debug_mode = enabled


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return _debug_mode


def get_console() -> Console:
    """
    Get the shared rich console.

    Created lazily so it picks up NO_COLOR / FORCE_COLOR from the environment
    at first use. Call `reset_console()` after changing those.
    """
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def reset_console() -> None:
    """Drop the shared console (for testing)."""
    global _console
    _console = None


def dbg(message: str) -> None:
    """Output a debug message, only when debug mode is enabled."""
    if _debug_mode:
        print(f"[debug] {message}", flush=True)
