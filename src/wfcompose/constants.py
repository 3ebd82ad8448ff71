"""Well-known runner labels, shells and permission presets."""

from __future__ import annotations

from enum import Enum


class Runner(str, Enum):
    """GitHub-hosted runner labels."""

    UBUNTU_LATEST = "ubuntu-latest"
    UBUNTU_24_04 = "ubuntu-24.04"
    UBUNTU_22_04 = "ubuntu-22.04"
    UBUNTU_24_04_ARM = "ubuntu-24.04-arm"
    WINDOWS_LATEST = "windows-latest"
    WINDOWS_2025 = "windows-2025"
    WINDOWS_2022 = "windows-2022"
    MACOS_LATEST = "macos-latest"
    MACOS_15 = "macos-15"
    MACOS_14 = "macos-14"
    MACOS_13 = "macos-13"
    SELF_HOSTED = "self-hosted"


class Shell(str, Enum):
    """Built-in shells for `run` steps."""

    BASH = "bash"
    PWSH = "pwsh"
    PYTHON = "python"
    SH = "sh"
    CMD = "cmd"
    POWERSHELL = "powershell"


class PermissionAll(str, Enum):
    """Presets granting the same access to every permission scope."""

    READ_ALL = "read-all"
    WRITE_ALL = "write-all"
