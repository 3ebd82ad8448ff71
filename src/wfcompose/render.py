"""Conversion of builder trees to plain data and YAML text."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from io import StringIO
from pathlib import PurePath
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.scalarstring import LiteralScalarString

from .context import is_path, path_string
from .errors import CompositionError

YAML_WIDTH = 100


def to_plain(value: Any) -> Any:
    """
    Convert a value to plain, serializable data.

    Expressions render wrapped (`${{ ... }}`), context paths as their dotted
    form, commands as their line, and builders through their `to_json()`.
    `None` is kept (it renders as YAML `null`); callers drop unset fields
    before getting here.
    """
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Enum):
        return to_plain(value.value)
    if isinstance(value, str):
        return str(value)
    if isinstance(value, PurePath):
        return str(value)
    if hasattr(value, "to_json"):
        return to_plain(value.to_json())
    if is_path(value):
        return path_string(value)
    if isinstance(value, Mapping):
        return {_plain_key(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    raise CompositionError(f"Cannot render a value of type {type(value).__name__}")


def _plain_key(key: Any) -> str:
    if isinstance(key, Enum):
        return str(key.value)
    return str(key)


def to_record(fields: list[tuple[str, Any]]) -> dict[str, Any]:
    """Build an ordered record from (key, value) pairs, skipping unset (`None`) values."""
    return {key: to_plain(value) for key, value in fields if value is not None}


def _to_yaml_nodes(value: Any) -> Any:
    """Convert plain data to ruamel nodes (ordered maps, literal blocks for multi-line text)."""
    if isinstance(value, Mapping):
        node = CommentedMap()
        for key, item in value.items():
            node[key] = _to_yaml_nodes(item)
        return node
    if isinstance(value, (list, tuple)):
        return CommentedSeq(_to_yaml_nodes(item) for item in value)
    if isinstance(value, str) and "\n" in value:
        return LiteralScalarString(value)
    return value


def _yaml() -> YAML:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.width = YAML_WIDTH
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def to_yaml(tree: Any) -> str:
    """Render plain data as a YAML document."""
    stream = StringIO()
    _yaml().dump(_to_yaml_nodes(tree), stream)
    return stream.getvalue()


def load_yaml(text: str) -> Any:
    """Parse YAML text into plain data (no comments or formatting kept)."""
    yaml = YAML(typ="safe", pure=True)
    return yaml.load(text)


def generate_workflow_header() -> str:
    """
    Generate a header comment for generated workflow files.

    Returns:
        Header comment string to prepend to YAML content.

    """
    lines = [
        "# ============================================================================",
        "# GENERATED FILE - DO NOT EDIT MANUALLY",
        "#",
        "# This workflow is generated by wfcompose. To modify:",
        "#   1. Edit the source workflow definition",
        "#   2. Run: wfcompose generate",
        "#   3. Commit the regenerated file",
        "#",
        "# ============================================================================",
        "",
    ]
    return "\n".join(lines)
