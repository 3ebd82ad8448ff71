"""Human-readable line diffs between expected and received text."""

from __future__ import annotations

import difflib

INDENT = "  "


def unified_diff(
    actual: str,
    expected: str,
    *,
    max_lines: int = 15,
    show_legend: bool = True,
    truncate: int | None = None,
) -> str:
    """
    Diff `actual` against `expected`.

    Returns `""` when both are equal. Otherwise returns a unified diff where
    `-` lines are expected and `+` lines are received. A run of more than
    `max_lines` consecutive changes of the same kind is cut off with a
    `... ` marker, and hunk separators are rendered as `--`.

    Args:
        actual: The received text (e.g. files on disk).
        expected: The text that should be there.
        max_lines: Maximum consecutive changed lines shown per run.
        show_legend: Prefix the diff with an Expected/Received legend.
        truncate: Cut changed lines longer than this many characters.

    """
    if actual == expected:
        return ""

    raw = list(
        difflib.unified_diff(
            expected.splitlines(),
            actual.splitlines(),
            lineterm="",
        )
    )
    # Drop the file headers and the first hunk header.
    body = raw[3:]

    counts = {"+": 0, "-": 0}
    previous_state: str | None = None
    previous_count = 0
    lines: list[tuple[str, bool]] = []
    for line in body:
        if not line:
            continue
        char = line[0]
        if char in "+-":
            if previous_state != char:
                previous_state = char
                previous_count = 0
            previous_count += 1
            counts[char] += 1
            if previous_count == max_lines:
                lines.append((f"{char} ...", True))
                continue
            if previous_count > max_lines:
                continue
        lines.append((line, False))

    compact = counts["+"] == 1 and counts["-"] == 1 and len(lines) == 2

    formatted: list[str] = []
    for line, marker in lines:
        if marker:
            formatted.append(line)
        elif line[0] in "+-":
            content = _truncate(line[1:], truncate)
            formatted.append(content if compact else f"{line[0]} {content}")
        elif line.startswith("@@"):
            formatted.append("--")
        else:
            formatted.append(f" {line}")

    if show_legend:
        if compact:
            formatted = [f"- Expected   {formatted[0]}", f"+ Received   {formatted[1]}"]
        else:
            formatted = [f"- Expected  - {counts['-']}", f"+ Received  + {counts['+']}", "", *formatted]

    return "\n".join(INDENT + line for line in formatted)


def _truncate(line: str, length: int | None) -> str:
    if length is None or len(line) <= length:
        return line
    return line[: max(length - 1, 0)] + "…"
