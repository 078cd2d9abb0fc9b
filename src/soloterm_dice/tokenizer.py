from __future__ import annotations

import re


# First colon not preceded by a backslash and followed by whitespace.
_LABEL_RE = re.compile(r"^(?P<label>.*?)(?<!\\):\s+(?P<rest>.*)$")


def split_label(line: str) -> tuple[str | None, str]:
    """Split an optional "Label: " prefix off a trimmed line."""
    m = _LABEL_RE.match(line)
    if not m:
        return None, line

    label = m.group("label").replace("\\:", ":").strip()
    return (label or None), m.group("rest").strip()


def split_expressions(text: str) -> list[str]:
    return [piece.strip() for piece in text.split(",") if piece.strip()]


def tokenize(text: str) -> list[tuple[str | None, list[str]]]:
    """Break raw input into (label, tokens) pairs, one per line that has tokens."""
    lines: list[tuple[str | None, list[str]]] = []

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        label, rest = split_label(line)
        tokens = split_expressions(rest)
        if tokens:
            lines.append((label, tokens))

    return lines
