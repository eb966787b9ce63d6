"""Split a comma-joined row blob into trimmed fields."""

from __future__ import annotations

import re
from typing import List

_WRAPPING_QUOTES = re.compile(r'^"|"$')


def _clean_field(text: str) -> str:
    return _WRAPPING_QUOTES.sub("", text.strip())


def split_simple(raw: str) -> List[str]:
    """Split on every comma and drop all double quotes."""
    return [field.replace('"', "").strip() for field in raw.split(",")]


def split_quoted(raw: str) -> List[str]:
    """Split on commas that sit outside double-quoted segments.

    A quote preceded by a backslash does not toggle the quoted state.
    Trailing content after the last comma is kept as a final field.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    prev = ""
    for char in raw:
        if char == '"' and prev != "\\":
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append(_clean_field("".join(current)))
            current = []
            prev = char
            continue
        current.append(char)
        prev = char
    if current:
        fields.append(_clean_field("".join(current)))
    return fields


def split_fields(raw: str, mode: str = "quoted") -> List[str]:
    """Split ``raw`` into fields using ``mode`` (``"quoted"`` or ``"simple"``)."""
    if mode == "quoted":
        return split_quoted(raw)
    if mode == "simple":
        return split_simple(raw)
    raise ValueError(f"Unknown split mode: {mode!r}")


__all__ = ["split_fields", "split_quoted", "split_simple"]
