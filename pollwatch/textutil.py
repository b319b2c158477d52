"""Small string helpers used for path handling."""

from __future__ import annotations


def split(text: str, sep: str, keep_empty: bool = False) -> list[str]:
    """Split ``text`` on the single character ``sep``.

    Empty pieces between separators are kept only when ``keep_empty`` is true;
    a trailing empty piece is never kept.
    """
    if len(sep) != 1:
        raise ValueError("separator must be a single character")
    parts = text.split(sep)
    last = parts.pop()
    result = parts if keep_empty else [part for part in parts if part]
    if last:
        result.append(last)
    return result


def str_starts_with(start: str, text: str) -> int:
    """Return the index of the last character of ``start`` if ``text`` begins
    with it, otherwise -1 (also -1 when ``start`` is empty)."""
    if start and text.startswith(start):
        return len(start) - 1
    return -1