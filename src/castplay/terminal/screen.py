# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Screen extraction utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import pyte

# pyte attribute name -> exported attribute name
_ATTRS = (
    ("fg", "fg"),
    ("bg", "bg"),
    ("bold", "bold"),
    ("italics", "italic"),
    ("underscore", "underline"),
    ("reverse", "inverse"),
    ("blink", "blink"),
)


def char_attrs(char: Any) -> tuple[tuple[str, Any], ...]:
    """Return the non-default rendition attributes of a pyte character."""
    attrs = []
    for source, name in _ATTRS:
        value = getattr(char, source, None)
        if value in (None, False, "default"):
            continue
        attrs.append((name, value))
    return tuple(attrs)


def compact_lines(screen: pyte.Screen) -> tuple[tuple[tuple[str, dict[str, Any]], ...], ...]:
    """Collapse each screen row into runs of equally-styled text.

    Args:
        screen: Pyte screen object

    Returns:
        One tuple of ``(text, attrs)`` fragments per row
    """
    lines = []
    for y in range(screen.lines):
        row = screen.buffer[y]
        fragments: list[tuple[str, dict[str, Any]]] = []
        run: list[str] = []
        run_attrs: tuple[tuple[str, Any], ...] | None = None
        for x in range(screen.columns):
            char = row[x]
            attrs = char_attrs(char)
            if run and attrs != run_attrs:
                fragments.append(("".join(run), dict(run_attrs or ())))
                run = []
            run.append(char.data)
            run_attrs = attrs
        if run:
            fragments.append(("".join(run), dict(run_attrs or ())))
        lines.append(tuple(fragments))
    return tuple(lines)
