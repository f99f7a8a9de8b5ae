# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal emulation using pyte."""

from __future__ import annotations

import pyte

from castplay.terminal.screen import compact_lines
from castplay.timeline import Cursor, ScreenState


class TerminalEmulator:
    """Terminal emulation using pyte."""

    def __init__(self, cols: int = 80, rows: int = 24) -> None:
        """Initialize terminal emulator.

        Args:
            cols: Terminal width in columns
            rows: Terminal height in rows
        """
        self.cols = cols
        self.rows = rows
        self._screen = pyte.Screen(cols, rows)
        self._stream = pyte.Stream(self._screen)

    def feed(self, data: str | bytes) -> None:
        """Feed recorded output through the terminal state machine.

        Args:
            data: Output chunk; bytes are decoded as UTF-8
        """
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        self._stream.feed(data)

    def snapshot(self) -> ScreenState:
        """Get an immutable view of the current screen.

        Returns:
            ScreenState with compacted lines and the cursor position
        """
        cursor = self._screen.cursor
        return ScreenState(
            lines=compact_lines(self._screen),
            cursor=Cursor(x=cursor.x, y=cursor.y, visible=not cursor.hidden),
        )

    def reset(self) -> None:
        """Reset terminal to initial state."""
        self._screen.reset()
