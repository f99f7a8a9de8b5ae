# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal front end: draws player states and maps keys to player events."""

from __future__ import annotations

import asyncio
import contextlib
import os
import signal
import sys
import termios
import tty
from collections.abc import Mapping
from typing import Any

from castplay import events
from castplay.dispatcher import PlayerController, create_player
from castplay.player import Player
from castplay.settings import Settings

ANSI_RESET = "\x1b[0m"
ANSI_HIDE_CURSOR = "\x1b[?25l"
ANSI_SHOW_CURSOR = "\x1b[?25h"
ANSI_ALT_SCREEN = "\x1b[?1049h"
ANSI_EXIT_ALT = "\x1b[?1049l"
ANSI_CLEAR_LINE = "\x1b[K"


def _move_to(row: int, col: int) -> str:
    return f"\x1b[{row};{col}H"


FG_CODES = {
    "black": 30,
    "red": 31,
    "green": 32,
    "brown": 33,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
}

# key -> (event name, args)
KEY_BINDINGS: dict[str, tuple[str, tuple[Any, ...]]] = {
    " ": (events.TOGGLE_PLAY, ()),
    "h": (events.REWIND, ()),
    "l": (events.FAST_FORWARD, ()),
    "+": (events.SPEED_UP, ()),
    "=": (events.SPEED_UP, ()),
    "-": (events.SPEED_DOWN, ()),
    **{str(digit): (events.SEEK, (digit / 10,)) for digit in range(10)},
}


def _color_codes(value: Any, base: int) -> list[int]:
    """SGR codes for a color given as palette index, name or hex string."""
    if isinstance(value, bool) or value is None:
        return []
    if isinstance(value, int):
        if value < 8:
            return [base + value]
        if value < 16:
            return [base + 60 + value - 8]
        return [base + 8, 5, value]
    if isinstance(value, str):
        name = value.lower()
        bright = name.startswith("bright")
        code = FG_CODES.get(name.removeprefix("bright"))
        if code is not None:
            return [code - 30 + base + (60 if bright else 0)]
        if len(value) == 6:
            try:
                rgb = [int(value[i : i + 2], 16) for i in (0, 2, 4)]
            except ValueError:
                return []
            return [base + 8, 2, *rgb]
    return []


def attrs_to_sgr(attrs: Mapping[str, Any]) -> str:
    codes: list[int] = []
    if attrs.get("bold"):
        codes.append(1)
    if attrs.get("italic"):
        codes.append(3)
    if attrs.get("underline"):
        codes.append(4)
    if attrs.get("blink"):
        codes.append(5)
    if attrs.get("inverse"):
        codes.append(7)
    codes.extend(_color_codes(attrs.get("fg"), 30))
    codes.extend(_color_codes(attrs.get("bg"), 40))
    if not codes:
        return ANSI_RESET
    return ANSI_RESET + f"\x1b[{';'.join(str(c) for c in codes)}m"


def render_line(line: Any) -> str:
    """Render one line of ``(text, attrs)`` fragments as ANSI text."""
    parts: list[str] = []
    for fragment in line or ():
        text, attrs = fragment[0], (fragment[1] if len(fragment) > 1 else None) or {}
        parts.append(attrs_to_sgr(attrs))
        parts.append(text)
    parts.append(ANSI_RESET)
    return "".join(parts)


def format_time(seconds: float) -> str:
    seconds = max(int(seconds), 0)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def status_line(player: Player) -> str:
    if player.loading:
        state = "loading"
    elif player.error:
        state = f"error: {player.error}"
    else:
        state = "playing" if player.playing else "paused"
    parts = [
        f"[{state}]",
        f"{format_time(player.current_time)} / {format_time(player.duration)}",
        f"{player.speed:g}x",
    ]
    if player.title:
        parts.append(player.title)
    if player.show_hud:
        parts.append("space play/pause  h/l -5s/+5s  +/- speed  0-9 seek  q quit")
    return "  ".join(parts)


class PlayerTui:
    def __init__(
        self,
        source: str,
        options: Mapping[str, Any],
        *,
        settings: Settings | None = None,
        interactive: bool | None = None,
    ) -> None:
        self._source = source
        self._options = dict(options)
        self._settings = settings or Settings()
        self._player: Player | None = None
        self._controller: PlayerController | None = None
        self._dirty = True
        self._stop = False
        self._stdin_fd = sys.stdin.fileno()
        self._interactive = sys.stdin.isatty() if interactive is None else interactive
        self._orig_term: list[Any] | None = None

    async def run(self) -> Player | None:
        self._install_terminal()
        try:
            await self._main()
        finally:
            self._restore_terminal()
        return self._player

    def _install_terminal(self) -> None:
        if self._interactive:
            self._orig_term = termios.tcgetattr(self._stdin_fd)
            tty.setcbreak(self._stdin_fd)
        sys.stdout.write(ANSI_ALT_SCREEN + ANSI_HIDE_CURSOR)
        sys.stdout.flush()

    def _restore_terminal(self) -> None:
        if self._orig_term is not None:
            termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._orig_term)
        sys.stdout.write(ANSI_SHOW_CURSOR + ANSI_EXIT_ALT)
        sys.stdout.flush()

    async def _main(self) -> None:
        loop = asyncio.get_running_loop()
        options = {**self._options, "auto_play": True}
        self._controller = create_player(self._on_state, self._source, options, settings=self._settings)
        if self._interactive:
            loop.add_reader(self._stdin_fd, self._on_keypress)
        with contextlib.suppress(ValueError):
            signal.signal(signal.SIGWINCH, lambda *_: self._mark_dirty())
        try:
            while not self._stop:
                await asyncio.sleep(0.05)
                if self._dirty:
                    self._render()
        finally:
            if self._interactive:
                loop.remove_reader(self._stdin_fd)
            await self._controller.close()

    def _mark_dirty(self) -> None:
        self._dirty = True

    def _on_state(self, player: Player) -> None:
        was_playing = self._player is not None and self._player.playing
        self._player = player
        self._dirty = True
        if player.error and not player.loading:
            self._stop = True
        elif was_playing and not player.playing and not player.loop and player.current_time >= player.duration:
            self._stop = True

    def _on_keypress(self) -> None:
        ch = os.read(self._stdin_fd, 1)
        if not ch or self._controller is None:
            return
        key = ch.decode(errors="ignore")
        if key == "q":
            self._stop = True
            return
        binding = KEY_BINDINGS.get(key)
        if binding is not None:
            name, args = binding
            self._controller.dispatch(name, *args)
        self._controller.dispatch(events.POINTER_MOVE)

    def _render(self) -> None:
        self._dirty = False
        player = self._player
        if player is None:
            return
        out = [_move_to(1, 1)]
        height = player.height or len(player.lines)
        for row in range(height):
            line = player.lines[row] if row < len(player.lines) else ()
            out.append(_move_to(row + 1, 1) + render_line(line) + ANSI_CLEAR_LINE)
        out.append(_move_to(height + 2, 1) + status_line(player) + ANSI_CLEAR_LINE)
        cursor = player.cursor
        if cursor.visible and cursor.on and player.playing:
            out.append(_move_to(cursor.y + 1, cursor.x + 1) + ANSI_SHOW_CURSOR)
        else:
            out.append(ANSI_HIDE_CURSOR)
        sys.stdout.write("".join(out))
        sys.stdout.flush()
