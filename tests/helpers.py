# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared test helpers."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable

from castplay.events import Event
from castplay.player import Player
from castplay.timeline import Cursor, ScreenState


class EventRecorder:
    """Stands in for a dispatch loop: collects posted events."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [event.name for event in self.events]

    def apply(self, player: Player) -> Player:
        """Fold every recorded update-state event into ``player``."""
        for event in self.events:
            if event.name == "update-state":
                fn, *args = event.args
                player = fn(player, *args)
        return player


def screen(text: str, x: int = 0, y: int = 0) -> ScreenState:
    return ScreenState(lines=(((text, {}),),), cursor=Cursor(x=x, y=y))


async def wait_for(predicate: Callable[[], bool], timeout: float = 3.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout)


async def shutdown(player: Player) -> None:
    """Stop a running session and wait for its loop to exit."""
    session = player.playback
    if session is None:
        return
    session.stop()
    if session.task is not None:
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.wait_for(session.task, 2.0)
