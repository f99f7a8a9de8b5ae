# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Serialized event dispatch loop.

One consumer task pops events off an unbounded queue and applies the matching
handler, so handlers never observe each other's in-flight states. The loop
is the only writer of the player state.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable, Mapping
from functools import partial
from typing import Any

from castplay.channel import Channel
from castplay.events import POINTER_MOVE, TOGGLE_PLAY, UPDATE_STATE, Event
from castplay.fetch import fetch_recording
from castplay.handlers import process_event
from castplay.logging import get_logger
from castplay.player import Player, PlayerOptions, make_player, set_show_hud
from castplay.settings import Settings

log = get_logger(__name__)

Target = Callable[[Player], None]


async def activity(moves: Channel[Any], quiet_s: float) -> AsyncIterator[bool]:
    """Turn raw input notifications into an activity indicator.

    Yields True when input shows up, then False once ``quiet_s`` seconds pass
    without input, and so on until ``moves`` is closed.
    """
    while True:
        if await moves.get() is None:
            return
        yield True
        while True:
            try:
                value = await asyncio.wait_for(moves.get(), timeout=quiet_s)
            except TimeoutError:
                break
            if value is None:
                return
        yield False


class PlayerController:
    """Owns the player state and the tasks that update it."""

    def __init__(
        self,
        player: Player,
        *,
        target: Target | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._events: asyncio.Queue[Event] = asyncio.Queue()
        # Single-slot dropping buffer: bursts of pointer moves never queue up
        self._moves: Channel[bool] = Channel("pointer-moves")
        self._target = target
        self._tasks: list[asyncio.Task[None]] = []
        fetcher = player.fetcher or partial(fetch_recording, timeout_s=self.settings.fetch_timeout_s)
        self._player = player.replace(dispatch=self.post, fetcher=fetcher)

    @property
    def state(self) -> Player:
        """Current player snapshot (read-only)."""
        return self._player

    def post(self, event: Event) -> None:
        self._events.put_nowait(event)

    def dispatch(self, name: str, *args: Any) -> None:
        self.post(Event(name, args))

    def start(self) -> None:
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._event_loop(), name="player-events"),
            asyncio.create_task(self._activity_loop(), name="player-activity"),
        ]
        if self._player.auto_play:
            self.dispatch(TOGGLE_PLAY)

    async def drain(self) -> None:
        """Wait until every queued event has been processed."""
        await self._events.join()

    async def close(self) -> None:
        """Stop playback and the loop tasks."""
        session = self._player.playback
        if session is not None:
            session.stop()
            if session.task is not None:
                with contextlib.suppress(asyncio.CancelledError):
                    await session.task
        self._moves.close()
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks = []

    async def _event_loop(self) -> None:
        while True:
            event = await self._events.get()
            try:
                if event.name == POINTER_MOVE:
                    self._moves.offer(True)
                else:
                    self._apply(event)
            finally:
                self._events.task_done()

    def _apply(self, event: Event) -> None:
        try:
            player = process_event(self._player, event)
        except Exception:
            log.exception("event_handler_failed", event_name=event.name)
            return
        if player is self._player:
            return
        self._player = player
        if self._target is not None:
            try:
                self._target(player)
            except Exception:
                log.exception("render_target_failed", event_name=event.name)

    async def _activity_loop(self) -> None:
        async for active in activity(self._moves, self.settings.activity_quiet_s):
            self.post(Event(UPDATE_STATE, (set_show_hud, active)))


def create_player(
    target: Target | None,
    recording_url: str,
    options: Mapping[str, Any] | PlayerOptions | None = None,
    *,
    settings: Settings | None = None,
) -> PlayerController:
    """Create a player for ``recording_url`` and start its event loop.

    Must be called with a running event loop. ``target`` receives every new
    player state.
    """
    controller = PlayerController(make_player(recording_url, options), target=target, settings=settings)
    controller.start()
    if target is not None:
        target(controller.state)
    return controller
