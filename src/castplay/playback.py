# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Playback coordination.

A playback session multiplexes four sources into player events:

- the scheduled screen frames,
- a fixed-period clock tick reporting the current position,
- a cursor blink cycle, restarted whenever a new frame is shown,
- a stop signal closed by ``PlaybackSession.stop``.

Every event a session posts is tagged with its id so the dispatch loop can
discard leftovers once the session has been stopped or replaced.
"""

from __future__ import annotations

import asyncio
import itertools
import time
from dataclasses import dataclass, field
from typing import Any

from castplay.channel import Channel, alts
from castplay.constants import BLINK_INTERVAL_S, TICK_INTERVAL_S
from castplay.events import FINISHED, UPDATE_STATE
from castplay.logging import get_logger
from castplay.player import Player, reset_blink, set_current_time, set_cursor_on, show_frame, update_screen
from castplay.scheduler import Clock, blink_cycle, repeat_every, schedule
from castplay.timeline import rescale, slice_from, state_at

log = get_logger(__name__)

_session_ids = itertools.count(1)


@dataclass(eq=False)
class PlaybackSession:
    """One run of the coordinator; doubles as the player's stop handle."""

    session_id: int
    speed: float
    start_at: float
    clock: Clock = time.monotonic
    started: float = field(init=False)
    stop_signal: Channel[Any] = field(init=False)
    task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.started = self.clock()
        self.stop_signal = Channel(f"stop-{self.session_id}")

    def elapsed(self) -> float:
        """Virtual time consumed by this session so far."""
        return (self.clock() - self.started) * self.speed

    def stop(self) -> float:
        """Signal the session loop to exit and return the virtual time consumed."""
        self.stop_signal.close()
        return self.elapsed()

    @property
    def stopped(self) -> bool:
        return self.stop_signal.closed


def start_playback(player: Player, *, clock: Clock = time.monotonic) -> Player:
    """Start a playback session from ``player.start_at`` at ``player.speed``.

    Returns the player with the screen at ``start_at`` applied and the new
    session attached as its stop handle.
    """
    if player.frames is None:
        raise RuntimeError("cannot start playback before frames are loaded")
    screen_state = state_at(player.frames, player.start_at)
    session = PlaybackSession(next(_session_ids), player.speed, player.start_at, clock)
    frames = rescale(slice_from(player.frames, session.start_at), session.speed)
    screen = schedule(frames, clock=clock, name=f"frames-{session.session_id}")
    session.task = asyncio.create_task(
        _run_session(session, player, screen),
        name=f"playback-{session.session_id}",
    )
    log.debug("playback_started", session=session.session_id, start_at=session.start_at, speed=session.speed)
    return update_screen(player, screen_state).replace(playback=session)


def stop_playback(player: Player) -> Player:
    """Stop the running session and fold its elapsed time into ``start_at``."""
    session = player.playback
    if session is None:
        return player
    elapsed = session.stop()
    log.debug("playback_stopped", session=session.session_id, elapsed=elapsed)
    return reset_blink(player.replace(playback=None, start_at=player.start_at + elapsed))


async def _run_session(session: PlaybackSession, player: Player, screen: Channel[Any]) -> None:
    sid = session.session_id

    def post(name: str, *args: Any) -> None:
        player.post(name, *args, session=sid)

    ticks = repeat_every(TICK_INTERVAL_S, clock=session.clock)
    blink = blink_cycle(BLINK_INTERVAL_S, clock=session.clock)
    try:
        while True:
            value, source = await alts([session.stop_signal, screen, ticks, blink])
            if source is session.stop_signal:
                break
            if source is ticks:
                post(UPDATE_STATE, set_current_time, session.start_at + session.elapsed())
            elif source is blink:
                post(UPDATE_STATE, set_cursor_on, value)
            elif value is None:
                log.debug("playback_finished", session=sid)
                post(FINISHED)
                break
            else:
                post(UPDATE_STATE, show_frame, value)
                blink.close()
                blink = blink_cycle(BLINK_INTERVAL_S, clock=session.clock)
    finally:
        for channel in (screen, ticks, blink):
            channel.close()
    # Not tagged: the cursor must end up visible whichever session is current.
    player.post(UPDATE_STATE, reset_blink)
