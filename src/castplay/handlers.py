# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Event handlers.

Each handler takes the current player (plus the event's arguments) and
returns the next player. Handlers may start or stop playback sessions and
post follow-up events, but never touch shared state directly.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from functools import partial
from typing import Any

from castplay import events
from castplay.constants import SEEK_STEP_S, SPEED_FACTOR
from castplay.errors import RecordingError
from castplay.events import Event
from castplay.fetch import start_fetch
from castplay.logging import get_logger
from castplay.player import Player, reset_blink, update_screen
from castplay.playback import start_playback, stop_playback
from castplay.recording import load_timeline, parse_recording
from castplay.timeline import state_at

log = get_logger(__name__)

Handler = Callable[..., Player]


def handle_toggle_play(player: Player) -> Player:
    """Toggle playback, fetching the recording first if needed."""
    if not player.loaded:
        if player.loading:
            return player
        return start_fetch(player)
    if player.playing:
        return stop_playback(player)
    return start_playback(player)


def new_position(current_time: float, total_time: float, offset: float) -> float:
    """Return ``current_time + offset`` clipped to the recording, as a 0..1 position."""
    if total_time <= 0:
        return 0.0
    return min(max(current_time + offset, 0.0), total_time) / total_time


def handle_seek(player: Player, position: float) -> Player:
    """Jump to ``position`` (0..1) of the recording.

    Non-finite positions are ignored.
    """
    position = float(position)
    if not math.isfinite(position):
        log.warning("seek_ignored", position=position)
        return player
    position = min(max(position, 0.0), 1.0)
    new_time = position * player.duration
    playing = player.playing
    if playing:
        player.playback.stop()
        player = player.replace(playback=None)
    screen_state = state_at(player.frames, new_time) if player.frames is not None else None
    player = update_screen(player.replace(current_time=new_time, start_at=new_time), screen_state)
    if playing:
        return start_playback(player)
    return player


def handle_rewind(player: Player) -> Player:
    return handle_seek(player, new_position(player.current_time, player.duration, -SEEK_STEP_S))


def handle_fast_forward(player: Player) -> Player:
    return handle_seek(player, new_position(player.current_time, player.duration, SEEK_STEP_S))


def handle_finished(player: Player) -> Player:
    """Rewind to the beginning; start over right away when looping."""
    if player.loop:
        player.post(events.TOGGLE_PLAY)
    return reset_blink(player.replace(playback=None, start_at=0.0, current_time=player.duration))


def speed_up(speed: float) -> float:
    return speed * SPEED_FACTOR


def speed_down(speed: float) -> float:
    return speed / SPEED_FACTOR


def handle_speed_change(change: Callable[[float], float], player: Player) -> Player:
    """Apply ``change`` to the speed, rebasing a running session on the new speed."""
    if player.playing:
        player = stop_playback(player)
        return start_playback(player.replace(speed=change(player.speed)))
    return player.replace(speed=change(player.speed))


def handle_asciicast_response(player: Player, payload: str | bytes) -> Player:
    """Load frames from a fetched recording and start playing."""
    try:
        timeline = load_timeline(parse_recording(payload))
    except RecordingError as e:
        log.error("recording_rejected", url=player.recording_url, error=str(e))
        return player.replace(loading=False, error=str(e))
    player.post(events.TOGGLE_PLAY)
    return player.replace(
        loading=False,
        error=None,
        version=timeline.version,
        width=player.width or timeline.width,
        height=player.height or timeline.height,
        duration=timeline.duration,
        frames=timeline.frames,
    )


def handle_bad_response(player: Player, error: Any = None) -> Player:
    log.error("recording_fetch_failed", url=player.recording_url, error=str(error))
    return player.replace(loading=False, error=str(error) if error is not None else "fetch failed")


def handle_update_state(player: Player, fn: Callable[..., Player], *args: Any) -> Player:
    """Apply an arbitrary pure transformation to the player."""
    return fn(player, *args)


EVENT_HANDLERS: dict[str, Handler] = {
    events.TOGGLE_PLAY: handle_toggle_play,
    events.SEEK: handle_seek,
    events.REWIND: handle_rewind,
    events.FAST_FORWARD: handle_fast_forward,
    events.FINISHED: handle_finished,
    events.SPEED_UP: partial(handle_speed_change, speed_up),
    events.SPEED_DOWN: partial(handle_speed_change, speed_down),
    events.ASCIICAST_RESPONSE: handle_asciicast_response,
    events.BAD_RESPONSE: handle_bad_response,
    events.UPDATE_STATE: handle_update_state,
}


def is_stale(player: Player, event: Event) -> bool:
    """True for session events whose session is no longer running."""
    if event.session is None:
        return False
    return player.playback is None or player.playback.session_id != event.session


def process_event(player: Player, event: Event) -> Player:
    """Find the handler for ``event`` and apply it to the player."""
    handler = EVENT_HANDLERS.get(event.name)
    if handler is None:
        log.warning("unhandled_event", event_name=event.name)
        return player
    if is_stale(player, event):
        log.debug("stale_event_dropped", event_name=event.name, session=event.session)
        return player
    return handler(player, *event.args)
