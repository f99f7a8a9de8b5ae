# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Event names accepted by the player's dispatch loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

TOGGLE_PLAY = "toggle-play"
SEEK = "seek"
REWIND = "rewind"
FAST_FORWARD = "fast-forward"
FINISHED = "finished"
SPEED_UP = "speed-up"
SPEED_DOWN = "speed-down"
ASCIICAST_RESPONSE = "asciicast-response"
BAD_RESPONSE = "bad-response"
UPDATE_STATE = "update-state"

# Routed to the activity detector instead of the handler table
POINTER_MOVE = "pointer-move"


@dataclass(frozen=True)
class Event:
    """A named event with positional arguments.

    Events posted by a playback session carry its id in ``session`` and are
    discarded once that session is no longer the player's current one.
    """

    name: str
    args: tuple[Any, ...] = ()
    session: int | None = None
