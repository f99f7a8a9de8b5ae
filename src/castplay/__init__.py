# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Asciicast playback engine."""

from __future__ import annotations

from castplay.dispatcher import PlayerController, create_player
from castplay.player import Player, PlayerOptions, make_player

__all__ = ["Player", "PlayerController", "PlayerOptions", "create_player", "make_player"]
