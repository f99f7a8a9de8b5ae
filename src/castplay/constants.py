# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared constants for castplay."""

from __future__ import annotations

# Playback clock granularity (virtual seconds between time reports)
TICK_INTERVAL_S = 0.3

# Cursor blink half period
BLINK_INTERVAL_S = 0.5

# Rewind / fast-forward step
SEEK_STEP_S = 5.0

# Multiplier applied by speed-up / speed-down
SPEED_FACTOR = 2

# Quiet period after which user activity is considered over
DEFAULT_ACTIVITY_QUIET_S = 3.0

DEFAULT_FETCH_TIMEOUT_S = 10.0
