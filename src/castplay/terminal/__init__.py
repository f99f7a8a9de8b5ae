# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Terminal emulation layer."""

from __future__ import annotations

from castplay.terminal.emulator import TerminalEmulator
from castplay.terminal.screen import compact_lines

__all__ = [
    "TerminalEmulator",
    "compact_lines",
]
