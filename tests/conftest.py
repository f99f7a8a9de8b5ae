# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest
import structlog

from castplay.player import Player
from castplay.timeline import Frame, LazyFrames, ScreenState

from .helpers import EventRecorder, screen


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo configure_logging() calls made by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def hundred_second_frames() -> list[Frame[ScreenState]]:
    """Screens at t=10, t=50 and t=100."""
    return [Frame(10.0, screen("one")), Frame(40.0, screen("two")), Frame(50.0, screen("three"))]


@pytest.fixture
def loaded_player(recorder: EventRecorder, hundred_second_frames: list[Frame[ScreenState]]) -> Player:
    return Player(
        recording_url="https://example.test/demo.json",
        duration=100.0,
        frames=LazyFrames(hundred_second_frames),
        dispatch=recorder,
    )


@pytest.fixture
def v0_document() -> list[Any]:
    return [
        [0, {"lines": {"0": [["hello", {}]], "1": [["", {}]]}, "cursor": {"x": 5, "y": 0}}],
        [1.5, {"lines": {"1": [["world", {"fg": 1}]]}, "cursor": {"x": 5, "y": 1}}],
        [0.5, {"cursor": {"visible": False}}],
    ]


@pytest.fixture
def v1_document() -> dict[str, Any]:
    return {
        "version": 1,
        "width": 10,
        "height": 3,
        "stdout": [[0.5, "hi"], [1.0, "\r\nthere"]],
    }
