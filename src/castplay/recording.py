# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Recording parsing and frame timeline construction.

Two recording formats are supported:

- version 0: a JSON array whose first element is ``[0, {lines, cursor}]``
  (the initial full frame) followed by ``[delay, sparse_diff]`` pairs.
- version 1: ``{"version": 1, "width", "height", "stdout": [[delay, text], ...]}``
  where every chunk is fed through a terminal emulator.

Both are turned into a lazily built sequence of absolute screen-state frames.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from numbers import Real
from typing import Any

from castplay.errors import RecordingError, UnsupportedVersionError
from castplay.logging import get_logger
from castplay.terminal import TerminalEmulator
from castplay.timeline import Cursor, Frame, LazyFrames, ScreenState

log = get_logger(__name__)


@dataclass(frozen=True)
class Timeline:
    """A loaded recording ready for playback."""

    version: int
    width: int | None
    height: int | None
    duration: float
    frames: LazyFrames[ScreenState]


def parse_recording(payload: str | bytes) -> Any:
    try:
        return json.loads(payload)
    except (TypeError, ValueError) as e:
        raise RecordingError(f"recording is not valid JSON: {e}") from e


def recording_version(document: Any) -> Any:
    """Arrays are version 0; objects declare their version explicitly."""
    if isinstance(document, list):
        return 0
    if isinstance(document, dict):
        return document.get("version")
    return None


def _checked_records(records: Any, what: str) -> list[tuple[float, Any]]:
    if not isinstance(records, list):
        raise RecordingError(f"{what} must be a list of [delay, data] records")
    checked = []
    for index, record in enumerate(records):
        if not isinstance(record, (list, tuple)) or len(record) != 2:
            raise RecordingError(f"{what}[{index}] is not a [delay, data] pair")
        delay, data = record
        if isinstance(delay, bool) or not isinstance(delay, Real) or delay < 0:
            raise RecordingError(f"{what}[{index}] has invalid delay {delay!r}")
        checked.append((float(delay), data))
    return checked


def _line_index(key: Any) -> int:
    try:
        return int(key)
    except (TypeError, ValueError) as e:
        raise RecordingError(f"line key {key!r} is not an integer") from e


def build_v0_frames(diffs: list[tuple[float, Any]]) -> Iterator[Frame[ScreenState]]:
    """Fold sparse line diffs into absolute screen states."""
    lines: dict[int, Any] = {}
    cursor: dict[str, Any] = {"x": 0, "y": 0, "visible": True}
    for delay, diff in diffs:
        diff = diff or {}
        for key, line in (diff.get("lines") or {}).items():
            lines[_line_index(key)] = line
        cursor.update(diff.get("cursor") or {})
        state = ScreenState(
            lines=tuple(lines[i] for i in sorted(lines)),
            cursor=Cursor(
                x=cursor.get("x", 0),
                y=cursor.get("y", 0),
                visible=bool(cursor.get("visible", True)),
            ),
        )
        yield Frame(delay, state)


def build_v1_frames(
    chunks: list[tuple[float, Any]], width: int, height: int
) -> Iterator[Frame[ScreenState]]:
    """Feed output chunks through a terminal emulator, one frame per chunk."""
    vt = TerminalEmulator(width, height)
    for delay, chunk in chunks:
        vt.feed(chunk)
        yield Frame(delay, vt.snapshot())


def _is_fragment(fragment: Any) -> bool:
    return (
        isinstance(fragment, list)
        and len(fragment) == 2
        and isinstance(fragment[0], str)
        and isinstance(fragment[1], dict)
    )


def _check_v0_diff(index: int, diff: Any) -> None:
    if diff is None:
        return
    if not isinstance(diff, dict):
        raise RecordingError(f"frames[{index}] diff must be an object")
    lines = diff.get("lines")
    if lines is not None:
        if not isinstance(lines, dict):
            raise RecordingError(f"frames[{index}] lines must be an object")
        for key, line in lines.items():
            _line_index(key)
            if not isinstance(line, list) or not all(_is_fragment(fragment) for fragment in line):
                raise RecordingError(f"frames[{index}] line {key!r} must be a list of fragments")
    cursor = diff.get("cursor")
    if cursor is not None and not isinstance(cursor, dict):
        raise RecordingError(f"frames[{index}] cursor must be an object")


def _load_v0(document: list[Any]) -> Timeline:
    diffs = _checked_records(document, "frames")
    for index, (_, diff) in enumerate(diffs):
        _check_v0_diff(index, diff)
    width = height = None
    if diffs:
        first_lines = (diffs[0][1] or {}).get("lines") or {}
        height = len(first_lines)
        if first_lines:
            first = first_lines[min(first_lines, key=_line_index)]
            width = sum(len(fragment[0]) for fragment in first)
    return Timeline(
        version=0,
        width=width,
        height=height,
        duration=sum(delay for delay, _ in diffs),
        frames=LazyFrames(build_v0_frames(diffs)),
    )


def _load_v1(document: dict[str, Any]) -> Timeline:
    width = document.get("width")
    height = document.get("height")
    if not isinstance(width, int) or not isinstance(height, int) or width <= 0 or height <= 0:
        raise RecordingError(f"invalid terminal size {width!r}x{height!r}")
    chunks = _checked_records(document.get("stdout"), "stdout")
    for index, (_, chunk) in enumerate(chunks):
        if not isinstance(chunk, str):
            raise RecordingError(f"stdout[{index}] output must be a string")
    return Timeline(
        version=1,
        width=width,
        height=height,
        duration=sum(delay for delay, _ in chunks),
        frames=LazyFrames(build_v1_frames(chunks, width, height)),
    )


_LOADERS: dict[int, Callable[[Any], Timeline]] = {
    0: _load_v0,
    1: _load_v1,
}


def load_timeline(document: Any) -> Timeline:
    """Build a Timeline from a decoded recording document.

    Raises:
        UnsupportedVersionError: version is not one of the known formats
        RecordingError: document shape is invalid
    """
    version = recording_version(document)
    loader = _LOADERS.get(version) if isinstance(version, int) and not isinstance(version, bool) else None
    if loader is None:
        raise UnsupportedVersionError(version)
    timeline = loader(document)
    log.debug("recording_loaded", version=version, duration=timeline.duration)
    return timeline
