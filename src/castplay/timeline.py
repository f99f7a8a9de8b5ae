# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Frames and pure operations over a recorded timeline.

A frame is a ``(delay, screen_state)`` pair where ``delay`` is the time (in
seconds) that passes *before* the screen state becomes current, relative to
the previous frame. All helpers here accept any iterable of frames and are
lazy where they return sequences, so an arbitrarily long recording is only
materialized as far as playback actually gets.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, NamedTuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Cursor:
    x: int = 0
    y: int = 0
    visible: bool = True
    # Blink phase; only meaningful on the player's cursor
    on: bool = True


@dataclass(frozen=True)
class ScreenState:
    """Immutable screen snapshot: ordered line content plus cursor."""

    lines: tuple[Any, ...] = ()
    cursor: Cursor = field(default_factory=Cursor)


class Frame(NamedTuple, Generic[T]):
    delay: float
    data: T


class LazyFrames(Generic[T]):
    """Re-iterable, memoizing view over a one-shot frame iterator.

    Frames are pulled from the source only when some consumer reaches them and
    are cached, so every iteration observes the same values.
    """

    def __init__(self, source: Iterable[Frame[T]]) -> None:
        self._source: Iterator[Frame[T]] | None = iter(source)
        self._cache: list[Frame[T]] = []

    def __iter__(self) -> Iterator[Frame[T]]:
        index = 0
        while True:
            if index < len(self._cache):
                yield self._cache[index]
                index += 1
                continue
            if not self._pull():
                return

    def _pull(self) -> bool:
        if self._source is None:
            return False
        try:
            frame = next(self._source)
        except StopIteration:
            self._source = None
            return False
        self._cache.append(Frame(*frame))
        return True

    @property
    def materialized(self) -> int:
        """Number of frames pulled from the source so far."""
        return len(self._cache)


def total_duration(frames: Iterable[Frame[Any]]) -> float:
    return sum(delay for delay, _ in frames)


def slice_from(frames: Iterable[Frame[T]], seconds: float) -> Iterator[Frame[T]]:
    """Return frames remaining after ``seconds`` of virtual time.

    The first yielded frame is synthetic: it carries the next natural frame's
    state with only the remainder of its delay. A cut exactly on a frame
    boundary skips that frame, and cutting past the end yields nothing.
    """
    it = iter(frames)
    for delay, data in it:
        if delay <= seconds:
            seconds -= delay
            continue
        yield Frame(delay - seconds, data)
        yield from it
        return


def rescale(frames: Iterable[Frame[T]], speed: float) -> Iterator[Frame[T]]:
    """Divide every delay by ``speed``, leaving frame data untouched."""
    if speed <= 0:
        raise ValueError(f"speed must be positive, got {speed!r}")
    return (Frame(delay / speed, data) for delay, data in frames)


def state_at(frames: Iterable[Frame[T]], seconds: float) -> T | None:
    """Return the state active at ``seconds``, or None before the first frame."""
    candidate: T | None = None
    for delay, data in frames:
        if seconds < delay:
            break
        seconds -= delay
        candidate = data
    return candidate
