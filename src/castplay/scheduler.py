# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Virtual-time scheduler.

Turns a sequence of ``(delay, data)`` pairs into a channel that emits each
``data`` at the wall-clock offset implied by the cumulative delays, measured
from a single start reference.

When the reader falls behind (a stalled consumer, a throttled process) the
scheduler does not replay the backlog: elements that are already overdue are
folded with ``reducer`` and only the combined value is emitted, right
before the next on-schedule element or at the end of the input.
"""

from __future__ import annotations

import asyncio
import itertools
import time
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from castplay.channel import Channel

T = TypeVar("T")
A = TypeVar("A")

Clock = Callable[[], float]


def _latest(_: Any, value: T) -> T:
    return value


def schedule(
    pairs: Iterable[tuple[float, T]],
    reducer: Callable[[A, T], A] | None = None,
    init: A | None = None,
    *,
    clock: Clock = time.monotonic,
    name: str = "schedule",
) -> Channel[Any]:
    """Start emitting ``pairs`` in real time.

    Args:
        pairs: Ordered ``(delay, data)`` pairs; may be infinite
        reducer: Combines overdue elements, ``reducer(acc, data) -> acc``
        init: Accumulator identity handed to the first ``reducer`` call
        clock: Monotonic time source in seconds
        name: Channel / task name, for debugging

    Returns:
        Channel that closes after the input is exhausted
    """
    channel: Channel[Any] = Channel(name)
    start = clock()
    task = asyncio.create_task(
        _emit(channel, pairs, reducer or _latest, init, clock, start),
        name=name,
    )
    channel.attach(task)
    return channel


async def _emit(
    channel: Channel[Any],
    pairs: Iterable[tuple[float, Any]],
    reducer: Callable[[Any, Any], Any],
    init: Any,
    clock: Clock,
    start: float,
) -> None:
    virtual_time = 0.0
    wall_time = clock() - start
    acc = None
    try:
        for delay, data in pairs:
            new_virtual_time = virtual_time + delay
            ahead = new_virtual_time - wall_time
            if ahead > 0:
                if acc is not None and not await channel.put(acc):
                    return
                await asyncio.sleep(ahead)
                if not await channel.put(data):
                    return
                wall_time = clock() - start
                acc = None
            else:
                acc = reducer(init if acc is None else acc, data)
            virtual_time = new_virtual_time
        if acc is not None:
            await channel.put(acc)
    finally:
        channel.close()


def repeat_every(interval: float, value: Any = True, **kwargs: Any) -> Channel[Any]:
    """Emit ``value`` every ``interval`` seconds, forever."""
    return schedule(itertools.repeat((interval, value)), name="tick", **kwargs)


def blink_cycle(interval: float, **kwargs: Any) -> Channel[bool]:
    """Emit False, True, False, ... every ``interval`` seconds, forever."""
    return schedule(itertools.cycle([(interval, False), (interval, True)]), name="blink", **kwargs)
