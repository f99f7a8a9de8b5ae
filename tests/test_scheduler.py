# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import time
from typing import Any

import pytest

from castplay.channel import Channel
from castplay.scheduler import blink_cycle, repeat_every, schedule


async def _drain(channel: Channel[Any]) -> list[Any]:
    values = []
    while (value := await channel.get()) is not None:
        values.append(value)
    return values


@pytest.mark.asyncio
async def test_emits_on_schedule_in_order() -> None:
    start = time.monotonic()
    channel = schedule([(0.1, "a"), (0.1, "b"), (0.1, "c")])
    seen = []
    while (value := await channel.get()) is not None:
        seen.append((value, time.monotonic() - start))

    assert [value for value, _ in seen] == ["a", "b", "c"]
    for (_, at), expected in zip(seen, (0.1, 0.2, 0.3)):
        assert at == pytest.approx(expected, abs=0.08)


@pytest.mark.asyncio
async def test_stalled_consumer_gets_only_latest_overdue_value() -> None:
    channel = schedule([(0.1, 1), (0.1, 2), (0.1, 3)])
    await asyncio.sleep(1.0)
    assert await _drain(channel) == [1, 3]


@pytest.mark.asyncio
async def test_reducer_combines_overdue_values() -> None:
    channel = schedule([(0.1, 1), (0.1, 2), (0.1, 3)], reducer=lambda acc, v: [*acc, v], init=[])
    await asyncio.sleep(1.0)
    assert await _drain(channel) == [1, [2, 3]]


@pytest.mark.asyncio
async def test_pending_value_flushed_before_next_on_time_value() -> None:
    channel = schedule([(0.05, "a"), (0.05, "b"), (0.05, "c"), (1.0, "d")])
    assert await channel.get() == "a"
    await asyncio.sleep(0.3)
    # "b" was taken late, "c" became overdue and is flushed ahead of "d"
    assert await _drain(channel) == ["b", "c", "d"]


@pytest.mark.asyncio
async def test_empty_input_closes_immediately() -> None:
    channel = schedule([])
    assert await asyncio.wait_for(channel.get(), 1.0) is None


@pytest.mark.asyncio
async def test_repeat_every_is_infinite_until_closed() -> None:
    channel = repeat_every(0.01)
    assert [await channel.get() for _ in range(5)] == [True] * 5
    channel.close()
    await asyncio.sleep(0.02)
    assert channel._producer is not None and channel._producer.done()
    assert await channel.get() is None


@pytest.mark.asyncio
async def test_blink_cycle_alternates() -> None:
    channel = blink_cycle(0.01)
    assert [await channel.get() for _ in range(4)] == [False, True, False, True]
    channel.close()


@pytest.mark.asyncio
async def test_fake_clock_drives_schedule() -> None:
    now = [100.0]
    channel = schedule([(5.0, "late"), (1.0, "later")], clock=lambda: now[0])
    now[0] = 110.0
    # Both elements are already overdue, so only the latest is emitted
    assert await asyncio.wait_for(_drain(channel), 1.0) == ["later"]
