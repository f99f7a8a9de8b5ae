# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio

import pytest

from castplay.channel import Channel, alts


@pytest.mark.asyncio
async def test_put_waits_for_consumer() -> None:
    channel: Channel[str] = Channel()
    put = asyncio.create_task(channel.put("x"))
    await asyncio.sleep(0.01)
    assert not put.done()
    assert await channel.get() == "x"
    assert await put is True


@pytest.mark.asyncio
async def test_close_is_level_triggered() -> None:
    channel: Channel[str] = Channel()
    channel.close()
    assert await channel.get() is None
    assert await channel.get() is None
    assert await channel.put("late") is False


@pytest.mark.asyncio
async def test_close_releases_pending_putter() -> None:
    channel: Channel[str] = Channel()
    put = asyncio.create_task(channel.put("x"))
    await asyncio.sleep(0)
    channel.close()
    assert await put is False
    assert await channel.get() is None


@pytest.mark.asyncio
async def test_close_wakes_waiting_reader() -> None:
    channel: Channel[str] = Channel()
    reader = asyncio.create_task(channel.get())
    await asyncio.sleep(0.01)
    channel.close()
    assert await asyncio.wait_for(reader, 1.0) is None


def test_offer_drops_while_slot_is_full() -> None:
    channel: Channel[int] = Channel()
    assert channel.offer(1) is True
    assert channel.offer(2) is False
    assert channel.poll() == (True, 1)
    assert channel.poll() == (False, None)
    assert channel.offer(3) is True


@pytest.mark.asyncio
async def test_alts_prefers_earlier_channels() -> None:
    first: Channel[str] = Channel("first")
    second: Channel[str] = Channel("second")
    second.offer("b")
    first.offer("a")
    value, source = await alts([first, second])
    assert (value, source) == ("a", first)
    value, source = await alts([first, second])
    assert (value, source) == ("b", second)


@pytest.mark.asyncio
async def test_alts_waits_for_any() -> None:
    first: Channel[str] = Channel("first")
    second: Channel[str] = Channel("second")
    waiter = asyncio.create_task(alts([first, second]))
    await asyncio.sleep(0.01)
    assert not waiter.done()
    putter = asyncio.create_task(second.put("b"))
    value, source = await asyncio.wait_for(waiter, 1.0)
    assert (value, source) == ("b", second)
    assert await putter is True


@pytest.mark.asyncio
async def test_cancelled_get_loses_nothing() -> None:
    channel: Channel[str] = Channel()
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(channel.get(), 0.01)
    channel.offer("kept")
    assert await channel.get() == "kept"


@pytest.mark.asyncio
async def test_put_rejects_none() -> None:
    with pytest.raises(ValueError):
        await Channel().put(None)
