# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Rendezvous channels and a multiplexed wait over them.

A ``Channel`` hands values from one producer task to one consumer. ``put``
resolves only once the consumer has taken the value, so a producer always
knows how far behind its reader is. Closing is level-triggered: a closed
channel yields ``None`` to every subsequent read.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Channel(Generic[T]):
    """Unbuffered channel between asyncio tasks."""

    def __init__(self, name: str = "channel") -> None:
        self.name = name
        self._pending: deque[tuple[T, asyncio.Future[bool] | None]] = deque()
        self._waiters: set[asyncio.Event] = set()
        self._closed = False
        self._producer: asyncio.Task[Any] | None = None

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"pending={len(self._pending)}"
        return f"<Channel {self.name} {state}>"

    @property
    def closed(self) -> bool:
        return self._closed

    def attach(self, task: asyncio.Task[Any]) -> None:
        """Bind the producer task that is cancelled when the channel closes."""
        self._producer = task

    async def put(self, value: T) -> bool:
        """Offer a value and wait until it is taken.

        Returns:
            True once a consumer took the value, False if the channel closed first
        """
        if value is None:
            raise ValueError("None is reserved for closed channels")
        if self._closed:
            return False
        fut: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        entry = (value, fut)
        self._pending.append(entry)
        self._notify()
        try:
            return await fut
        except asyncio.CancelledError:
            if entry in self._pending:
                self._pending.remove(entry)
            raise

    def offer(self, value: T) -> bool:
        """Non-blocking put into a single-slot dropping buffer.

        The value is dropped when a previous one is still unread.
        """
        if self._closed or self._pending:
            return False
        self._pending.append((value, None))
        self._notify()
        return True

    def poll(self) -> tuple[bool, T | None]:
        """Take a value without waiting.

        Returns:
            ``(ready, value)``; a closed, drained channel is ready with None
        """
        if self._pending:
            value, fut = self._pending.popleft()
            if fut is not None and not fut.done():
                fut.set_result(True)
            return True, value
        if self._closed:
            return True, None
        return False, None

    async def get(self) -> T | None:
        value, _ = await alts([self])
        return value

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        while self._pending:
            _, fut = self._pending.popleft()
            if fut is not None and not fut.done():
                fut.set_result(False)
        self._notify()
        producer = self._producer
        if producer is not None and not producer.done() and producer is not asyncio.current_task():
            producer.cancel()

    def _notify(self) -> None:
        for waiter in self._waiters:
            waiter.set()

    def _watch(self, waiter: asyncio.Event) -> None:
        self._waiters.add(waiter)

    def _unwatch(self, waiter: asyncio.Event) -> None:
        self._waiters.discard(waiter)


async def alts(channels: Sequence[Channel[Any]]) -> tuple[Any, Channel[Any]]:
    """Wait for the first channel that can deliver a value.

    Channels are polled in the given order, so earlier channels win when
    several are ready at once.

    Returns:
        ``(value, channel)``; value is None when that channel is closed
    """
    while True:
        for channel in channels:
            ready, value = channel.poll()
            if ready:
                return value, channel
        waiter = asyncio.Event()
        for channel in channels:
            channel._watch(waiter)
        try:
            await waiter.wait()
        finally:
            for channel in channels:
                channel._unwatch(waiter)
