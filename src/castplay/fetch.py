# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Recording retrieval over HTTP or from the local filesystem."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlsplit
from urllib.request import url2pathname

import httpx

from castplay.constants import DEFAULT_FETCH_TIMEOUT_S
from castplay.errors import RecordingLoadError
from castplay.events import ASCIICAST_RESPONSE, BAD_RESPONSE
from castplay.logging import get_logger

if TYPE_CHECKING:
    from castplay.player import Player

log = get_logger(__name__)

# Keeps in-flight fetch tasks referenced until they finish
_inflight: set[asyncio.Task[None]] = set()


async def fetch_recording(
    source: str | None,
    *,
    timeout_s: float = DEFAULT_FETCH_TIMEOUT_S,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Return the raw recording document at ``source``.

    Args:
        source: http(s) URL, file:// URL or filesystem path
        timeout_s: HTTP timeout in seconds
        transport: Optional httpx transport (used by tests)

    Raises:
        RecordingLoadError: On network, HTTP status or filesystem errors
    """
    if not source:
        raise RecordingLoadError("no recording url given")
    parts = urlsplit(source)
    if parts.scheme in ("http", "https"):
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_s),
                transport=transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(source)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            raise RecordingLoadError(f"failed to fetch {source}: {e}") from e

    path = Path(url2pathname(parts.path)) if parts.scheme == "file" else Path(source)
    try:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as e:
        raise RecordingLoadError(f"failed to read {path}: {e}") from e


def start_fetch(player: Player) -> Player:
    """Fetch the player's recording in the background.

    Posts ``asciicast-response`` with the document on success and
    ``bad-response`` with the error otherwise.
    """
    fetcher = player.fetcher or fetch_recording
    url = player.recording_url

    async def _fetch() -> None:
        try:
            payload = await fetcher(url)
        except Exception as e:
            log.warning("fetch_error", url=url, error=str(e))
            player.post(BAD_RESPONSE, e)
            return
        player.post(ASCIICAST_RESPONSE, payload)

    task = asyncio.create_task(_fetch(), name="fetch-recording")
    _inflight.add(task)
    task.add_done_callback(_inflight.discard)
    log.debug("fetch_started", url=url)
    return player.replace(loading=True, error=None)
