# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Player state and the pure transformations applied to it."""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from castplay.events import Event
from castplay.timeline import Cursor, LazyFrames, ScreenState

if TYPE_CHECKING:
    from castplay.playback import PlaybackSession


class PlayerOptions(BaseModel):
    """Embedding options.

    Accepts canonical snake_case names as well as kebab-case and the
    camelCase spellings used by page embeds (``autoPlay``, ``authorURL``...).
    Unknown options are ignored.
    """

    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    speed: float = Field(default=1.0, gt=0)
    snapshot: list[Any] = Field(default_factory=list)
    font_size: str = Field(default="small", validation_alias=AliasChoices("font_size", "font-size", "fontSize"))
    theme: str = "asciinema"
    start_at: float = Field(default=0.0, ge=0, validation_alias=AliasChoices("start_at", "start-at", "startAt"))
    loop: bool = False
    auto_play: bool = Field(default=False, validation_alias=AliasChoices("auto_play", "auto-play", "autoPlay"))
    title: str | None = None
    author: str | None = None
    author_url: str | None = Field(
        default=None, validation_alias=AliasChoices("author_url", "author-url", "authorURL", "authorUrl")
    )
    author_img_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("author_img_url", "author-img-url", "authorImgURL", "authorImgUrl"),
    )

    model_config = ConfigDict(extra="ignore")


@dataclasses.dataclass(frozen=True)
class Player:
    """The single player aggregate.

    Only the dispatch loop replaces it; everything else receives snapshots.
    ``playback`` is the stop handle of the running session and is present
    exactly while playing.
    """

    recording_url: str | None = None
    width: int | None = None
    height: int | None = None
    duration: float = 0.0
    speed: float = 1.0
    lines: tuple[Any, ...] = ()
    cursor: Cursor = Cursor(visible=False)
    font_size: str = "small"
    theme: str = "asciinema"
    start_at: float = 0.0
    current_time: float = 0.0
    show_hud: bool = False
    loop: bool = False
    auto_play: bool = False
    title: str | None = None
    author: str | None = None
    author_url: str | None = None
    author_img_url: str | None = None

    frames: LazyFrames[ScreenState] | None = None
    version: int | None = None
    loading: bool = False
    error: str | None = None
    playback: PlaybackSession | None = None

    dispatch: Callable[[Event], None] | None = dataclasses.field(default=None, repr=False, compare=False)
    fetcher: Callable[[str], Awaitable[str]] | None = dataclasses.field(default=None, repr=False, compare=False)

    @property
    def playing(self) -> bool:
        return self.playback is not None

    @property
    def loaded(self) -> bool:
        return self.frames is not None

    def replace(self, **changes: Any) -> Player:
        return dataclasses.replace(self, **changes)

    def post(self, name: str, *args: Any, session: int | None = None) -> None:
        """Queue an event for the dispatch loop owning this player."""
        if self.dispatch is None:
            raise RuntimeError("player is not attached to a dispatch loop")
        self.dispatch(Event(name, args, session))


def make_player(recording_url: str | None, options: Mapping[str, Any] | PlayerOptions | None = None) -> Player:
    """Build the initial player for the given options."""
    if not isinstance(options, PlayerOptions):
        options = PlayerOptions.model_validate(dict(options or {}))
    return Player(
        recording_url=recording_url,
        width=options.width,
        height=options.height,
        speed=options.speed,
        lines=tuple(options.snapshot),
        font_size=options.font_size,
        theme=options.theme,
        start_at=options.start_at,
        current_time=options.start_at,
        loop=options.loop,
        auto_play=options.auto_play,
        title=options.title,
        author=options.author,
        author_url=options.author_url,
        author_img_url=options.author_img_url,
    )


def update_screen(player: Player, state: ScreenState | None) -> Player:
    """Apply a screen state's lines and cursor, keeping the blink phase."""
    if state is None:
        return player
    cursor = dataclasses.replace(
        player.cursor, x=state.cursor.x, y=state.cursor.y, visible=state.cursor.visible
    )
    return player.replace(lines=state.lines, cursor=cursor)


def reset_blink(player: Player) -> Player:
    """Make the cursor block visible."""
    return player.replace(cursor=dataclasses.replace(player.cursor, on=True))


def show_frame(player: Player, state: ScreenState) -> Player:
    return reset_blink(update_screen(player, state))


def set_cursor_on(player: Player, on: bool) -> Player:
    return player.replace(cursor=dataclasses.replace(player.cursor, on=on))


def set_current_time(player: Player, seconds: float) -> Player:
    return player.replace(current_time=min(max(seconds, 0.0), player.duration))


def set_show_hud(player: Player, active: bool) -> Player:
    return player.replace(show_hud=active)
