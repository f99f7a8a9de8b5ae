# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio

import click

from castplay.errors import PlayerError
from castplay.fetch import fetch_recording
from castplay.logging import configure_logging
from castplay.recording import load_timeline, parse_recording
from castplay.settings import Settings


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", default=None, help="Override CASTPLAY_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """castplay command line interface."""
    settings = Settings() if log_level is None else Settings(log_level=log_level)
    configure_logging(settings)
    ctx.obj = settings


@cli.command("play")
@click.argument("source")
@click.option("--speed", type=float, default=1.0, show_default=True)
@click.option("--start-at", type=float, default=0.0, show_default=True, help="Start position in seconds.")
@click.option("--loop/--no-loop", default=False, show_default=True)
@click.option("--width", type=int, default=None)
@click.option("--height", type=int, default=None)
@click.option("--title", default=None)
@click.pass_obj
def play(
    settings: Settings,
    source: str,
    speed: float,
    start_at: float,
    loop: bool,
    width: int | None,
    height: int | None,
    title: str | None,
) -> None:
    """Play a recording (URL or file) in this terminal.

    Keys: space play/pause, h/l rewind/fast-forward, +/- speed, 0-9 seek, q quit.
    """
    from castplay.tui import PlayerTui

    if speed <= 0:
        raise click.BadParameter("must be positive", param_hint="--speed")
    options = {
        "speed": speed,
        "start_at": start_at,
        "loop": loop,
        "width": width,
        "height": height,
        "title": title,
    }
    player = asyncio.run(PlayerTui(source, options, settings=settings).run())
    if player is not None and player.error:
        raise click.ClickException(player.error)


@cli.command("info")
@click.argument("source")
@click.pass_obj
def info(settings: Settings, source: str) -> None:
    """Print version, size, duration and frame count of a recording."""
    try:
        payload = asyncio.run(fetch_recording(source, timeout_s=settings.fetch_timeout_s))
        timeline = load_timeline(parse_recording(payload))
    except PlayerError as e:
        raise click.ClickException(str(e)) from e
    frames = sum(1 for _ in timeline.frames)
    click.echo(f"version:  {timeline.version}")
    click.echo(f"size:     {timeline.width}x{timeline.height}")
    click.echo(f"duration: {timeline.duration:.2f}s")
    click.echo(f"frames:   {frames}")


def main() -> None:
    cli.main()


if __name__ == "__main__":
    main()
