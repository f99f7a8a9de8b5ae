# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import json
from typing import Any

import pytest

from castplay.errors import RecordingError, UnsupportedVersionError
from castplay.recording import load_timeline, parse_recording, recording_version
from castplay.timeline import Cursor


def _text(line: Any) -> str:
    return "".join(fragment[0] for fragment in line)


def test_recording_version() -> None:
    assert recording_version([]) == 0
    assert recording_version({"version": 1}) == 1
    assert recording_version("nope") is None


def test_v0_frames_accumulate_diffs(v0_document: list[Any]) -> None:
    timeline = load_timeline(parse_recording(json.dumps(v0_document)))
    frames = list(timeline.frames)

    assert timeline.version == 0
    assert timeline.duration == pytest.approx(2.0)
    assert (timeline.width, timeline.height) == (5, 2)
    assert [f.delay for f in frames] == [0, 1.5, 0.5]

    first = frames[0].data
    assert first.lines == ([["hello", {}]], [["", {}]])
    assert first.cursor == Cursor(x=5, y=0, visible=True)

    second = frames[1].data
    assert second.lines == ([["hello", {}]], [["world", {"fg": 1}]])
    assert second.cursor == Cursor(x=5, y=1, visible=True)

    third = frames[2].data
    assert third.lines == second.lines
    assert third.cursor == Cursor(x=5, y=1, visible=False)


def test_v0_line_keys_sorted_numerically() -> None:
    document = [[0, {"lines": {"10": [["ten", {}]], "2": [["two", {}]]}}]]
    (frame,) = load_timeline(document).frames
    assert [_text(line) for line in frame.data.lines] == ["two", "ten"]


def test_v1_frames_feed_terminal(v1_document: dict[str, Any]) -> None:
    timeline = load_timeline(parse_recording(json.dumps(v1_document)))
    frames = list(timeline.frames)

    assert timeline.version == 1
    assert timeline.duration == pytest.approx(1.5)
    assert (timeline.width, timeline.height) == (10, 3)
    assert len(frames) == 2

    first = frames[0].data
    assert len(first.lines) == 3
    assert _text(first.lines[0]) == "hi        "
    assert (first.cursor.x, first.cursor.y) == (2, 0)

    second = frames[1].data
    assert _text(second.lines[0]) == "hi        "
    assert _text(second.lines[1]) == "there     "
    assert (second.cursor.x, second.cursor.y) == (5, 1)
    assert second.cursor.visible


def test_v1_attributes_split_fragments() -> None:
    document = {"version": 1, "width": 6, "height": 1, "stdout": [[0.1, "\x1b[1mab\x1b[0mcd"]]}
    (frame,) = load_timeline(document).frames
    fragments = frame.data.lines[0]
    assert fragments[0] == ("ab", {"bold": True})
    assert fragments[1] == ("cd  ", {})


def test_v1_hidden_cursor() -> None:
    document = {"version": 1, "width": 4, "height": 2, "stdout": [[0.1, "\x1b[?25l"]]}
    (frame,) = load_timeline(document).frames
    assert frame.data.cursor.visible is False


@pytest.mark.parametrize("document", [{"version": 2, "stdout": []}, {"width": 1}, "text", 3])
def test_unsupported_version(document: Any) -> None:
    with pytest.raises(UnsupportedVersionError):
        load_timeline(document)


def test_invalid_json() -> None:
    with pytest.raises(RecordingError):
        parse_recording("{not json")


@pytest.mark.parametrize(
    "document",
    [
        [[-1, {}]],
        [["soon", {}]],
        [[1]],
        [[1, "not a diff"]],
        [[0, {"lines": ["not", "an", "object"]}]],
        [[0, {"lines": {"0": "plain text"}}]],
        [[0, {"lines": {"0": [["text", "attrs"]]}}]],
        [[0, {"lines": {"row": [["x", {}]]}}]],
        [[0, {"cursor": [1, 2]}]],
        {"version": 1, "width": 4, "height": 3, "stdout": [[0.1, 5]]},
        {"version": 1, "width": 4, "height": 3, "stdout": [[0.1, "ok"], [0.1, ["a"]]]},
        {"version": 1, "width": 0, "height": 3, "stdout": []},
        {"version": 1, "width": 4, "height": 3},
    ],
)
def test_malformed_records(document: Any) -> None:
    with pytest.raises(RecordingError):
        load_timeline(document)


def test_frames_are_built_lazily(v1_document: dict[str, Any]) -> None:
    timeline = load_timeline(v1_document)
    assert timeline.frames.materialized == 0
    next(iter(timeline.frames))
    assert timeline.frames.materialized == 1
