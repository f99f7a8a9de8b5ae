# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for player operations."""


class PlayerError(Exception):
    """Base exception for player operations."""

    pass


class RecordingError(PlayerError):
    """Recording document is malformed."""

    pass


class UnsupportedVersionError(RecordingError):
    """Recording declares a format version we cannot play."""

    def __init__(self, version: object) -> None:
        super().__init__(f"unsupported asciicast version: {version!r}")
        self.version = version


class RecordingLoadError(PlayerError):
    """Recording could not be fetched."""

    pass
