# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from castplay.constants import DEFAULT_ACTIVITY_QUIET_S, DEFAULT_FETCH_TIMEOUT_S


class Settings(BaseSettings):
    log_level: str = "WARNING"
    fetch_timeout_s: float = Field(default=DEFAULT_FETCH_TIMEOUT_S, gt=0)
    activity_quiet_s: float = Field(default=DEFAULT_ACTIVITY_QUIET_S, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="CASTPLAY_",
        extra="ignore",
    )
