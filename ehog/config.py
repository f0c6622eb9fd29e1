# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Library Configuration
Default extractor and filter parameters, loaded from environment
variables (EHOG_ prefix) or a local .env file. Explicit constructor
arguments always win over these defaults.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EHOG_",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Cell Geometry ───────────────────────────────────────────────────────
    cell_size: int = Field(5, gt=0)

    # ─── Gradient Binning ────────────────────────────────────────────────────
    # 18 signed bins = 20° per bin over the full circle
    bin_count: int = Field(18, gt=0)
    interpolate_bins: bool = False

    # ─── Extended HOG Descriptor ─────────────────────────────────────────────
    signed_and_unsigned: bool = True
    interpolate_cells: bool = True
    truncation_alpha: float = Field(0.2, gt=0)

    # ─── Image Pyramid ───────────────────────────────────────────────────────
    octave_layer_count: int = Field(5, gt=0)

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
