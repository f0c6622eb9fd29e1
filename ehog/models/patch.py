# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Patch Model
The result of one extraction: the requested rectangle plus the
halo-free descriptor grid. Owned exclusively by the caller.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class Patch(BaseModel):
    """
    Extended HOG descriptors of one extracted rectangle.
    The rectangle is the one originally requested, in source pixels.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    x: int
    y: int
    width: int
    height: int
    # Descriptor grid: numpy (rows, cols, descriptor_length) float32
    data: Any = Field(..., description="np.ndarray cell descriptor grid")

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def descriptor_length(self) -> int:
        return self.data.shape[2]

    @property
    def feature_vector(self) -> np.ndarray:
        """Cell descriptors concatenated in row-major order."""
        return np.ascontiguousarray(self.data).reshape(-1)

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height
