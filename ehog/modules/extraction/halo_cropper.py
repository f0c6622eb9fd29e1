# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Halo Cropper
Removes the ring of neighbouring cells from a descriptor grid once the
descriptor filter has used them for normalisation.
"""

from __future__ import annotations

import numpy as np

from ehog.models.geometry import HALO_CELLS


def crop_halo(grid: np.ndarray, ring: int = HALO_CELLS) -> np.ndarray:
    """
    Drop `ring` cells from every side of a (rows, cols, D) descriptor grid.

    Returns a contiguous copy so the result does not keep the haloed
    grid alive.

    Raises:
        ValueError: If the grid is too small to hold the ring.
    """
    rows, cols = grid.shape[:2]
    if rows <= 2 * ring or cols <= 2 * ring:
        raise ValueError(
            f"Descriptor grid {rows}x{cols} is too small for a halo of {ring} cell(s)."
        )
    return np.ascontiguousarray(grid[ring:rows - ring, ring:cols - ring])
