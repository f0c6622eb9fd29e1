# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Patch Assembler
Gathers patch data out of a pyramid layer using one index LUT per axis.

The gather is a single numpy fancy-index operation, so the same routine
serves every element layout the pyramid can hold:
  - H x W uint8 grayscale intensities
  - H x W x 2 uint8 (bin, weight) tuples
  - H x W x 4 uint8 (bin, weight, bin, weight) interpolated tuples
The element type and channel count of the source are preserved exactly.
"""

from __future__ import annotations

import numpy as np


def assemble_patch(
    image: np.ndarray,
    row_indices: np.ndarray,
    col_indices: np.ndarray,
) -> np.ndarray:
    """
    Create the patch data by copying values from the image.

    Args:
        image:       Layer buffer, (H, W) or (H, W, C).
        row_indices: (R,) mapping patch rows to image rows.
        col_indices: (C,) mapping patch columns to image columns.

    Returns:
        New (R, C) or (R, C, channels) array with image.dtype where
        patch[r, c] == image[row_indices[r], col_indices[c]].
    """
    # np.ix_ builds an open mesh: one pass, output is the only allocation
    return image[np.ix_(row_indices, col_indices)]
