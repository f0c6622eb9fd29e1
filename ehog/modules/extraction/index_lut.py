# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Border-Reflecting Index Look-Up Tables
Maps every patch position along one axis to a valid image index.
Positions outside the image are mirrored at the border (the edge pixel
is repeated, as in numpy's "symmetric" padding):

  image_size=5:   ... 1 0 | 0 1 2 3 4 | 4 3 ...

The reflection is periodic with period 2 * image_size, so patches that
extend arbitrarily far past the image still sample valid pixels.
The same function is used for rows and for columns.
"""

from __future__ import annotations

import numpy as np

from ehog.core.errors import require_positive


def create_index_lut(image_size: int, patch_start: int, patch_size: int) -> np.ndarray:
    """
    Create the look-up table from patch indices to image indices.

    Args:
        image_size:  Size of the image along the axis (width or height).
        patch_start: First patch index in image coordinates (x or y).
                     May be negative or beyond the image.
        patch_size:  Size of the patch along the axis.

    Returns:
        (patch_size,) intp array; entry i is the image index sampled by
        patch position i. Every entry lies in [0, image_size).

    Raises:
        ConfigurationError: If image_size or patch_size is not positive.
    """
    require_positive(image_size=image_size, patch_size=patch_size)

    raw = np.arange(patch_start, patch_start + patch_size, dtype=np.intp)
    period = 2 * image_size
    # numpy's % is non-negative for a positive divisor
    folded = raw % period
    return np.where(folded < image_size, folded, period - 1 - folded)
