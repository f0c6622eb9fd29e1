# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Grayscale Filter
Converts colour images to single-channel uint8 intensities before the
pyramid scales them down.
"""

from __future__ import annotations

import numpy as np

from ehog.modules.filters.base import ImageFilter
from ehog.utils.image_utils import to_gray


class GrayscaleFilter(ImageFilter):
    def apply(self, image: np.ndarray) -> np.ndarray:
        return to_gray(image)
