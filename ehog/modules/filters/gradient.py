# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Gradient Filter
Centred [-1, 0, 1] derivatives of a grayscale image.
Output is float32 (H, W, 2) holding (dx, dy) per pixel; for 8-bit input
each component lies in [-255, 255].
"""

from __future__ import annotations

import cv2
import numpy as np

from ehog.core.errors import ConfigurationError
from ehog.modules.filters.base import ImageFilter

_KERNEL_X = np.array([[-1.0, 0.0, 1.0]], dtype=np.float32)
_KERNEL_Y = _KERNEL_X.T.copy()


class GradientFilter(ImageFilter):
    """
    Computes horizontal and vertical gradients.

    Args:
        blur_sigma: Standard deviation of an optional Gaussian pre-blur.
                    0 disables blurring.
    """

    def __init__(self, blur_sigma: float = 0.0) -> None:
        if blur_sigma < 0:
            raise ConfigurationError(f"blur_sigma must not be negative, got {blur_sigma}")
        self.blur_sigma = blur_sigma

    def apply(self, image: np.ndarray) -> np.ndarray:
        if image.ndim != 2:
            raise ValueError(
                f"GradientFilter expects a single-channel image, got shape {image.shape}"
            )
        src = image.astype(np.float32)
        if self.blur_sigma > 0:
            src = cv2.GaussianBlur(src, (0, 0), self.blur_sigma)

        dx = cv2.filter2D(src, -1, _KERNEL_X, borderType=cv2.BORDER_REPLICATE)
        dy = cv2.filter2D(src, -1, _KERNEL_Y, borderType=cv2.BORDER_REPLICATE)
        return np.dstack((dx, dy))
