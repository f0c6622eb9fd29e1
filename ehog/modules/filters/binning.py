# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Gradient Binning Filter
Quantises (dx, dy) gradients into orientation bins and magnitude weights,
packed as small uint8 tuples so pyramid layers stay compact:

  interpolate=False  ->  (H, W, 2)  [bin, weight]
  interpolate=True   ->  (H, W, 4)  [bin, weight, next_bin, next_weight]

With interpolation the magnitude is split linearly between the two bins
whose centres enclose the gradient orientation.
Weights are magnitudes scaled so the largest 8-bit gradient maps to 255.
"""

from __future__ import annotations

import math

import numpy as np

from ehog.core.errors import ConfigurationError
from ehog.modules.filters.base import ImageFilter

# Largest magnitude of a [-1, 0, 1] gradient over 8-bit intensities
_MAX_MAGNITUDE = 255.0 * math.sqrt(2.0)
_WEIGHT_SCALE = 255.0 / _MAX_MAGNITUDE

_MAX_BIN_COUNT = 256


class GradientBinningFilter(ImageFilter):
    """
    Args:
        bin_count:   Number of orientation bins.
        signed:      Bins cover 360° (True) or 180° (False).
        interpolate: Split each magnitude between two adjacent bins.
    """

    def __init__(self, bin_count: int, signed: bool = True, interpolate: bool = False) -> None:
        if bin_count <= 0 or bin_count > _MAX_BIN_COUNT:
            raise ConfigurationError(
                f"bin_count must be in [1, {_MAX_BIN_COUNT}], got {bin_count}"
            )
        self.bin_count = bin_count
        self.signed = signed
        self.interpolate = interpolate

    @property
    def channels(self) -> int:
        """Channel count of the produced bin data."""
        return 4 if self.interpolate else 2

    def apply(self, image: np.ndarray) -> np.ndarray:
        if image.ndim != 3 or image.shape[2] != 2:
            raise ValueError(
                f"GradientBinningFilter expects (H, W, 2) gradients, got shape {image.shape}"
            )
        dx = image[:, :, 0].astype(np.float32)
        dy = image[:, :, 1].astype(np.float32)

        magnitude = np.sqrt(dx * dx + dy * dy) * _WEIGHT_SCALE
        span = 2.0 * np.pi if self.signed else np.pi
        position = np.mod(np.arctan2(dy, dx), span) * (self.bin_count / span)

        if not self.interpolate:
            bins = np.floor(position).astype(np.int64) % self.bin_count
            return np.dstack((bins, _to_weight(magnitude))).astype(np.uint8)

        # Bin centres sit at i + 0.5
        centred = position - 0.5
        lower = np.floor(centred)
        fraction = centred - lower
        lower = lower.astype(np.int64)
        return np.dstack((
            lower % self.bin_count,
            _to_weight(magnitude * (1.0 - fraction)),
            (lower + 1) % self.bin_count,
            _to_weight(magnitude * fraction),
        )).astype(np.uint8)


def _to_weight(values: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(values), 0, 255)
