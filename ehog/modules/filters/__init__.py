# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Filters Module
Public API for the image stages and the extended HOG descriptor filters.
"""

from ehog.modules.filters.base import ImageFilter, apply_all
from ehog.modules.filters.binning import GradientBinningFilter
from ehog.modules.filters.extended_hog import (
    CompleteExtendedHogFilter,
    ExtendedHogFilter,
)
from ehog.modules.filters.gradient import GradientFilter
from ehog.modules.filters.grayscale import GrayscaleFilter

__all__ = [
    # Base
    "ImageFilter",
    "apply_all",
    # Stages
    "GrayscaleFilter",
    "GradientFilter",
    "GradientBinningFilter",
    # Descriptors
    "ExtendedHogFilter",
    "CompleteExtendedHogFilter",
]
