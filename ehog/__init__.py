# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Extended HOG Feature Extraction
Public API of the library.
"""

from ehog.core.errors import ConfigurationError, EmptyInputError, NoScaleAvailable
from ehog.core.extractor import (
    ExtendedHogFeatureExtractor,
    LayerRepresentation,
    create_pyramid,
    make_extractor,
)
from ehog.models.geometry import CellGridGeometry, ExtractionRequest
from ehog.models.patch import Patch
from ehog.modules.filters import (
    CompleteExtendedHogFilter,
    ExtendedHogFilter,
    GradientBinningFilter,
    GradientFilter,
    GrayscaleFilter,
)
from ehog.modules.pyramid import ImagePyramid, PyramidLayer

__version__ = "0.1.0"

__all__ = [
    # Extractor
    "ExtendedHogFeatureExtractor",
    "LayerRepresentation",
    "create_pyramid",
    "make_extractor",
    # Models
    "CellGridGeometry",
    "ExtractionRequest",
    "Patch",
    # Filters
    "GrayscaleFilter",
    "GradientFilter",
    "GradientBinningFilter",
    "ExtendedHogFilter",
    "CompleteExtendedHogFilter",
    # Pyramid
    "ImagePyramid",
    "PyramidLayer",
    # Errors
    "ConfigurationError",
    "EmptyInputError",
    "NoScaleAvailable",
]
