# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Pyramid Module
Public API for the multi-scale image representation.
"""

from ehog.modules.pyramid.image_pyramid import ImagePyramid, PyramidLayer

__all__ = [
    "ImagePyramid",
    "PyramidLayer",
]
