# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Extraction Module
Public API for the patch extraction primitives.
"""

from ehog.modules.extraction.halo_cropper import crop_halo
from ehog.modules.extraction.index_lut import create_index_lut
from ehog.modules.extraction.patch_assembler import assemble_patch

__all__ = [
    # Index LUT
    "create_index_lut",
    # Gather
    "assemble_patch",
    # Halo
    "crop_halo",
]
