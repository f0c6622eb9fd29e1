# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Filter Base
Every stage is an image-in, image-out transformation without hidden
state, so instances can be shared freely between extractors.
"""

from __future__ import annotations

import numpy as np


class ImageFilter:
    """Pure image -> image transformation."""

    def apply(self, image: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, image: np.ndarray) -> np.ndarray:
        return self.apply(image)

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items() if not k.startswith("_"))
        return f"{type(self).__name__}({params})"


def apply_all(filters: list[ImageFilter], image: np.ndarray) -> np.ndarray:
    """Run image through each filter in order."""
    for f in filters:
        image = f.apply(image)
    return image
