# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Geometry Utilities
Rectangle and coordinate-mapping helpers used by the extractor when
moving between source-image pixels and pyramid-layer pixels.
All rectangles are (x, y, w, h) with (x, y) the top-left corner.
"""

import math


# ─── Rectangles ──────────────────────────────────────────────────────────────

def rect_center(rect: tuple[int, int, int, int]) -> tuple[float, float]:
    """Return the (cx, cy) centre of a rectangle."""
    x, y, w, h = rect
    return x + w / 2.0, y + h / 2.0


def enlarge_rect(
    rect: tuple[int, int, int, int],
    width_factor: float,
    height_factor: float,
) -> tuple[int, int, int, int]:
    """
    Grow a rectangle symmetrically around its centre.
    The new size is the old size times the factor, rounded to the
    nearest pixel. Returns the enlarged (x, y, w, h).
    """
    cx, cy = rect_center(rect)
    new_w = int(round(rect[2] * width_factor))
    new_h = int(round(rect[3] * height_factor))
    return window_around(cx, cy, new_w, new_h)


def window_around(
    cx: float, cy: float, width: int, height: int
) -> tuple[int, int, int, int]:
    """Place a width x height window so its centre is (cx, cy)."""
    return (
        int(math.floor(cx - width / 2.0 + 0.5)),
        int(math.floor(cy - height / 2.0 + 0.5)),
        width,
        height,
    )
