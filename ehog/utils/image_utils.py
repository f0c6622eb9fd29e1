# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Image Conversion Utilities
Shared helpers used by the pyramid and the filter stages.
All internal processing uses numpy arrays in OpenCV convention
(BGR for colour, H x W for single channel).
"""

import cv2
import numpy as np
from PIL import Image


# ─── PIL Bridge ──────────────────────────────────────────────────────────────

def pil_to_array(pil_img: Image.Image) -> np.ndarray:
    """
    Convert a PIL Image to a uint8 numpy array.
    Single-channel modes become H x W grayscale (32-bit modes are clipped
    to 0..255), everything else becomes BGR.
    """
    if pil_img.mode == "L":
        return np.array(pil_img)
    if pil_img.mode in ("I", "F"):
        return np.array(pil_img.convert("L"))
    return cv2.cvtColor(np.array(pil_img.convert("RGB")), cv2.COLOR_RGB2BGR)


def as_image_array(image) -> np.ndarray | None:
    """Accept numpy arrays or PIL images; return a numpy array or None."""
    if image is None:
        return None
    if isinstance(image, Image.Image):
        return pil_to_array(image)
    return np.asarray(image)


# ─── Validation ──────────────────────────────────────────────────────────────

def has_area(img: np.ndarray | None) -> bool:
    """Return True if img is a 2-D or 3-D array with non-zero width and height."""
    if img is None or img.ndim not in (2, 3):
        return False
    h, w = img.shape[:2]
    return h > 0 and w > 0


# ─── Color Space ─────────────────────────────────────────────────────────────

def to_gray(img: np.ndarray) -> np.ndarray:
    """
    Convert BGR or BGRA to single-channel grayscale.
    Arrays that are already single channel are returned unchanged.
    """
    if img.ndim == 2:
        return img
    channels = img.shape[2]
    if channels == 1:
        return img[:, :, 0]
    if channels == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)


# ─── Resize ──────────────────────────────────────────────────────────────────

def resize_to(img: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Resize img to exactly width x height.
    INTER_AREA when shrinking, INTER_LINEAR when enlarging.
    """
    h, w = img.shape[:2]
    if (w, h) == (width, height):
        return img.copy()
    shrinking = width < w and height < h
    interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
    return cv2.resize(img, (width, height), interpolation=interpolation)
