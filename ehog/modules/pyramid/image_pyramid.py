# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Image Pyramid
Holds one source image at a set of discrete scales.

Scale factors are source pixels per layer pixel: 1.0 is the source
resolution, 2.0 is half the width and height, 0.5 is upsampled.
Factors are octave-aligned powers of 2 ** (1 / octave_layer_count), so
every octave_layer_count-th layer halves the previous octave and can be
resized from it instead of from the full source.

Two filter lists shape the layer contents:
  image_filters  applied once to the source before scaling (e.g. grayscale)
  layer_filters  applied to every scaled layer (e.g. gradient + binning)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ehog.core.errors import (
    ConfigurationError,
    EmptyInputError,
    NoScaleAvailable,
    require_positive,
)
from ehog.modules.filters.base import ImageFilter, apply_all
from ehog.utils.image_utils import as_image_array, has_area, resize_to
from ehog.utils.logger import get_logger

log = get_logger(__name__)

# Relative tolerance when comparing log-scale distances
_LOG_TOLERANCE = 1e-9


@dataclass(frozen=True, eq=False)
class PyramidLayer:
    """One scaled (and filtered) representation of the source image."""
    index: int
    scale_factor: float     # source pixels per layer pixel
    image: np.ndarray       # read-only; uint8 intensities or bin tuples

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) in layer pixels."""
        return self.width, self.height

    def to_layer(self, value: float) -> float:
        """Map a source-pixel coordinate or length to (unrounded) layer pixels."""
        return value / self.scale_factor


class ImagePyramid:
    """
    Scale-space over one image.

    Args:
        min_scale_factor:   Smallest scale factor that must be available.
        max_scale_factor:   Largest scale factor that must be available.
        octave_layer_count: Layers per octave (scale doubling).
        image_filters:      Stages run on the source before scaling.
        layer_filters:      Stages run on each scaled layer.
    """

    def __init__(
        self,
        min_scale_factor: float,
        max_scale_factor: float,
        octave_layer_count: int = 5,
        image_filters: list[ImageFilter] | None = None,
        layer_filters: list[ImageFilter] | None = None,
    ) -> None:
        require_positive(
            min_scale_factor=min_scale_factor,
            max_scale_factor=max_scale_factor,
            octave_layer_count=octave_layer_count,
        )
        if min_scale_factor > max_scale_factor:
            raise ConfigurationError(
                f"min_scale_factor ({min_scale_factor}) must not exceed "
                f"max_scale_factor ({max_scale_factor})"
            )
        self.min_scale_factor = min_scale_factor
        self.max_scale_factor = max_scale_factor
        self.octave_layer_count = octave_layer_count
        self.image_filters: list[ImageFilter] = list(image_filters or [])
        self.layer_filters: list[ImageFilter] = list(layer_filters or [])
        self._layers: list[PyramidLayer] = []
        self._image_size: tuple[int, int] | None = None

    # ─── Scale factors ───────────────────────────────────────────────────────

    @property
    def incremental_scale_factor(self) -> float:
        return 2.0 ** (1.0 / self.octave_layer_count)

    def _exponent_range(self) -> range:
        """Exponents k of step ** k covering [min_scale_factor, max_scale_factor]."""
        log_step = math.log(self.incremental_scale_factor)
        k_min = math.floor(math.log(self.min_scale_factor) / log_step + _LOG_TOLERANCE)
        k_max = math.ceil(math.log(self.max_scale_factor) / log_step - _LOG_TOLERANCE)
        return range(k_min, k_max + 1)

    # ─── Update ──────────────────────────────────────────────────────────────

    def update(self, image) -> None:
        """
        Rebuild every layer from a new source image.
        Layers returned before this call stay valid but belong to the old image.

        Raises:
            EmptyInputError:    If image is None, empty or has zero area.
            ConfigurationError: If image is not uint8.
        """
        source = as_image_array(image)
        if not has_area(source):
            shape = None if source is None else source.shape
            raise EmptyInputError(f"Cannot build a pyramid from an empty image (shape={shape})")
        if source.dtype != np.uint8:
            # Gradient weights and bin data are scaled for 8-bit intensities
            raise ConfigurationError(
                f"Expected an 8-bit image, got dtype {source.dtype}; convert it to uint8 first"
            )

        source = apply_all(self.image_filters, source)
        src_h, src_w = source.shape[:2]
        step = self.incremental_scale_factor

        layers: list[PyramidLayer] = []
        scaled_by_exponent: dict[int, np.ndarray] = {}
        for k in self._exponent_range():
            scale = step ** k
            width = int(round(src_w / scale))
            height = int(round(src_h / scale))
            if width < 1 or height < 1:
                break

            # Downscaled octaves halve the downscaled layer one octave finer;
            # upsampled layers are never used as a parent
            parent_exponent = k - self.octave_layer_count
            octave_parent = scaled_by_exponent.get(parent_exponent) if parent_exponent >= 0 else None
            base = source if octave_parent is None else octave_parent
            scaled = resize_to(base, width, height)
            scaled_by_exponent[k] = scaled

            data = apply_all(self.layer_filters, scaled)
            data.setflags(write=False)
            layers.append(PyramidLayer(index=len(layers), scale_factor=scale, image=data))

        self._layers = layers
        self._image_size = (src_w, src_h)

        log.info(
            "pyramid_updated",
            image_width=src_w,
            image_height=src_h,
            layer_count=len(layers),
            min_scale=round(layers[0].scale_factor, 4) if layers else None,
            max_scale=round(layers[-1].scale_factor, 4) if layers else None,
        )

    # ─── Lookup ──────────────────────────────────────────────────────────────

    def get_layer(self, scale_factor: float) -> PyramidLayer | None:
        """
        Return the layer whose scale factor is closest to scale_factor.

        Distance is measured on the log scale. When two layers are equally
        close the coarser one (larger scale factor) wins. Layers more than
        half a pyramid step away are not considered a match.

        Returns:
            The layer, or None when the pyramid is empty or no layer is close.
        """
        if not self._layers or scale_factor <= 0:
            return None
        target = math.log(scale_factor)
        best = min(
            self._layers,
            key=lambda layer: (
                round(abs(math.log(layer.scale_factor) - target), 9),
                -layer.scale_factor,
            ),
        )
        max_distance = 0.5 * math.log(self.incremental_scale_factor) + _LOG_TOLERANCE
        if abs(math.log(best.scale_factor) - target) > max_distance:
            return None
        return best

    def closest_layer_for(self, target_width: float, patch_width: int) -> PyramidLayer | None:
        """Layer in which a target_width source-pixel span is patch_width pixels wide."""
        if patch_width <= 0:
            return None
        return self.get_layer(target_width / patch_width)

    def require_layer(self, scale_factor: float) -> PyramidLayer:
        """Like get_layer, but raises NoScaleAvailable instead of returning None."""
        layer = self.get_layer(scale_factor)
        if layer is None:
            if not self._layers:
                raise NoScaleAvailable("Pyramid is empty; call update() with an image first.")
            raise NoScaleAvailable(
                f"No layer serves scale factor {scale_factor:.4f}; available range is "
                f"[{self._layers[0].scale_factor:.4f}, {self._layers[-1].scale_factor:.4f}]."
            )
        return layer

    # ─── Accessors ───────────────────────────────────────────────────────────

    @property
    def layers(self) -> list[PyramidLayer]:
        """Layers ordered from finest (smallest scale factor) to coarsest."""
        return list(self._layers)

    @property
    def scale_factors(self) -> list[float]:
        return [layer.scale_factor for layer in self._layers]

    @property
    def image_size(self) -> tuple[int, int] | None:
        """(width, height) of the last source image after image filters, or None."""
        return self._image_size

    @property
    def is_empty(self) -> bool:
        return not self._layers

    # ─── Copy ────────────────────────────────────────────────────────────────

    def __copy__(self) -> ImagePyramid:
        """
        Independent pyramid with the same configuration and current layers.
        Filter instances are shared; layer lists are not, so a later update()
        on either pyramid leaves the other untouched.
        """
        clone = ImagePyramid(
            self.min_scale_factor,
            self.max_scale_factor,
            self.octave_layer_count,
            self.image_filters,
            self.layer_filters,
        )
        clone._layers = list(self._layers)
        clone._image_size = self._image_size
        return clone

    def __repr__(self) -> str:
        return (
            f"ImagePyramid(scale=[{self.min_scale_factor:.4f}, {self.max_scale_factor:.4f}], "
            f"octave_layer_count={self.octave_layer_count}, layers={len(self._layers)})"
        )
