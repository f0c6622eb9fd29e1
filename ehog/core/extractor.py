# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Extended HOG Feature Extractor
Extracts extended HOG cell descriptors for arbitrary rectangles of the
current image.

The descriptor of a cell depends on its neighbours (block normalisation),
so each extracted patch is enlarged by one ring of cells first:

  request (cols x rows cells)  ->  haloed patch ((cols+2) x (rows+2) cells)
                               ->  descriptor grid ((cols+2) x (rows+2))
                               ->  cropped grid (cols x rows)

Halo cells that fall (partially) outside the pyramid layer are filled by
reflecting the layer at its border, so extraction never fails for
out-of-bounds rectangles.

Per request:
  1. Enlarge the rectangle around its centre by (cols+2)/cols, (rows+2)/rows
  2. Pick the pyramid layer in which the enlarged width is patch_width pixels
  3. Map the request centre into layer pixels and centre the fixed
     patch_width x patch_height window on it
  4. Build row/column index LUTs (border reflection)
  5. Gather the patch data
  6. Run the descriptor filter
  7. Crop the halo ring

Threading: no internal locks. update() must not run concurrently with
extract() on the same instance; separate instances (including copies)
are fully independent.
"""

from __future__ import annotations

import copy
from enum import Enum

from pydantic import ValidationError

from ehog.config import Settings, get_settings
from ehog.core.errors import (
    ConfigurationError,
    NoScaleAvailable,
    require_positive,
)
from ehog.models.geometry import CellGridGeometry, ExtractionRequest
from ehog.models.patch import Patch
from ehog.modules.extraction import assemble_patch, create_index_lut, crop_halo
from ehog.modules.filters import (
    CompleteExtendedHogFilter,
    ExtendedHogFilter,
    GradientBinningFilter,
    GradientFilter,
    GrayscaleFilter,
    ImageFilter,
)
from ehog.modules.pyramid import ImagePyramid
from ehog.utils.geometry_utils import enlarge_rect, rect_center, window_around
from ehog.utils.logger import get_logger

log = get_logger(__name__)


class LayerRepresentation(str, Enum):
    """What the pyramid layers hold, and therefore what the filter must accept."""
    INTENSITY = "intensity"   # uint8 grayscale; complete filter bins the patch itself
    BINNED = "binned"         # uint8 bin tuples; descriptor-only filter


def representation_for(ehog_filter: ImageFilter) -> LayerRepresentation:
    """Derive the layer representation from the descriptor filter type."""
    if isinstance(ehog_filter, CompleteExtendedHogFilter):
        return LayerRepresentation.INTENSITY
    if isinstance(ehog_filter, ExtendedHogFilter):
        return LayerRepresentation.BINNED
    raise ConfigurationError(
        f"Unsupported descriptor filter {type(ehog_filter).__name__}; expected "
        "ExtendedHogFilter or CompleteExtendedHogFilter."
    )


class ExtendedHogFeatureExtractor:
    """
    Feature extractor computing extended HOG descriptors on image patches.

    Construction variants:
      ExtendedHogFeatureExtractor(pyramid, CompleteExtendedHogFilter, cols, rows)
          pyramid layers hold grayscale images
      ExtendedHogFeatureExtractor(pyramid, ExtendedHogFilter, cols, rows)
          pyramid layers hold bin data (gradient + binning already applied)
      ExtendedHogFeatureExtractor.from_widths(...)
          builds a grayscale pyramid sized for the given patch widths
      ExtendedHogFeatureExtractor.from_binned_widths(...)
          builds a pyramid with per-layer gradient + binning
    """

    def __init__(
        self,
        pyramid: ImagePyramid,
        ehog_filter: CompleteExtendedHogFilter | ExtendedHogFilter,
        cols: int,
        rows: int,
    ) -> None:
        self._representation = representation_for(ehog_filter)
        self._geometry = CellGridGeometry.create(cols, rows, ehog_filter.cell_size)
        self._filter = ehog_filter
        self._pyramid = pyramid

        log.debug(
            "extractor_created",
            representation=self._representation.value,
            cols=cols,
            rows=rows,
            cell_size=self._geometry.cell_size,
            patch_width=self.patch_width,
            patch_height=self.patch_height,
        )

    # ─── Alternative constructors ────────────────────────────────────────────

    @classmethod
    def from_widths(
        cls,
        ehog_filter: CompleteExtendedHogFilter,
        cols: int,
        rows: int,
        min_width: int,
        max_width: int,
        octave_layer_count: int = 5,
    ) -> ExtendedHogFeatureExtractor:
        """
        Create an extractor with its own grayscale pyramid.

        Args:
            ehog_filter:        Complete filter (gradient + binning + descriptor).
            cols, rows:         Cell grid size of the extracted features.
            min_width:          Width of the smallest patches that will be extracted.
            max_width:          Width of the biggest patches that will be extracted.
            octave_layer_count: Number of pyramid layers per octave.
        """
        if not isinstance(ehog_filter, CompleteExtendedHogFilter):
            raise ConfigurationError(
                "from_widths() needs a CompleteExtendedHogFilter; use "
                "from_binned_widths() for a descriptor-only filter."
            )
        geometry = CellGridGeometry.create(cols, rows, ehog_filter.cell_size)
        pyramid = create_pyramid(
            geometry, min_width, max_width, octave_layer_count,
            image_filters=[GrayscaleFilter()],
        )
        return cls(pyramid, ehog_filter, cols, rows)

    @classmethod
    def from_binned_widths(
        cls,
        gradient_filter: GradientFilter,
        binning_filter: GradientBinningFilter,
        ehog_filter: ExtendedHogFilter,
        cols: int,
        rows: int,
        min_width: int,
        max_width: int,
        octave_layer_count: int = 5,
    ) -> ExtendedHogFeatureExtractor:
        """
        Create an extractor whose pyramid converts to grayscale before scaling
        and applies gradient and binning filters to every scaled layer.
        Patches are then gathered from bin data and only the descriptor
        filter runs per extraction.
        """
        if not isinstance(ehog_filter, ExtendedHogFilter):
            raise ConfigurationError("from_binned_widths() needs an ExtendedHogFilter.")
        if binning_filter.bin_count != ehog_filter.bin_count:
            raise ConfigurationError(
                f"Binning filter produces {binning_filter.bin_count} bins but the "
                f"extended HOG filter expects {ehog_filter.bin_count}"
            )
        geometry = CellGridGeometry.create(cols, rows, ehog_filter.cell_size)
        pyramid = create_pyramid(
            geometry, min_width, max_width, octave_layer_count,
            image_filters=[GrayscaleFilter()],
            layer_filters=[gradient_filter, binning_filter],
        )
        return cls(pyramid, ehog_filter, cols, rows)

    # ─── Operations ──────────────────────────────────────────────────────────

    def update(self, image) -> None:
        """
        Push a new source image (numpy array or PIL image) into the pyramid.
        Patches extracted earlier keep their data but describe the old image.

        Raises:
            EmptyInputError:    If image is None, empty or has zero area.
            ConfigurationError: If image is not uint8 (8-bit intensities).
        """
        self._pyramid.update(image)

    def extract(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        strict: bool = False,
    ) -> Patch | None:
        """
        Extract the descriptors of the rectangle (x, y, width, height).

        Args:
            x, y:          Top-left corner in source pixels; may lie outside the image.
            width, height: Size in source pixels; must be positive.
            strict:        Raise NoScaleAvailable instead of returning None.

        Returns:
            Patch with a (rows, cols, descriptor_length) grid, or None when
            no pyramid layer serves the requested size (including before the
            first update()).

        Raises:
            ConfigurationError: If width or height is not positive.
            NoScaleAvailable:   Only when strict is True.
        """
        try:
            request = ExtractionRequest(x=x, y=y, width=width, height=height)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid extraction rectangle ({x}, {y}, {width}, {height}): "
                f"{exc.errors()[0]['msg']}"
            ) from exc

        geometry = self._geometry
        enlarged = enlarge_rect(
            request.as_tuple(), geometry.width_factor, geometry.height_factor
        )
        layer = self._pyramid.closest_layer_for(enlarged[2], geometry.patch_width)
        if layer is None:
            if strict:
                raise NoScaleAvailable(
                    f"No pyramid layer serves a {enlarged[2]}px wide patch "
                    f"(pyramid empty: {self._pyramid.is_empty})."
                )
            log.debug(
                "extract_no_layer",
                enlarged_width=enlarged[2],
                pyramid_empty=self._pyramid.is_empty,
            )
            return None

        # Request centre in unrounded layer pixels
        cx, cy = rect_center(request.as_tuple())
        patch_x, patch_y, patch_w, patch_h = window_around(
            layer.to_layer(cx), layer.to_layer(cy),
            geometry.patch_width, geometry.patch_height,
        )

        row_indices = create_index_lut(layer.height, patch_y, patch_h)
        col_indices = create_index_lut(layer.width, patch_x, patch_w)
        patch_data = assemble_patch(layer.image, row_indices, col_indices)

        haloed = self._filter.apply(patch_data)
        descriptors = crop_halo(haloed)

        log.debug(
            "patch_extracted",
            layer_index=layer.index,
            scale_factor=round(layer.scale_factor, 4),
            layer_x=patch_x,
            layer_y=patch_y,
            grid_shape=descriptors.shape,
        )

        return Patch(x=x, y=y, width=width, height=height, data=descriptors)

    # ─── Accessors ───────────────────────────────────────────────────────────

    @property
    def pyramid(self) -> ImagePyramid:
        return self._pyramid

    @property
    def ehog_filter(self) -> CompleteExtendedHogFilter | ExtendedHogFilter:
        return self._filter

    @property
    def geometry(self) -> CellGridGeometry:
        return self._geometry

    @property
    def representation(self) -> LayerRepresentation:
        return self._representation

    @property
    def patch_width(self) -> int:
        """Width of the patch image data BEFORE the extended HOG filter runs (includes halo)."""
        return self._geometry.patch_width

    @property
    def patch_height(self) -> int:
        """Height of the patch image data BEFORE the extended HOG filter runs (includes halo)."""
        return self._geometry.patch_height

    @property
    def feature_length(self) -> int:
        """Length of Patch.feature_vector."""
        return self._geometry.cols * self._geometry.rows * self._filter.descriptor_length

    # ─── Copy ────────────────────────────────────────────────────────────────

    def __copy__(self) -> ExtendedHogFeatureExtractor:
        clone = object.__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone._pyramid = copy.copy(self._pyramid)
        return clone

    def __deepcopy__(self, memo: dict) -> ExtendedHogFeatureExtractor:
        # Filters are immutable and stay shared even for deep copies
        return self.__copy__()

    def copy(self) -> ExtendedHogFeatureExtractor:
        """Extractor sharing the filter but owning an independent pyramid."""
        return self.__copy__()


# ─── Pyramid sizing ──────────────────────────────────────────────────────────

def create_pyramid(
    geometry: CellGridGeometry,
    min_width: int,
    max_width: int,
    octave_layer_count: int = 5,
    image_filters: list[ImageFilter] | None = None,
    layer_filters: list[ImageFilter] | None = None,
) -> ImagePyramid:
    """
    Create a pyramid whose scale range allows extracting patches whose
    widths lie in [min_width, max_width].

    A layer with scale factor s serves a request of width w when the
    enlarged width round(w * width_factor) spans patch_width layer pixels,
    so s = enlarged / patch_width.

    Raises:
        ConfigurationError: On non-positive widths/counts or min_width > max_width.
    """
    require_positive(
        min_width=min_width,
        max_width=max_width,
        octave_layer_count=octave_layer_count,
    )
    if min_width > max_width:
        raise ConfigurationError(
            f"min_width ({min_width}) must not exceed max_width ({max_width})"
        )
    min_enlarged = round(min_width * geometry.width_factor)
    max_enlarged = round(max_width * geometry.width_factor)
    return ImagePyramid(
        min_scale_factor=min_enlarged / geometry.patch_width,
        max_scale_factor=max_enlarged / geometry.patch_width,
        octave_layer_count=octave_layer_count,
        image_filters=image_filters,
        layer_filters=layer_filters,
    )


def make_extractor(
    cols: int,
    rows: int,
    min_width: int,
    max_width: int,
    settings: Settings | None = None,
) -> ExtendedHogFeatureExtractor:
    """
    Factory: create a binned-pyramid extractor using current config settings.
    Use this instead of wiring the filters by hand in application code.
    """
    settings = settings or get_settings()
    return ExtendedHogFeatureExtractor.from_binned_widths(
        GradientFilter(),
        GradientBinningFilter(
            settings.bin_count,
            signed=settings.signed_and_unsigned,
            interpolate=settings.interpolate_bins,
        ),
        ExtendedHogFilter(
            settings.cell_size,
            settings.bin_count,
            signed_and_unsigned=settings.signed_and_unsigned,
            interpolate_cells=settings.interpolate_cells,
            alpha=settings.truncation_alpha,
        ),
        cols,
        rows,
        min_width,
        max_width,
        settings.octave_layer_count,
    )
