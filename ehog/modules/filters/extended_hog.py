# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Extended HOG Filter
Computes one descriptor per cell from binned gradient data, following
the Felzenszwalb et al. (PAMI 2010) variant of HOG:

1. Accumulate weighted orientation histograms per cell, optionally
   distributing each pixel bilinearly over the four nearest cells.
2. Fold the signed histogram into an unsigned one (b and b + n/2).
3. Normalise every cell by the energy of the four 2x2 cell blocks it
   belongs to, truncating each normalised value at alpha.
4. Sum the four normalisations of the histograms (times 0.5) and add
   four texture features (one per block, summed over unsigned bins).

Descriptor length is n + n/2 + 4 with signed_and_unsigned, else n + 4.
Cells on the grid border lack real neighbours; their normalisation uses
replicated edge energies. Callers that need exact descriptors must
therefore pass a patch with one extra ring of cells and discard it.
"""

from __future__ import annotations

import numpy as np

from ehog.core.errors import ConfigurationError, require_positive
from ehog.modules.filters.base import ImageFilter
from ehog.modules.filters.binning import GradientBinningFilter
from ehog.modules.filters.gradient import GradientFilter
from ehog.utils.image_utils import to_gray
from ehog.utils.logger import get_logger

log = get_logger(__name__)

_EPSILON = 1e-4
# 1 / sqrt(18): scales the texture features to the histogram range
_TEXTURE_WEIGHT = 0.2357


class ExtendedHogFilter(ImageFilter):
    """
    Descriptor-only filter over binned gradient data ((H, W, 2) or (H, W, 4) uint8).

    Args:
        cell_size:           Cell edge length in pixels.
        bin_count:           Number of bins in the input bin data.
        signed_and_unsigned: Input bins are signed; add folded unsigned bins.
        interpolate_cells:   Bilinear distribution of pixels over cells.
        alpha:               Truncation threshold after normalisation.
    """

    def __init__(
        self,
        cell_size: int,
        bin_count: int,
        signed_and_unsigned: bool = True,
        interpolate_cells: bool = True,
        alpha: float = 0.2,
    ) -> None:
        require_positive(cell_size=cell_size, bin_count=bin_count, alpha=alpha)
        if signed_and_unsigned and bin_count % 2 != 0:
            raise ConfigurationError(
                f"bin_count must be even to fold signed bins, got {bin_count}"
            )
        self.cell_size = cell_size
        self.bin_count = bin_count
        self.signed_and_unsigned = signed_and_unsigned
        self.interpolate_cells = interpolate_cells
        self.alpha = alpha
        log.debug(
            "extended_hog_filter_created",
            cell_size=cell_size,
            bin_count=bin_count,
            descriptor_length=self.descriptor_length,
        )

    @property
    def descriptor_length(self) -> int:
        if self.signed_and_unsigned:
            return self.bin_count + self.bin_count // 2 + 4
        return self.bin_count + 4

    def grid_shape(self, height: int, width: int) -> tuple[int, int]:
        """(rows, cols) of the cell grid produced for a height x width patch."""
        return height // self.cell_size, width // self.cell_size

    def apply(self, image: np.ndarray) -> np.ndarray:
        """
        Compute the cell descriptor grid of a binned patch.

        Returns:
            float32 (rows, cols, descriptor_length) with rows = H // cell_size
            and cols = W // cell_size.
        """
        if image.ndim != 3 or image.shape[2] not in (2, 4):
            raise ValueError(
                f"ExtendedHogFilter expects (H, W, 2|4) bin data, got shape {image.shape}"
            )
        rows, cols = self.grid_shape(*image.shape[:2])
        if rows == 0 or cols == 0:
            raise ValueError(
                f"Patch {image.shape[1]}x{image.shape[0]} is smaller than one "
                f"{self.cell_size}px cell."
            )

        histograms = self._cell_histograms(image, rows, cols)
        if self.signed_and_unsigned:
            half = self.bin_count // 2
            unsigned = histograms[..., :half] + histograms[..., half:]
        else:
            unsigned = histograms

        normalizers = self._block_normalizers(unsigned)   # (rows, cols, 4)

        signed_features = np.zeros_like(histograms)
        unsigned_features = np.zeros_like(unsigned)
        texture = np.empty((rows, cols, 4), dtype=np.float32)
        for k in range(4):
            n_k = normalizers[..., k:k + 1]
            truncated_unsigned = np.minimum(unsigned * n_k, self.alpha)
            unsigned_features += truncated_unsigned
            texture[..., k] = _TEXTURE_WEIGHT * truncated_unsigned.sum(axis=2)
            if self.signed_and_unsigned:
                signed_features += np.minimum(histograms * n_k, self.alpha)

        parts = [0.5 * unsigned_features, texture]
        if self.signed_and_unsigned:
            parts.insert(0, 0.5 * signed_features)
        return np.concatenate(parts, axis=2).astype(np.float32)

    # ─── Internals ───────────────────────────────────────────────────────────

    def _cell_histograms(self, image: np.ndarray, rows: int, cols: int) -> np.ndarray:
        cs = self.cell_size
        data = image[:rows * cs, :cols * cs]
        bins = data[..., 0::2].astype(np.intp)
        weights = data[..., 1::2].astype(np.float32) / 255.0

        hist = np.zeros((rows, cols, self.bin_count), dtype=np.float32)
        ys, xs = np.indices(data.shape[:2])

        if not self.interpolate_cells:
            cy = np.repeat((ys // cs)[..., None], bins.shape[2], axis=2)
            cx = np.repeat((xs // cs)[..., None], bins.shape[2], axis=2)
            np.add.at(hist, (cy.ravel(), cx.ravel(), bins.ravel()), weights.ravel())
            return hist

        # Pixel centre in cell units, relative to the first cell centre
        fy = (ys + 0.5) / cs - 0.5
        fx = (xs + 0.5) / cs - 0.5
        y0 = np.floor(fy).astype(np.intp)
        x0 = np.floor(fx).astype(np.intp)
        wy1 = (fy - y0).astype(np.float32)
        wx1 = (fx - x0).astype(np.float32)

        for dy, wy in ((0, 1.0 - wy1), (1, wy1)):
            for dx, wx in ((0, 1.0 - wx1), (1, wx1)):
                cy = y0 + dy
                cx = x0 + dx
                inside = (cy >= 0) & (cy < rows) & (cx >= 0) & (cx < cols)
                spatial = (wy * wx)[inside]
                for c in range(bins.shape[2]):
                    np.add.at(
                        hist,
                        (cy[inside], cx[inside], bins[..., c][inside]),
                        weights[..., c][inside] * spatial,
                    )
        return hist

    @staticmethod
    def _block_normalizers(unsigned: np.ndarray) -> np.ndarray:
        """1 / sqrt(block energy) for the four 2x2 blocks around every cell."""
        energy = np.sum(unsigned * unsigned, axis=2)
        padded = np.pad(energy, 1, mode="edge")
        blocks = padded[:-1, :-1] + padded[1:, :-1] + padded[:-1, 1:] + padded[1:, 1:]
        rows, cols = energy.shape
        stacked = np.stack((
            blocks[:rows, :cols],
            blocks[:rows, 1:cols + 1],
            blocks[1:rows + 1, :cols],
            blocks[1:rows + 1, 1:cols + 1],
        ), axis=2)
        return (1.0 / np.sqrt(stacked + _EPSILON)).astype(np.float32)


class CompleteExtendedHogFilter(ImageFilter):
    """
    Grayscale -> gradient -> binning -> extended HOG, applied to a raw patch.
    Used when the pyramid holds intensities instead of bin data.
    """

    def __init__(
        self,
        gradient_filter: GradientFilter,
        binning_filter: GradientBinningFilter,
        ehog_filter: ExtendedHogFilter,
    ) -> None:
        if binning_filter.bin_count != ehog_filter.bin_count:
            raise ConfigurationError(
                f"Binning filter produces {binning_filter.bin_count} bins but the "
                f"extended HOG filter expects {ehog_filter.bin_count}"
            )
        self.gradient_filter = gradient_filter
        self.binning_filter = binning_filter
        self.ehog_filter = ehog_filter

    @classmethod
    def create(
        cls,
        cell_size: int,
        bin_count: int = 18,
        interpolate_bins: bool = False,
        signed_and_unsigned: bool = True,
        interpolate_cells: bool = True,
        alpha: float = 0.2,
    ) -> CompleteExtendedHogFilter:
        """Convenience: build all three stages from scalar parameters."""
        return cls(
            GradientFilter(),
            GradientBinningFilter(bin_count, signed=signed_and_unsigned, interpolate=interpolate_bins),
            ExtendedHogFilter(cell_size, bin_count, signed_and_unsigned, interpolate_cells, alpha),
        )

    @property
    def cell_size(self) -> int:
        return self.ehog_filter.cell_size

    @property
    def descriptor_length(self) -> int:
        return self.ehog_filter.descriptor_length

    def grid_shape(self, height: int, width: int) -> tuple[int, int]:
        return self.ehog_filter.grid_shape(height, width)

    def apply(self, image: np.ndarray) -> np.ndarray:
        gradients = self.gradient_filter.apply(to_gray(image))
        return self.ehog_filter.apply(self.binning_filter.apply(gradients))
