# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Geometry Models
Extraction requests in source-image pixels and the fixed cell-grid
geometry of an extractor (grid size, cell size, halo enlargement).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ehog.core.errors import ConfigurationError

# Width of the ring of neighbouring cells added around the requested grid.
# The descriptor filter needs it for normalisation; the cropper removes it.
HALO_CELLS = 1


class ExtractionRequest(BaseModel):
    """
    Rectangle in source-image pixel coordinates.
    (x, y) is the top-left corner and may lie outside the image.
    """
    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


class CellGridGeometry(BaseModel):
    """
    Cell grid of the extracted descriptors plus the derived halo geometry.
    Immutable once built; shared by the extractor and its copies.
    """
    model_config = ConfigDict(frozen=True)

    cols: int = Field(..., gt=0, description="Requested cell columns")
    rows: int = Field(..., gt=0, description="Requested cell rows")
    cell_size: int = Field(..., gt=0, description="Cell edge length in layer pixels")

    @classmethod
    def create(cls, cols: int, rows: int, cell_size: int) -> CellGridGeometry:
        """Build the geometry, converting validation failures to ConfigurationError."""
        try:
            return cls(cols=cols, rows=rows, cell_size=cell_size)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid cell grid cols={cols} rows={rows} cell_size={cell_size}: "
                f"{exc.errors()[0]['msg']}"
            ) from exc

    @property
    def haloed_cols(self) -> int:
        return self.cols + 2 * HALO_CELLS

    @property
    def haloed_rows(self) -> int:
        return self.rows + 2 * HALO_CELLS

    @property
    def width_factor(self) -> float:
        """Enlargement of the requested width that adds the halo columns."""
        return self.haloed_cols / self.cols

    @property
    def height_factor(self) -> float:
        """Enlargement of the requested height that adds the halo rows."""
        return self.haloed_rows / self.rows

    @property
    def patch_width(self) -> int:
        """Width of the gathered patch data (before filtering and cropping)."""
        return self.haloed_cols * self.cell_size

    @property
    def patch_height(self) -> int:
        """Height of the gathered patch data (before filtering and cropping)."""
        return self.haloed_rows * self.cell_size
