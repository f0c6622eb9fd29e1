# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 1 infrastructure smoke tests.
Tests config loading, logging setup, error types, geometry models
and the image / geometry helpers.
"""

import numpy as np
import pytest


# ─── Config ──────────────────────────────────────────────────────────────────

def test_settings_load_defaults():
    from ehog.config import Settings
    s = Settings(_env_file=None)
    assert s.cell_size == 5
    assert s.bin_count == 18
    assert s.interpolate_bins is False
    assert s.signed_and_unsigned is True
    assert s.interpolate_cells is True
    assert s.truncation_alpha == 0.2
    assert s.octave_layer_count == 5


def test_settings_env_override(monkeypatch):
    from ehog.config import Settings
    monkeypatch.setenv("EHOG_CELL_SIZE", "8")
    monkeypatch.setenv("EHOG_LOG_LEVEL", "WARNING")
    s = Settings(_env_file=None)
    assert s.cell_size == 8
    assert s.log_level == "WARNING"


def test_settings_rejects_non_positive_cell_size():
    from pydantic import ValidationError
    from ehog.config import Settings
    with pytest.raises(ValidationError):
        Settings(_env_file=None, cell_size=0)


def test_get_settings_is_cached():
    from ehog.config import get_settings
    assert get_settings() is get_settings()


# ─── Logging ─────────────────────────────────────────────────────────────────

def test_configure_logging_and_get_logger():
    from ehog.utils.logger import configure_logging, get_logger
    configure_logging("WARNING")
    log = get_logger("ehog.test")
    assert log is not None
    # Filtered below WARNING, must not raise
    log.debug("ignored_event", value=1)


# ─── Errors ──────────────────────────────────────────────────────────────────

def test_error_hierarchy():
    from ehog.core.errors import ConfigurationError, EmptyInputError, NoScaleAvailable
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(EmptyInputError, ConfigurationError)
    assert issubclass(NoScaleAvailable, LookupError)


def test_require_positive_names_offending_value():
    from ehog.core.errors import ConfigurationError, require_positive
    require_positive(a=1, b=2.5)
    with pytest.raises(ConfigurationError, match="b must be positive"):
        require_positive(a=1, b=0)
    with pytest.raises(ConfigurationError, match="c must be positive"):
        require_positive(c=-3)


# ─── Geometry Models ─────────────────────────────────────────────────────────

def test_cell_grid_geometry_derived_values():
    from ehog.models.geometry import CellGridGeometry
    g = CellGridGeometry.create(cols=4, rows=8, cell_size=5)
    assert g.haloed_cols == 6
    assert g.haloed_rows == 10
    assert g.width_factor == pytest.approx(1.5)
    assert g.height_factor == pytest.approx(1.25)
    assert g.patch_width == 30
    assert g.patch_height == 50
    # Exact cell grid: enlarged width equals (cols + 2) * cell_size
    assert 4 * 5 * g.width_factor == pytest.approx(g.patch_width)
    assert 8 * 5 * g.height_factor == pytest.approx(g.patch_height)


@pytest.mark.parametrize("cols,rows,cell_size", [(0, 8, 5), (4, 0, 5), (4, 8, 0), (4, 8, -2)])
def test_cell_grid_geometry_invalid_raises(cols, rows, cell_size):
    from ehog.core.errors import ConfigurationError
    from ehog.models.geometry import CellGridGeometry
    with pytest.raises(ConfigurationError, match="Invalid cell grid"):
        CellGridGeometry.create(cols=cols, rows=rows, cell_size=cell_size)


def test_extraction_request_bounds_and_center():
    from ehog.models.geometry import ExtractionRequest
    from ehog.utils.geometry_utils import rect_center
    r = ExtractionRequest(x=-5, y=3, width=10, height=4)
    assert rect_center(r.as_tuple()) == (0.0, 5.0)
    assert r.as_tuple() == (-5, 3, 10, 4)


def test_extraction_request_rejects_empty_size():
    from pydantic import ValidationError
    from ehog.models.geometry import ExtractionRequest
    with pytest.raises(ValidationError):
        ExtractionRequest(x=0, y=0, width=0, height=4)


def test_patch_feature_vector_is_row_major():
    from ehog.models.patch import Patch
    data = np.arange(24, dtype=np.float32).reshape(2, 3, 4)
    p = Patch(x=1, y=2, width=30, height=20, data=data)
    assert p.rows == 2
    assert p.cols == 3
    assert p.descriptor_length == 4
    assert p.bounds == (1, 2, 30, 20)
    np.testing.assert_array_equal(p.feature_vector, np.arange(24, dtype=np.float32))
    # Cell (row=1, col=0) starts after the three cells of row 0
    np.testing.assert_array_equal(p.feature_vector[12:16], data[1, 0])


# ─── Geometry Utilities ──────────────────────────────────────────────────────

def test_enlarge_rect_preserves_center():
    from ehog.utils.geometry_utils import enlarge_rect, rect_center
    rect = (10, 20, 40, 80)
    enlarged = enlarge_rect(rect, 1.5, 1.25)
    assert enlarged == (0, 10, 60, 100)
    assert rect_center(enlarged) == rect_center(rect)


def test_enlarge_rect_grows_symmetrically_for_odd_sizes():
    from ehog.utils.geometry_utils import enlarge_rect
    assert enlarge_rect((0, 0, 3, 3), 5 / 3, 5 / 3) == (-1, -1, 5, 5)


def test_window_around():
    from ehog.utils.geometry_utils import window_around
    assert window_around(15.0, 25.0, 30, 50) == (0, 0, 30, 50)
    assert window_around(-4.0, 0.0, 10, 2) == (-9, -1, 10, 2)


# ─── Image Utilities ─────────────────────────────────────────────────────────

def test_to_gray_converts_bgr_and_bgra():
    from ehog.utils.image_utils import to_gray
    bgr = np.full((4, 6, 3), 90, dtype=np.uint8)
    bgra = np.full((4, 6, 4), 90, dtype=np.uint8)
    assert to_gray(bgr).shape == (4, 6)
    assert to_gray(bgra).shape == (4, 6)
    assert int(to_gray(bgr)[0, 0]) == 90


def test_to_gray_passthrough_for_single_channel():
    from ehog.utils.image_utils import to_gray
    gray = np.zeros((5, 5), dtype=np.uint8)
    assert to_gray(gray) is gray
    assert to_gray(np.zeros((5, 5, 1), dtype=np.uint8)).shape == (5, 5)


def test_has_area():
    from ehog.utils.image_utils import has_area
    assert has_area(np.zeros((3, 4), dtype=np.uint8))
    assert has_area(np.zeros((3, 4, 3), dtype=np.uint8))
    assert not has_area(None)
    assert not has_area(np.zeros((0, 4), dtype=np.uint8))
    assert not has_area(np.zeros((4, 0, 3), dtype=np.uint8))
    assert not has_area(np.zeros(7, dtype=np.uint8))


def test_as_image_array_from_pil():
    from PIL import Image
    from ehog.utils.image_utils import as_image_array
    gray = as_image_array(Image.new("L", (6, 4), 17))
    assert gray.shape == (4, 6)
    assert int(gray[0, 0]) == 17

    # RGB red becomes BGR (0, 0, 255)
    colour = as_image_array(Image.new("RGB", (2, 2), (255, 0, 0)))
    assert colour.shape == (2, 2, 3)
    assert colour[0, 0].tolist() == [0, 0, 255]

    # 32-bit float mode is clipped into 8-bit grayscale
    depth = as_image_array(Image.new("F", (3, 2), 300.0))
    assert depth.dtype == np.uint8
    assert depth.shape == (2, 3)
    assert int(depth[0, 0]) == 255

    assert as_image_array(None) is None


def test_resize_to_exact_size():
    from ehog.utils.image_utils import resize_to
    img = np.full((10, 20), 50, dtype=np.uint8)
    assert resize_to(img, 5, 4).shape == (4, 5)
    assert resize_to(img, 40, 30).shape == (30, 40)
    same = resize_to(img, 20, 10)
    assert same.shape == img.shape
    assert same is not img

