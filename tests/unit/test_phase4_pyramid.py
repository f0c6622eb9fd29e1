# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Phase 4 — Image pyramid tests.
Covers layer construction, scale factor ranges, filter lists,
closest-layer lookup (including tie-break) and copy independence.
"""

import copy
import math

import numpy as np
import pytest


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _make_gray(h: int, w: int, value: int = 77) -> np.ndarray:
    return np.full((h, w), value, dtype=np.uint8)


def _make_pyramid(min_scale=1.0, max_scale=4.0, octave_layer_count=5, **kwargs):
    from ehog.modules.pyramid import ImagePyramid
    return ImagePyramid(min_scale, max_scale, octave_layer_count, **kwargs)


# ─── Construction ────────────────────────────────────────────────────────────

def test_pyramid_invalid_scale_range_raises():
    from ehog.core.errors import ConfigurationError
    with pytest.raises(ConfigurationError, match="must not exceed"):
        _make_pyramid(2.0, 1.0)
    with pytest.raises(ConfigurationError, match="min_scale_factor"):
        _make_pyramid(0.0, 1.0)
    with pytest.raises(ConfigurationError, match="octave_layer_count"):
        _make_pyramid(1.0, 2.0, 0)


def test_pyramid_starts_empty():
    pyramid = _make_pyramid()
    assert pyramid.is_empty
    assert pyramid.layers == []
    assert pyramid.image_size is None
    assert pyramid.get_layer(1.0) is None


# ─── Update ──────────────────────────────────────────────────────────────────

def test_pyramid_layers_cover_scale_range():
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(_make_gray(100, 200))
    factors = pyramid.scale_factors
    assert len(factors) == 11
    np.testing.assert_allclose(factors, [2 ** (k / 5) for k in range(11)])
    assert pyramid.image_size == (200, 100)


def test_pyramid_layer_sizes():
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(_make_gray(100, 200))
    layers = pyramid.layers
    assert layers[0].size == (200, 100)
    assert layers[5].size == (100, 50)
    assert layers[10].size == (50, 25)
    assert [layer.index for layer in layers] == list(range(11))


def test_pyramid_upsampled_layers():
    pyramid = _make_pyramid(0.5, 1.0, 2)
    pyramid.update(_make_gray(10, 20))
    np.testing.assert_allclose(pyramid.scale_factors, [0.5, 2 ** -0.5, 1.0])
    assert pyramid.layers[0].size == (40, 20)


def test_pyramid_downscaled_layers_never_derive_from_upsampled_ones():
    from ehog.utils.image_utils import resize_to
    rng = np.random.default_rng(9)
    img = rng.integers(0, 256, size=(97, 131), dtype=np.uint8)
    pyramid = _make_pyramid(0.5, 2.0, 5)
    pyramid.update(img)
    downscaled = [layer for layer in pyramid.layers if layer.scale_factor > 1.0]
    assert len(downscaled) == 5
    # Between 1x and 2x the octave finer layer is upsampled; resize the source
    for layer in downscaled:
        np.testing.assert_array_equal(
            layer.image, resize_to(img, layer.width, layer.height)
        )


def test_pyramid_octave_layers_derive_from_downscaled_parent():
    from ehog.utils.image_utils import resize_to
    rng = np.random.default_rng(9)
    img = rng.integers(0, 256, size=(97, 131), dtype=np.uint8)
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(img)
    parent = pyramid.layers[5]
    child = pyramid.layers[10]
    np.testing.assert_array_equal(
        child.image, resize_to(parent.image, child.width, child.height)
    )


def test_pyramid_stops_before_empty_layers():
    pyramid = _make_pyramid(1.0, 64.0, 1)
    pyramid.update(_make_gray(4, 4))
    # 8x would produce a layer narrower than one pixel
    np.testing.assert_allclose(pyramid.scale_factors, [1.0, 2.0, 4.0])


def test_pyramid_layers_are_read_only():
    pyramid = _make_pyramid()
    pyramid.update(_make_gray(40, 40))
    assert not pyramid.layers[0].image.flags.writeable


def test_pyramid_does_not_modify_caller_image():
    pyramid = _make_pyramid()
    img = _make_gray(40, 40)
    pyramid.update(img)
    assert img.flags.writeable


def test_pyramid_constant_image_stays_constant():
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(_make_gray(64, 96, value=77))
    for layer in pyramid.layers:
        assert np.all(layer.image == 77)


def test_pyramid_update_replaces_layers():
    pyramid = _make_pyramid()
    pyramid.update(_make_gray(40, 40, value=10))
    pyramid.update(_make_gray(80, 60, value=20))
    assert pyramid.image_size == (60, 80)
    assert np.all(pyramid.layers[0].image == 20)


@pytest.mark.parametrize(
    "image",
    [None, np.zeros((0, 10), dtype=np.uint8), np.zeros((10, 0, 3), dtype=np.uint8)],
)
def test_pyramid_update_empty_raises(image):
    from ehog.core.errors import ConfigurationError, EmptyInputError
    pyramid = _make_pyramid()
    with pytest.raises(EmptyInputError, match="empty"):
        pyramid.update(image)
    # EmptyInputError is also a configuration error
    with pytest.raises(ConfigurationError):
        pyramid.update(image)


@pytest.mark.parametrize(
    "image",
    [
        np.full((20, 30, 3), 0.5, dtype=np.float64),
        np.full((20, 30), 0.5, dtype=np.float32),
        np.full((20, 30), 1000, dtype=np.uint16),
        np.ones((20, 30), dtype=bool),
    ],
)
def test_pyramid_update_rejects_non_uint8(image):
    from ehog.core.errors import ConfigurationError, EmptyInputError
    pyramid = _make_pyramid()
    with pytest.raises(ConfigurationError, match="8-bit") as exc_info:
        pyramid.update(image)
    assert not isinstance(exc_info.value, EmptyInputError)
    assert pyramid.is_empty


def test_pyramid_accepts_pil_image():
    from PIL import Image
    pyramid = _make_pyramid()
    pyramid.update(Image.new("L", (30, 20), 5))
    assert pyramid.image_size == (30, 20)


# ─── Filters ─────────────────────────────────────────────────────────────────

def test_pyramid_image_filters_run_before_scaling():
    from ehog.modules.filters import GrayscaleFilter
    pyramid = _make_pyramid(image_filters=[GrayscaleFilter()])
    pyramid.update(np.full((40, 60, 3), 90, dtype=np.uint8))
    for layer in pyramid.layers:
        assert layer.image.ndim == 2


def test_pyramid_layer_filters_produce_bin_data():
    from ehog.modules.filters import GradientBinningFilter, GradientFilter, GrayscaleFilter
    pyramid = _make_pyramid(
        image_filters=[GrayscaleFilter()],
        layer_filters=[GradientFilter(), GradientBinningFilter(18, interpolate=True)],
    )
    pyramid.update(np.zeros((40, 60, 3), dtype=np.uint8))
    for layer in pyramid.layers:
        assert layer.image.ndim == 3
        assert layer.image.shape[2] == 4
        assert layer.image.dtype == np.uint8


# ─── Lookup ──────────────────────────────────────────────────────────────────

def test_get_layer_exact_and_near():
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(_make_gray(100, 200))
    assert pyramid.get_layer(2.0).index == 5
    assert pyramid.get_layer(2.05).index == 5
    assert pyramid.get_layer(1.0).index == 0
    assert pyramid.get_layer(4.2).index == 10


def test_get_layer_tie_prefers_coarser_layer():
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(_make_gray(100, 200))
    # Geometric midpoint between layer 5 (2.0) and layer 6 (2 ** 1.2)
    midpoint = 2 ** 1.1
    assert pyramid.get_layer(midpoint).index == 6


def test_get_layer_out_of_range_returns_none():
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(_make_gray(100, 200))
    assert pyramid.get_layer(5.0) is None
    assert pyramid.get_layer(0.8) is None
    assert pyramid.get_layer(0.0) is None
    assert pyramid.get_layer(-1.0) is None


def test_closest_layer_for_width():
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(_make_gray(100, 200))
    assert pyramid.closest_layer_for(60, 30) is pyramid.get_layer(2.0)
    assert pyramid.closest_layer_for(60, 0) is None


def test_require_layer_raises_no_scale_available():
    from ehog.core.errors import NoScaleAvailable
    pyramid = _make_pyramid(1.0, 4.0, 5)
    with pytest.raises(NoScaleAvailable, match="empty"):
        pyramid.require_layer(1.0)
    pyramid.update(_make_gray(100, 200))
    assert pyramid.require_layer(1.0).index == 0
    with pytest.raises(NoScaleAvailable, match="available range"):
        pyramid.require_layer(50.0)


def test_layer_to_layer_coordinates():
    pyramid = _make_pyramid(1.0, 4.0, 5)
    pyramid.update(_make_gray(100, 200))
    layer = pyramid.get_layer(2.0)
    assert math.isclose(layer.scale_factor, 2.0)
    assert layer.to_layer(100) == pytest.approx(50.0)
    assert layer.to_layer(-30) == pytest.approx(-15.0)
    assert layer.to_layer(31) == pytest.approx(15.5)


# ─── Copy ────────────────────────────────────────────────────────────────────

def test_pyramid_copy_is_independent():
    pyramid = _make_pyramid()
    pyramid.update(_make_gray(40, 40, value=10))
    clone = copy.copy(pyramid)
    assert clone.scale_factors == pyramid.scale_factors

    pyramid.update(_make_gray(80, 60, value=20))
    assert clone.image_size == (40, 40)
    assert np.all(clone.layers[0].image == 10)
    assert pyramid.image_size == (60, 80)


def test_pyramid_copy_shares_filters_not_lists():
    from ehog.modules.filters import GrayscaleFilter
    gray = GrayscaleFilter()
    pyramid = _make_pyramid(image_filters=[gray])
    clone = copy.copy(pyramid)
    assert clone.image_filters[0] is gray
    assert clone.image_filters is not pyramid.image_filters
