"""Tests for the filter primitives."""

from __future__ import annotations

import numpy as np
import pytest

from stylecanvas.engine import primitives as P
from stylecanvas.engine.errors import PipelineFailure


def _random_image(h: int = 12, w: int = 10, seed: int = 0) -> np.ndarray:
    return np.random.default_rng(seed).random((h, w, 3), dtype=np.float32)


class TestResize:
    def test_bilinear_same_size_is_identity(self):
        arr = _random_image()
        np.testing.assert_allclose(P.resize_bilinear(arr, 12, 10), arr, atol=1e-6)

    def test_bilinear_upsample_interpolates(self):
        arr = np.zeros((1, 2, 3), dtype=np.float32)
        arr[0, 1] = 1.0
        out = P.resize_bilinear(arr, 1, 4)
        # src x = 0, 0.5, 1, 1.5 (last clamps to the edge)
        np.testing.assert_allclose(out[0, :, 0], [0.0, 0.5, 1.0, 1.0], atol=1e-6)

    def test_bilinear_clamps_zero_target_to_one(self):
        out = P.resize_bilinear(_random_image(3, 3), 0, 0)
        assert out.shape == (1, 1, 3)

    def test_nearest_upsample_repeats(self):
        arr = np.arange(2 * 2 * 3, dtype=np.float32).reshape(2, 2, 3)
        out = P.resize_nearest(arr, 4, 4)
        assert out.shape == (4, 4, 3)
        np.testing.assert_array_equal(out[0, 0], out[1, 1])
        np.testing.assert_array_equal(out[3, 3], arr[1, 1])

    def test_rejects_non_image(self):
        with pytest.raises(PipelineFailure):
            P.resize_bilinear(np.zeros((4, 4), dtype=np.float32), 2, 2)

    def test_blur_keeps_constant_image(self):
        arr = np.full((16, 12, 3), 0.4, dtype=np.float32)
        np.testing.assert_allclose(P.downsample_upsample_blur(arr, 4), arr, atol=1e-6)

    def test_blur_preserves_shape(self):
        assert P.downsample_upsample_blur(_random_image(7, 5), 4).shape == (7, 5, 3)


class TestQuantize:
    @pytest.mark.parametrize("levels", [1, 2, 5, 8, 16])
    def test_idempotent(self, levels):
        once = P.quantize(_random_image(), levels)
        twice = P.quantize(once, levels)
        np.testing.assert_array_equal(once, twice)

    def test_rounds_to_nearest_step(self):
        arr = np.array([[[0.0, 0.24, 0.26]]], dtype=np.float32)
        np.testing.assert_allclose(P.quantize(arr, 2), [[[0.0, 0.0, 0.5]]])

    def test_levels_below_one_rejected(self):
        with pytest.raises(PipelineFailure):
            P.quantize(_random_image(), 0)


class TestColour:
    def test_luminance_weights(self):
        arr = np.zeros((1, 3, 3), dtype=np.float32)
        arr[0, 0, 0] = arr[0, 1, 1] = arr[0, 2, 2] = 1.0
        lum = P.luminance(arr)
        assert lum.shape == (1, 3, 1)
        np.testing.assert_allclose(lum[0, :, 0], [0.299, 0.587, 0.114], atol=1e-6)

    def test_saturation_identity_at_one(self):
        arr = _random_image()
        np.testing.assert_allclose(P.adjust_saturation(arr, 1.0), arr, atol=1e-6)

    def test_saturation_zero_is_gray(self):
        out = P.adjust_saturation(_random_image(), 0.0)
        np.testing.assert_allclose(out[..., 0], out[..., 1], atol=1e-6)
        np.testing.assert_allclose(out[..., 1], out[..., 2], atol=1e-6)

    def test_saturation_boost_can_leave_range(self):
        arr = np.array([[[1.0, 0.0, 0.0]]], dtype=np.float32)
        out = P.adjust_saturation(arr, 1.5)
        assert out[0, 0, 0] > 1.0
        assert out[0, 0, 1] < 0.0


class TestMasks:
    def test_sobel_marks_vertical_step(self):
        arr = np.zeros((8, 8, 3), dtype=np.float32)
        arr[:, 4:] = 1.0
        mask = P.sobel_edge_mask(arr, 0.2)
        assert mask.shape == (8, 8, 1)
        assert mask[4, 3, 0] == 1.0
        assert mask[4, 4, 0] == 1.0
        assert mask[4, 5, 0] == 0.0
        assert mask[4, 1, 0] == 0.0

    def test_sobel_ignores_horizontal_step(self):
        arr = np.zeros((8, 8, 3), dtype=np.float32)
        arr[4:, :] = 1.0
        mask = P.sobel_edge_mask(arr, 0.2)
        assert mask[3, 3, 0] == 0.0
        assert mask[4, 3, 0] == 0.0

    def test_tile_mask_grid_lines(self):
        mask = P.tile_mask(9, 9, 4)
        assert mask.shape == (9, 9, 1)
        for line in (0, 4, 8):
            assert mask[line, :, 0].all()
            assert mask[:, line, 0].all()
        assert mask[1, 1, 0] == 0.0
        assert mask[5, 6, 0] == 0.0

    def test_dot_mask_cell_centres(self):
        mask = P.dot_mask(16, 16, 8)
        assert mask[4, 4, 0] == 1.0
        assert mask[4, 6, 0] == 1.0  # dist² = 4
        assert mask[4, 7, 0] == 0.0  # dist² = 9
        assert mask[0, 0, 0] == 0.0
        assert mask[12, 12, 0] == 1.0


class TestPooling:
    def test_constant_image_unchanged(self):
        arr = np.full((6, 5, 3), 0.7, dtype=np.float32)
        np.testing.assert_allclose(P.pool_average(arr, 4), arr, atol=1e-6)

    def test_padding_excluded_from_mean(self):
        arr = np.zeros((4, 4, 3), dtype=np.float32)
        arr[0, 0] = 1.0
        out = P.pool_average(arr, 4)
        # Window at the corner covers rows/cols 0..2 -> 9 valid cells
        assert out[0, 0, 0] == pytest.approx(1 / 9)
        # Window at (3, 3) covers rows/cols 2..3 and never reaches the corner
        assert out[3, 3, 0] == 0.0

    def test_shape_preserved(self):
        assert P.pool_average(_random_image(5, 9), 4).shape == (5, 9, 3)

    @pytest.mark.parametrize("kernel", [1, 3, 4])
    def test_matches_clipped_window_mean(self, kernel):
        arr = _random_image(6, 7)
        out = P.pool_average(arr, kernel)
        before = (kernel - 1) // 2
        after = kernel - 1 - before
        for y, x in [(0, 0), (2, 3), (5, 6), (0, 6)]:
            window = arr[max(0, y - before) : y + after + 1, max(0, x - before) : x + after + 1]
            np.testing.assert_allclose(out[y, x], window.mean(axis=(0, 1)), rtol=1e-5)


class TestNoiseAndWave:
    def test_uniform_noise_bounds(self):
        arr = np.full((20, 20, 3), 0.5, dtype=np.float32)
        out = P.add_uniform_noise(arr, -0.03, 0.03, np.random.default_rng(1))
        assert out.min() >= 0.47 - 1e-6
        assert out.max() <= 0.53 + 1e-6
        assert not np.allclose(out[..., 0], out[..., 1])

    def test_gaussian_noise_statistics(self):
        arr = np.zeros((64, 64, 3), dtype=np.float32)
        out = P.add_gaussian_noise(arr, 0.0, 0.05, np.random.default_rng(2))
        assert abs(float(out.mean())) < 0.005
        assert float(out.std()) == pytest.approx(0.05, rel=0.1)

    def test_seeded_noise_is_reproducible(self):
        arr = _random_image()
        a = P.add_uniform_noise(arr, -0.1, 0.1, np.random.default_rng(7))
        b = P.add_uniform_noise(arr, -0.1, 0.1, np.random.default_rng(7))
        np.testing.assert_array_equal(a, b)

    def test_wave_matches_formula(self):
        arr = np.zeros((5, 7, 3), dtype=np.float32)
        out = P.wave_displace(arr, 15.0, 0.1)
        assert out[0, 0, 0] == 0.0
        assert out[2, 3, 1] == pytest.approx(np.sin(5 / 15.0) * 0.1, abs=1e-6)
        np.testing.assert_array_equal(out[..., 0], out[..., 2])

    def test_clip01(self):
        arr = np.array([[[-0.5, 0.5, 1.5]]], dtype=np.float32)
        np.testing.assert_array_equal(P.clip01(arr), [[[0.0, 0.5, 1.0]]])
