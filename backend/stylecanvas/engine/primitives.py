"""Reusable numeric building blocks for the style pipelines.

Every primitive works on a PixelBuffer's sample array: ``float32`` with shape
``(h, w, 3)``. Masks come back as ``(h, w, 1)`` so they broadcast across the
colour channels. Nothing here clips; pipelines clip once at their boundary so
intermediate stages may leave [0, 1] transiently.

Resizing follows the legacy TensorFlow convention (no corner alignment, no
half-pixel centres): output pixel ``i`` samples source coordinate
``i * in_size / out_size``.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import correlate, uniform_filter

from stylecanvas.engine.errors import PipelineFailure

# ITU-R BT.601 luma weights.
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float32)

# Horizontal Sobel kernel (responds to vertical edges).
SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float32)


def _require_image(arr: NDArray, name: str = "buffer") -> None:
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise PipelineFailure(f"{name} must have shape (h, w, 3), got {arr.shape}")
    if arr.shape[0] < 1 or arr.shape[1] < 1:
        raise PipelineFailure(f"{name} must be non-empty, got {arr.shape}")


def _require_positive(value: float, name: str) -> None:
    if value <= 0:
        raise PipelineFailure(f"{name} must be positive, got {value}")


# ── Resizing ──


def _source_coords(out_size: int, in_size: int) -> tuple[NDArray, NDArray, NDArray]:
    src = np.arange(out_size, dtype=np.float64) * (in_size / out_size)
    lo = np.minimum(np.floor(src).astype(np.int64), in_size - 1)
    hi = np.minimum(lo + 1, in_size - 1)
    frac = (src - lo).astype(np.float32)
    return lo, hi, frac


def resize_bilinear(arr: NDArray, new_h: int, new_w: int) -> NDArray[np.float32]:
    """Bilinear resize to ``(new_h, new_w)``; target sizes are clamped to at least 1."""
    _require_image(arr)
    new_h, new_w = max(1, int(new_h)), max(1, int(new_w))
    h, w = arr.shape[:2]
    y0, y1, fy = _source_coords(new_h, h)
    x0, x1, fx = _source_coords(new_w, w)

    fx = fx[None, :, None]
    top = arr[y0][:, x0] * (1.0 - fx) + arr[y0][:, x1] * fx
    bottom = arr[y1][:, x0] * (1.0 - fx) + arr[y1][:, x1] * fx

    fy = fy[:, None, None]
    return (top * (1.0 - fy) + bottom * fy).astype(np.float32)


def resize_nearest(arr: NDArray, new_h: int, new_w: int) -> NDArray[np.float32]:
    _require_image(arr)
    new_h, new_w = max(1, int(new_h)), max(1, int(new_w))
    h, w = arr.shape[:2]
    yi = np.minimum(np.floor(np.arange(new_h) * (h / new_h)).astype(np.int64), h - 1)
    xi = np.minimum(np.floor(np.arange(new_w) * (w / new_w)).astype(np.int64), w - 1)
    return arr[yi][:, xi].astype(np.float32)


def downsample_upsample_blur(arr: NDArray, factor: int) -> NDArray[np.float32]:
    """Soft blur without a kernel: shrink by ``factor`` then grow back, both bilinear."""
    _require_positive(factor, "factor")
    h, w = arr.shape[:2]
    small = resize_bilinear(arr, h // factor, w // factor)
    return resize_bilinear(small, h, w)


# ── Colour ──


def quantize(arr: NDArray, levels: int) -> NDArray[np.float32]:
    """Reduce each channel to ``levels`` steps: ``round(v * levels) / levels``.

    Rounds half up, so applying it twice gives the same result as once.
    """
    if levels < 1:
        raise PipelineFailure(f"levels must be >= 1, got {levels}")
    return (np.floor(arr * levels + 0.5) / levels).astype(np.float32)


def luminance(arr: NDArray) -> NDArray[np.float32]:
    """Per-pixel luma, shape ``(h, w, 1)``."""
    _require_image(arr)
    return (arr @ LUMA_WEIGHTS)[..., None].astype(np.float32)


def adjust_saturation(arr: NDArray, amount: float) -> NDArray[np.float32]:
    """``gray + (arr - gray) * amount``; amount > 1 boosts, < 1 desaturates."""
    gray = luminance(arr)
    return (gray + (arr - gray) * amount).astype(np.float32)


# ── Masks ──


def sobel_edge_mask(arr: NDArray, threshold: float) -> NDArray[np.float32]:
    """Binary mask of strong horizontal-gradient edges on the luma channel.

    Zero-padded 3×3 cross-correlation, absolute response, ``> threshold``.
    """
    gray = luminance(arr)[..., 0]
    response = correlate(gray, SOBEL_X, mode="constant", cval=0.0)
    return (np.abs(response) > threshold).astype(np.float32)[..., None]


def tile_mask(height: int, width: int, tile_size: int) -> NDArray[np.float32]:
    """1 on rows/columns that are multiples of ``tile_size`` (grid lines), else 0."""
    _require_positive(tile_size, "tile_size")
    y = np.arange(height)[:, None]
    x = np.arange(width)[None, :]
    mask = (y % tile_size == 0) | (x % tile_size == 0)
    return mask.astype(np.float32)[..., None]


def dot_mask(height: int, width: int, dot_size: int) -> NDArray[np.float32]:
    """1 where the squared distance to the centre of the pixel's cell is below ``dot_size``."""
    _require_positive(dot_size, "dot_size")
    y = np.arange(height, dtype=np.float32)[:, None]
    x = np.arange(width, dtype=np.float32)[None, :]
    cy = np.floor(y / dot_size) * dot_size + dot_size / 2
    cx = np.floor(x / dot_size) * dot_size + dot_size / 2
    dist = (y - cy) ** 2 + (x - cx) ** 2
    return (dist < dot_size).astype(np.float32)[..., None]


# ── Pooling ──


def pool_average(arr: NDArray, kernel_size: int) -> NDArray[np.float32]:
    """Stride-1 average pool, "same" output size. Padding is excluded from the mean."""
    _require_image(arr)
    _require_positive(kernel_size, "kernel_size")
    # "same" padding puts the odd extra cell after the centre
    shift = (kernel_size - 1) // 2 - kernel_size // 2
    size, origin = (kernel_size, kernel_size, 1), (shift, shift, 0)
    data = uniform_filter(arr.astype(np.float64), size=size, mode="constant", origin=origin)
    ones = np.ones(arr.shape[:2] + (1,), dtype=np.float64)
    count = uniform_filter(ones, size=size, mode="constant", origin=origin)
    return (data / count).astype(np.float32)


# ── Noise and displacement ──


def add_uniform_noise(arr: NDArray, lo: float, hi: float, rng: np.random.Generator) -> NDArray[np.float32]:
    return (arr + rng.uniform(lo, hi, size=arr.shape)).astype(np.float32)


def add_gaussian_noise(
    arr: NDArray, mean: float, stddev: float, rng: np.random.Generator
) -> NDArray[np.float32]:
    return (arr + rng.normal(mean, stddev, size=arr.shape)).astype(np.float32)


def wave_displace(arr: NDArray, wavelength: float, amplitude: float) -> NDArray[np.float32]:
    """Add ``sin((x + y) / wavelength) * amplitude`` to every channel."""
    _require_image(arr)
    _require_positive(wavelength, "wavelength")
    h, w = arr.shape[:2]
    y = np.arange(h, dtype=np.float32)[:, None]
    x = np.arange(w, dtype=np.float32)[None, :]
    wave = np.sin((x + y) / wavelength) * amplitude
    return (arr + wave[..., None]).astype(np.float32)


def clip01(arr: NDArray) -> NDArray[np.float32]:
    return np.clip(arr, 0.0, 1.0).astype(np.float32)
