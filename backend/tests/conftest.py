"""Shared test fixtures."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from stylecanvas.engine.buffer import PixelBuffer
from stylecanvas.engine.filter_engine import StyleFilterEngine
from stylecanvas.engine.model_cache import ModelCache

STYLE_IDS = ["watercolor", "udnie", "mosaic", "pointillism", "starry-night", "oil-painting"]


def make_png(width: int, height: int, rgb: tuple[int, int, int] = (200, 120, 40)) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", (width, height), rgb).save(out, format="PNG")
    return out.getvalue()


def make_gradient(width: int, height: int) -> PixelBuffer:
    """Diagonal colour ramp: red follows x, green follows y, blue is their mix."""
    x = np.linspace(0, 255, width)[None, :].repeat(height, axis=0)
    y = np.linspace(0, 255, height)[:, None].repeat(width, axis=1)
    data = np.stack([x, y, (x + y) / 2], axis=2).round().astype(np.uint8)
    return PixelBuffer.from_array(data)


@pytest.fixture
def fast_cache() -> ModelCache:
    return ModelCache(base_delay=0.0, jitter=0.0)


@pytest.fixture
def engine(fast_cache: ModelCache) -> StyleFilterEngine:
    return StyleFilterEngine(cache=fast_cache, seed=1234)


@pytest.fixture
def black_4x4() -> PixelBuffer:
    return PixelBuffer.filled(4, 4)


@pytest.fixture
def red_dot_16() -> PixelBuffer:
    buf = PixelBuffer.filled(16, 16)
    buf.data[0, 0] = (255, 0, 0)
    return buf


@pytest.fixture
def gradient_buffer() -> PixelBuffer:
    return make_gradient(23, 17)


@pytest.fixture
def png_bytes() -> bytes:
    return make_png(40, 30)
