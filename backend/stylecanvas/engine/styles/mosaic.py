"""Mosaic — tiled glass texture."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from stylecanvas.engine import primitives as P
from stylecanvas.engine.registry import style

TILE_SIZE = 12
# Grid lines keep half their brightness
GROUT_DARKEN = 0.5


@style(id="mosaic", name="Mosaic", description="Tiled glass texture", order=2)
def mosaic(arr: NDArray[np.float32], rng: np.random.Generator) -> NDArray[np.float32]:
    h, w = arr.shape[:2]
    small = P.resize_bilinear(arr, h // TILE_SIZE, w // TILE_SIZE)
    pixelated = P.resize_nearest(small, h, w)
    grid = P.tile_mask(h, w, TILE_SIZE)
    return P.clip01(pixelated * (1.0 - grid * GROUT_DARKEN))
