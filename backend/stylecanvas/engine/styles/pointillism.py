"""Pointillism — dotted colour distribution.

Cell-averaged colours are painted as round dots on an off-white canvas; each
dot gets a small random brightness jitter.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from stylecanvas.engine import primitives as P
from stylecanvas.engine.registry import style

DOT_SIZE = 8
CANVAS_RGB = (0.96, 0.96, 0.94)
JITTER_LO = 0.9
JITTER_HI = 1.1


@style(id="pointillism", name="Pointillism", description="Dotted color distribution", order=3)
def pointillism(arr: NDArray[np.float32], rng: np.random.Generator) -> NDArray[np.float32]:
    h, w = arr.shape[:2]
    small = P.resize_bilinear(arr, h // DOT_SIZE, w // DOT_SIZE)
    colors = P.resize_bilinear(small, h, w)

    dots = P.dot_mask(h, w, DOT_SIZE)
    jitter = rng.uniform(JITTER_LO, JITTER_HI, size=(h, w, 1)).astype(np.float32)
    canvas = np.asarray(CANVAS_RGB, dtype=np.float32)

    painted = colors * jitter * dots
    return P.clip01(painted + canvas * (1.0 - dots))
