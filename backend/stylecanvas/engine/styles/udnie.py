"""Udnie (Cubism) — bold geometric abstraction.

Posterized colours smeared along the horizontal axis, with dark outlines
wherever the luma gradient is strong.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from stylecanvas.engine import primitives as P
from stylecanvas.engine.registry import style

EDGE_THRESHOLD = 0.2
LEVELS = 5


@style(id="udnie", name="Udnie (Cubism)", description="Bold geometric abstraction", order=1)
def udnie(arr: NDArray[np.float32], rng: np.random.Generator) -> NDArray[np.float32]:
    h, w = arr.shape[:2]
    edges = P.sobel_edge_mask(arr, EDGE_THRESHOLD)
    posterized = P.quantize(arr, LEVELS)
    # Angular smear: halve the width only, then restore
    angular = P.resize_bilinear(posterized, h, w // 2)
    restored = P.resize_bilinear(angular, h, w)
    return P.clip01(restored * (1.0 - edges))
