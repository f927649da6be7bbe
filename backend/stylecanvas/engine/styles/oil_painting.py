"""Oil Painting — thick, textured brushstrokes."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from stylecanvas.engine import primitives as P
from stylecanvas.engine.registry import style

POOL_SIZE = 4
SATURATION = 1.5
SHARPEN_BLUR_FACTOR = 2
SHARPEN_AMOUNT = 0.5
CANVAS_NOISE_STDDEV = 0.05


@style(id="oil-painting", name="Oil Painting", description="Thick, textured brushstrokes", order=5)
def oil_painting(arr: NDArray[np.float32], rng: np.random.Generator) -> NDArray[np.float32]:
    # Average pooling flattens local areas into broad strokes
    pooled = P.pool_average(arr, POOL_SIZE)
    impasto = P.adjust_saturation(pooled, SATURATION)

    # Unsharp mask to define stroke edges
    blurred = P.downsample_upsample_blur(impasto, SHARPEN_BLUR_FACTOR)
    sharpened = impasto + (impasto - blurred) * SHARPEN_AMOUNT

    return P.clip01(P.add_gaussian_noise(sharpened, 0.0, CANVAS_NOISE_STDDEV, rng))
