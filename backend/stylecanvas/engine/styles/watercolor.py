"""Watercolor — soft, flowing wash effects.

Blur bleeds colours together, quantization flattens them into washes and a
little uniform noise stands in for paper grain.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from stylecanvas.engine import primitives as P
from stylecanvas.engine.registry import style

BLUR_FACTOR = 4
LEVELS = 8
SATURATION = 1.3
PAPER_NOISE = 0.03


@style(id="watercolor", name="Watercolor", description="Soft, flowing wash effects", order=0)
def watercolor(arr: NDArray[np.float32], rng: np.random.Generator) -> NDArray[np.float32]:
    out = P.downsample_upsample_blur(arr, BLUR_FACTOR)
    out = P.quantize(out, LEVELS)
    out = P.adjust_saturation(out, SATURATION)
    out = P.add_uniform_noise(out, -PAPER_NOISE, PAPER_NOISE, rng)
    return P.clip01(out)
