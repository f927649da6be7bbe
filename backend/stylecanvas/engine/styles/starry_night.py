"""Starry Night — swirling flow patterns in a blue/yellow palette.

Dark regions lean towards a deep blue recolour, bright regions towards a
luma-driven yellow; a diagonal sine ripple supplies the swirl.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from stylecanvas.engine import primitives as P
from stylecanvas.engine.registry import style

WAVELENGTH = 15.0
AMPLITUDE = 0.1


@style(id="starry-night", name="Starry Night", description="Swirling flow patterns", order=4)
def starry_night(arr: NDArray[np.float32], rng: np.random.Generator) -> NDArray[np.float32]:
    r, g, b = arr[..., 0:1], arr[..., 1:2], arr[..., 2:3]
    lum = P.luminance(arr)

    blue = np.concatenate([r * 0.2, g * 0.5, np.clip(b * 1.5, 0.0, 1.0)], axis=2)
    yellow = np.concatenate([lum, lum, lum * 0.2], axis=2)
    mixed = blue * (1.0 - lum) + yellow * lum

    return P.clip01(P.wave_displace(mixed, WAVELENGTH, AMPLITUDE))
