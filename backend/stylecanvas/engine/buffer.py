"""PixelBuffer: the raster image flowing in and out of the engine.

Samples live in a ``(height, width, 3)`` numpy array:
- ingress/egress: ``uint8`` in [0, 255]
- between pipeline stages: ``float32`` nominally in [0, 1]
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from stylecanvas.engine.errors import PipelineFailure

CHANNELS = 3


@dataclass
class PixelBuffer:
    width: int
    height: int
    data: NDArray

    def __post_init__(self) -> None:
        self.validate()

    @property
    def channels(self) -> int:
        return CHANNELS

    @property
    def is_normalized(self) -> bool:
        return bool(np.issubdtype(self.data.dtype, np.floating))

    @classmethod
    def from_array(cls, arr: NDArray) -> PixelBuffer:
        """Wrap an ``(h, w, 3)`` array, taking height and width from its shape."""
        arr = np.asarray(arr)
        if arr.ndim != 3:
            raise PipelineFailure(f"Expected an (h, w, 3) array, got shape {arr.shape}")
        return cls(width=int(arr.shape[1]), height=int(arr.shape[0]), data=arr)

    @classmethod
    def filled(cls, width: int, height: int, rgb: tuple[int, int, int] = (0, 0, 0)) -> PixelBuffer:
        data = np.empty((height, width, CHANNELS), dtype=np.uint8)
        data[...] = np.asarray(rgb, dtype=np.uint8)
        return cls(width=width, height=height, data=data)

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise PipelineFailure(f"Buffer dimensions must be positive, got {self.width}x{self.height}")
        expected = self.width * self.height * CHANNELS
        if self.data.size != expected:
            raise PipelineFailure(
                f"Buffer holds {self.data.size} samples, expected {expected} "
                f"for {self.width}x{self.height}x{CHANNELS}"
            )
        if self.data.shape != (self.height, self.width, CHANNELS):
            raise PipelineFailure(
                f"Buffer shape {self.data.shape} does not match "
                f"({self.height}, {self.width}, {CHANNELS})"
            )

    def normalized(self) -> NDArray[np.float32]:
        """Fresh ``float32`` copy in [0, 1]. Integer data is scaled by 1/255."""
        if self.is_normalized:
            return self.data.astype(np.float32, copy=True)
        return self.data.astype(np.float32) / 255.0

    @classmethod
    def denormalize(cls, arr: NDArray) -> PixelBuffer:
        """Scale [0, 1] samples to [0, 255], round to nearest and clip to ``uint8``."""
        out = np.clip(np.floor(arr * 255.0 + 0.5), 0, 255).astype(np.uint8)
        return cls.from_array(out)

    def copy(self) -> PixelBuffer:
        return PixelBuffer(width=self.width, height=self.height, data=self.data.copy())
