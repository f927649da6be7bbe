"""Style filter engine: resolves a style, readies its model and runs its pipeline."""

from __future__ import annotations

import asyncio
import logging
import time

import numpy as np
from numpy.typing import NDArray

from stylecanvas.config import Settings
from stylecanvas.engine.buffer import PixelBuffer
from stylecanvas.engine.errors import InvalidInput, PipelineFailure
from stylecanvas.engine.model_cache import ModelCache
from stylecanvas.engine.registry import StyleCatalog, get_catalog

logger = logging.getLogger(__name__)


class StyleFilterEngine:
    """Turns a decoded PixelBuffer plus a style id into a new PixelBuffer."""

    def __init__(
        self,
        catalog: StyleCatalog | None = None,
        cache: ModelCache | None = None,
        seed: int | None = None,
    ) -> None:
        self.catalog = catalog or get_catalog()
        self.cache = cache or ModelCache()
        # Each run draws its noise from its own child generator
        self._seeds = np.random.SeedSequence(seed)

    @classmethod
    def from_settings(cls, settings: Settings) -> StyleFilterEngine:
        cache = ModelCache(
            base_delay=settings.model_load_base_seconds,
            jitter=settings.model_load_jitter_seconds,
        )
        return cls(cache=cache, seed=settings.noise_seed)

    async def run(self, input_buffer: PixelBuffer | None, style_id: str | None) -> PixelBuffer:
        """Run the full style transfer. Either returns a complete new buffer or raises.

        The input buffer is never mutated.
        """
        if input_buffer is None:
            raise InvalidInput("No image to process")
        if not style_id:
            raise InvalidInput("No style selected")

        descriptor = self.catalog.resolve(style_id)
        await self.cache.ensure_ready(style_id)

        input_buffer.validate()
        normalized = input_buffer.normalized()

        start = time.perf_counter()
        loop = asyncio.get_running_loop()
        rng = self._next_rng()
        styled = await loop.run_in_executor(None, self._run_pipeline, descriptor.id, normalized, rng)
        output = PixelBuffer.denormalize(styled)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "Styled %dx%d image with %s in %.0fms",
            output.width,
            output.height,
            descriptor.id,
            elapsed,
        )
        return output

    def apply(self, arr: NDArray[np.float32], style_id: str) -> NDArray[np.float32]:
        """Run one style pipeline on a normalized ``(h, w, 3)`` array, returning [0, 1] samples."""
        return self._run_pipeline(style_id, arr, self._next_rng())

    def _next_rng(self) -> np.random.Generator:
        return np.random.default_rng(self._seeds.spawn(1)[0])

    def _run_pipeline(
        self, style_id: str, arr: NDArray[np.float32], rng: np.random.Generator
    ) -> NDArray[np.float32]:
        descriptor = self.catalog.resolve(style_id)
        try:
            styled = descriptor.fn(arr, rng)
        except (ValueError, IndexError) as e:
            raise PipelineFailure(f"{style_id} pipeline failed: {e}") from e

        if styled.shape != arr.shape:
            raise PipelineFailure(f"{style_id} pipeline changed shape {arr.shape} -> {styled.shape}")
        if not np.all(np.isfinite(styled)):
            raise PipelineFailure(f"{style_id} pipeline produced non-finite samples")
        return styled


def create_engine(settings: Settings | None = None) -> StyleFilterEngine:
    """Factory function for creating an engine instance."""
    if settings is None:
        from stylecanvas.config import settings as default_settings

        settings = default_settings
    return StyleFilterEngine.from_settings(settings)
