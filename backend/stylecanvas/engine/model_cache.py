"""ModelCache — per-style model readiness with simulated acquisition latency.

The first ``ensure_ready`` for a style id pays a load delay of
``base + U(0, 1) * jitter`` seconds and stores a ModelHandle; later calls
return the stored handle immediately. Concurrent callers for the same
unready id share a single acquisition task, so at most one handle is ever
inserted per id.

A real model backend can replace ``_acquire`` without changing the contract.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from stylecanvas.engine.errors import AcquisitionFailure

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class ModelHandle:
    style_id: str
    ready_since: float


class ModelCache:
    def __init__(
        self,
        base_delay: float = 1.5,
        jitter: float = 1.0,
        sleep: SleepFn | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.base_delay = base_delay
        self.jitter = jitter
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()
        self._handles: dict[str, ModelHandle] = {}
        self._inflight: dict[str, asyncio.Task[ModelHandle]] = {}

    async def ensure_ready(self, style_id: str) -> ModelHandle:
        handle = self._handles.get(style_id)
        if handle is not None:
            return handle

        task = self._inflight.get(style_id)
        if task is None or task.done():
            task = asyncio.ensure_future(self._acquire(style_id))
            self._inflight[style_id] = task
            task.add_done_callback(lambda t, sid=style_id: self._forget(sid, t))

        # A waiter giving up must not abort the shared acquisition
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                raise AcquisitionFailure(f"Model acquisition for {style_id!r} was cancelled") from None
            raise

    def cancel(self, style_id: str) -> bool:
        """Cancel an in-flight acquisition. Returns False if none was running."""
        task = self._inflight.get(style_id)
        if task is None or task.done():
            return False
        logger.info("Cancelling model acquisition for %s", style_id)
        return task.cancel()

    def is_ready(self, style_id: str) -> bool:
        return style_id in self._handles

    def get(self, style_id: str) -> ModelHandle | None:
        return self._handles.get(style_id)

    def loaded_ids(self) -> list[str]:
        return sorted(self._handles)

    def _forget(self, style_id: str, task: asyncio.Task[ModelHandle]) -> None:
        if self._inflight.get(style_id) is task:
            del self._inflight[style_id]

    async def _acquire(self, style_id: str) -> ModelHandle:
        delay = self.base_delay + self._rng.random() * self.jitter
        logger.info("Loading model for %s (%.2fs)...", style_id, delay)
        await self._sleep(delay)

        handle = ModelHandle(style_id=style_id, ready_since=time.time())
        self._handles[style_id] = handle
        logger.info("Model for %s ready", style_id)
        return handle
