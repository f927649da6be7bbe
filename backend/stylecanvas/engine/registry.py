"""Style catalog. Each style pipeline is a standalone function registered via decorator.

Usage:
    @style(id="mosaic", name="Mosaic", description="Tiled glass texture", order=2)
    def mosaic(arr: NDArray[np.float32], rng: np.random.Generator) -> NDArray[np.float32]:
        ...

Adding a new style = creating one module under ``engine/styles`` with the
decorator. Nothing else changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from stylecanvas.engine.errors import UnsupportedStyle

logger = logging.getLogger(__name__)

StyleFn = Callable[[NDArray[np.float32], np.random.Generator], NDArray[np.float32]]


@dataclass(frozen=True)
class StyleDescriptor:
    id: str
    name: str
    description: str
    fn: StyleFn
    order: int = 0


class StyleCatalog:
    """Registry of style descriptors keyed by id."""

    def __init__(self) -> None:
        self._styles: dict[str, StyleDescriptor] = {}

    def register(self, descriptor: StyleDescriptor) -> None:
        if descriptor.id in self._styles:
            raise ValueError(f"Duplicate style ID: {descriptor.id}")
        self._styles[descriptor.id] = descriptor
        logger.debug("Registered style %s (%s)", descriptor.id, descriptor.name)

    def resolve(self, style_id: str) -> StyleDescriptor:
        try:
            return self._styles[style_id]
        except KeyError:
            raise UnsupportedStyle(style_id) from None

    def list(self) -> list[StyleDescriptor]:
        return sorted(self._styles.values(), key=lambda s: (s.order, s.id))

    def ids(self) -> list[str]:
        return [s.id for s in self.list()]

    def __contains__(self, style_id: object) -> bool:
        return style_id in self._styles

    @property
    def count(self) -> int:
        return len(self._styles)


# Module-level singleton
_catalog = StyleCatalog()
_builtins_loaded = False


def get_catalog() -> StyleCatalog:
    """Return the shared catalog with the builtin styles registered."""
    global _builtins_loaded
    if not _builtins_loaded:
        _builtins_loaded = True
        from stylecanvas.engine.styles import load_builtin_styles

        load_builtin_styles()
    return _catalog


def style(*, id: str, name: str, description: str = "", order: int = 0):
    """Decorator to register a style pipeline."""

    def decorator(fn: StyleFn) -> StyleFn:
        _catalog.register(
            StyleDescriptor(id=id, name=name, description=description, fn=fn, order=order)
        )
        return fn

    return decorator
