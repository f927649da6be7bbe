"""Builtin style pipelines. Each module registers itself with ``@style``."""

from __future__ import annotations

import importlib
import pkgutil


def load_builtin_styles() -> None:
    """Import every module in this package so the ``@style`` decorators fire."""
    for _, module_name, _ in pkgutil.iter_modules(__path__):
        importlib.import_module(f"{__name__}.{module_name}")
