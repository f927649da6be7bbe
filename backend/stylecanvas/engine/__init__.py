"""StyleCanvas style filter engine."""

from stylecanvas.engine.buffer import PixelBuffer
from stylecanvas.engine.filter_engine import StyleFilterEngine, create_engine
from stylecanvas.engine.model_cache import ModelCache, ModelHandle
from stylecanvas.engine.registry import StyleCatalog, StyleDescriptor, get_catalog, style
from stylecanvas.engine.session import Session, SessionState, SessionStateMachine, SessionStore

__all__ = [
    "PixelBuffer",
    "StyleFilterEngine",
    "create_engine",
    "ModelCache",
    "ModelHandle",
    "StyleCatalog",
    "StyleDescriptor",
    "get_catalog",
    "style",
    "Session",
    "SessionState",
    "SessionStateMachine",
    "SessionStore",
]
