"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from stylecanvas.config import Settings, settings
from stylecanvas.engine.filter_engine import StyleFilterEngine, create_engine
from stylecanvas.engine.session import SessionStore


def get_settings() -> Settings:
    return settings


@lru_cache
def get_engine() -> StyleFilterEngine:
    return create_engine(settings)


@lru_cache
def get_session_store() -> SessionStore:
    return SessionStore(
        max_sessions=settings.max_sessions,
        ttl_seconds=settings.session_ttl_seconds,
    )
