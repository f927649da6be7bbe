"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from stylecanvas.api import health, sessions, stylize

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(stylize.router)
api_router.include_router(sessions.router)
