"""Health check + style listing endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from stylecanvas import __version__
from stylecanvas.dependencies import get_engine
from stylecanvas.engine.filter_engine import StyleFilterEngine
from stylecanvas.models.responses import HealthResponse, StyleResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(engine: StyleFilterEngine = Depends(get_engine)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        styles_registered=engine.catalog.count,
    )


@router.get("/styles", response_model=list[StyleResponse])
async def styles(engine: StyleFilterEngine = Depends(get_engine)) -> list[StyleResponse]:
    return [
        StyleResponse(id=s.id, name=s.name, description=s.description)
        for s in engine.catalog.list()
    ]
