"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from stylecanvas.engine.session import SessionState


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    styles_registered: int = 0


class StyleResponse(BaseModel):
    id: str
    name: str
    description: str = ""


class SessionResponse(BaseModel):
    id: str
    state: SessionState
    selected_style: str | None = None
    error: str | None = None
    width: int | None = Field(default=None, description="Width of the uploaded image")
    height: int | None = Field(default=None, description="Height of the uploaded image")
    has_result: bool = False
