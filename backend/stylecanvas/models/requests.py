"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SelectStyleRequest(BaseModel):
    style_id: str = Field(..., min_length=1, description="Style identifier, e.g. 'watercolor'")
