"""Shared schemas used across the API."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    environment: str
    tiers_loaded: int = 0
