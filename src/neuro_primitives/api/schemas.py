"""Request / response models for the HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from neuro_primitives.estimation.models import EstimationResult
from neuro_primitives.models import Event


class EstimateRequest(BaseModel):
    """Timeline estimate for one demo profile."""
    profile_id: str = "healthy"
    resolution_hours: int = Field(1, gt=0)
    timezone_offset_minutes: int = 0


class TimelinePointOut(BaseModel):
    timestamp: datetime
    primitives: dict[str, float]


class EstimateResponse(BaseModel):
    timeline: list[TimelinePointOut]
    final_state: EstimationResult


class EventsEstimateRequest(BaseModel):
    """Single estimate for a caller-supplied event log."""
    events: list[Event] = Field(default_factory=list)
    timestamp: datetime | None = None  # defaults to now
