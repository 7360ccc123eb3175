"""Shared Pydantic models used across the framework."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# ── Enums ─────────────────────────────────────────────────────


class EventType(str, Enum):
    """Categories of life events accepted by the estimator.

    The ``health_*`` categories carry a direct physiological reading in the
    ``value`` property (plus an optional ``unit``).
    """

    SLEEP = "sleep"
    WAKE = "wake"
    NAP = "nap"
    MEAL = "meal"
    CAFFEINE = "caffeine"
    EXERCISE = "exercise"
    LIGHT_EXPOSURE = "light_exposure"
    STRESS_EVENT = "stress_event"
    SOCIAL_INTERACTION = "social_interaction"
    SCREEN_TIME = "screen_time"
    INTERRUPTION = "interruption"
    HEALTH_HEART_RATE = "health_heart_rate"
    HEALTH_HRV = "health_hrv"
    HEALTH_BLOOD_OXYGEN = "health_blood_oxygen"
    HEALTH_BLOOD_GLUCOSE = "health_blood_glucose"
    HEALTH_BODY_TEMPERATURE = "health_body_temperature"
    HEALTH_RESPIRATORY_RATE = "health_respiratory_rate"
    HEALTH_STEPS = "health_steps"

    @property
    def is_measurement(self) -> bool:
        return self.value.startswith("health_")


class Primitive(str, Enum):
    """The closed set of neurobiological primitives tracked by the model.

    Declaration order is the canonical iteration / display order.
    """

    DOPAMINE = "dopamine"
    NOREPINEPHRINE = "norepinephrine"
    SEROTONIN = "serotonin"
    ADENOSINE = "adenosine"
    CIRCADIAN_PHASE = "circadian_phase"
    CORTISOL = "cortisol"
    GLUCOSE = "glucose"


# ── Helpers ───────────────────────────────────────────────────


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ── Data transfer objects ─────────────────────────────────────


class Event(BaseModel):
    """A single entry of a subject's life-event log.

    Events are owned by the caller; the estimator only reads them.
    """

    event_id: str
    event_type: EventType
    timestamp: datetime
    end_timestamp: datetime | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @field_validator("timestamp", "end_timestamp")
    @classmethod
    def _normalise_tz(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class EventData(BaseModel):
    """An event log for one subject — the on-disk JSON format."""

    user_id: str
    events: list[Event] = Field(default_factory=list)
