"""Pydantic models for the estimation subsystem.

These models represent:
- Per-primitive state with explainability (contributing events)
- Detected multi-event sequences
- Physiological measurements and the constraints derived from them
- The functional-state interpretation
- The complete estimation result returned to the API / CLI layers
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from neuro_primitives.models import Primitive


# ── Enums ─────────────────────────────────────────────────────


class MeasurementType(str, Enum):
    """Direct physiological readings understood by the constraint engine.

    Values double as the ``constraint_source`` label in applied-constraint
    records.
    """

    HEART_RATE = "HeartRate"
    HEART_RATE_VARIABILITY = "HeartRateVariability"
    BLOOD_OXYGEN = "BloodOxygen"
    BLOOD_GLUCOSE = "BloodGlucose"
    BODY_TEMPERATURE = "BodyTemperature"
    RESPIRATORY_RATE = "RespiratoryRate"
    STEPS = "Steps"


class ConstraintKind(str, Enum):
    """How a physiological constraint acts on a primitive score."""

    FLOOR = "floor"  # raise to at least ``value``
    CEILING = "ceiling"  # lower to at most ``value``
    OVERRIDE = "override"  # blend towards ``value``
    CONFIDENCE_PENALTY = "confidence_penalty"  # subtract ``1 - value`` from confidence


class FunctionalStateType(str, Enum):
    """Qualitative motivation / mood classification."""

    OPTIMAL = "Optimal"
    DRIVEN_BUT_ANXIOUS = "Driven but Anxious"
    CONTENT_BUT_UNMOTIVATED = "Content but Unmotivated"
    DEPLETED = "Depleted"


# ── Explainability ───────────────────────────────────────────


class EventContribution(BaseModel):
    """How much a single event moved a primitive score."""

    event_id: str
    event_type: str
    impact: float = Field(description="Raw impact before temporal decay.")
    decayed_impact: float = Field(description="Impact after temporal decay.")
    hours_ago: float


class DetectedSequence(BaseModel):
    """A recognised multi-event pattern and the adjustment it applies."""

    pattern_name: str
    events: list[str] = Field(default_factory=list)
    impact_on_primitive: Primitive
    adjustment: float


# ── Physiological validation ─────────────────────────────────


class PhysiologicalMeasurement(BaseModel):
    """A direct reading extracted from a ``health_*`` event."""

    measurement_type: MeasurementType
    value: float
    timestamp: datetime
    unit: str = ""


class PhysiologicalConstraint(BaseModel):
    """A constraint generated from one measurement for one primitive.

    Constraints are ephemeral: they are regenerated on every estimation.
    """

    source_measurement: MeasurementType
    source_value: float
    affects_primitive: Primitive
    kind: ConstraintKind
    value: float
    reason: str


class PhysiologicalConstraintApplied(BaseModel):
    """Record of a constraint that changed a score or its confidence."""

    primitive: Primitive
    constraint_source: MeasurementType
    original_score: float
    adjusted_score: float
    confidence_impact: float
    reason: str


# ── Primitive state & result ─────────────────────────────────


class PrimitiveState(BaseModel):
    """Final state of one primitive.

    ``acute_score``, ``chronic_score`` and ``effective_score`` are only
    populated for dopamine and serotonin.
    """

    base_score: float = Field(ge=0.0, le=1.0)
    modified_score: float = Field(ge=0.0, le=1.0)
    confidence: float = Field(1.0, ge=0.1, le=1.0)
    contributors: list[EventContribution] = Field(default_factory=list)
    acute_score: float | None = None
    chronic_score: float | None = None
    effective_score: float | None = None


class FunctionalState(BaseModel):
    """Interpretation of the effective dopamine / serotonin balance."""

    state_type: FunctionalStateType
    description: str
    recommendations: list[str] = Field(default_factory=list)


class EstimationResult(BaseModel):
    """Complete output of one estimation call.

    Entirely derived from ``(events, timestamp)``; it has no identity or
    lifecycle beyond the call that produced it.
    """

    timestamp: datetime
    primitives: dict[str, PrimitiveState] = Field(default_factory=dict)
    detected_sequences: list[DetectedSequence] = Field(default_factory=list)
    sleep_drive: float = Field(ge=0.0, le=1.0)
    dopamine_serotonin_ratio: float
    functional_state: FunctionalState
    physiological_constraints: list[PhysiologicalConstraintApplied] = Field(default_factory=list)

    def score(self, primitive: Primitive) -> float:
        """Shortcut for the final (modified) score of *primitive*."""
        return self.primitives[primitive.value].modified_score
