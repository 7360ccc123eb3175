"""Physiological constraint engine.

Direct readings (``health_*`` events) cross-check the behavioural
estimate.  Each reading can generate constraints that floor, cap or
override a primitive score, or lower the confidence in it:

- **Floor / Ceiling** clamp the score and cost 0.2 confidence when they bite.
- **Override** blends 70 % measurement with 30 % prediction (+0.3 confidence).
- **ConfidencePenalty(p)** leaves the score and subtracts ``1 − p``.

Readings are only trusted while fresh; every generator carries its own
age gate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Sequence

import structlog

from neuro_primitives.estimation.decay import hours_between
from neuro_primitives.estimation.impacts import prop_float, prop_str
from neuro_primitives.estimation.models import (
    ConstraintKind,
    MeasurementType,
    PhysiologicalConstraint,
    PhysiologicalConstraintApplied,
    PhysiologicalMeasurement,
)
from neuro_primitives.models import Event, EventType, Primitive

logger = structlog.get_logger(__name__)

MEASUREMENT_WINDOW = timedelta(hours=24)

_MEASUREMENT_TYPES: dict[EventType, MeasurementType] = {
    EventType.HEALTH_HEART_RATE: MeasurementType.HEART_RATE,
    EventType.HEALTH_HRV: MeasurementType.HEART_RATE_VARIABILITY,
    EventType.HEALTH_BLOOD_OXYGEN: MeasurementType.BLOOD_OXYGEN,
    EventType.HEALTH_BLOOD_GLUCOSE: MeasurementType.BLOOD_GLUCOSE,
    EventType.HEALTH_BODY_TEMPERATURE: MeasurementType.BODY_TEMPERATURE,
    EventType.HEALTH_RESPIRATORY_RATE: MeasurementType.RESPIRATORY_RATE,
    EventType.HEALTH_STEPS: MeasurementType.STEPS,
}

_FLOOR_CEILING_CONFIDENCE = -0.2
_OVERRIDE_CONFIDENCE = 0.3
_OVERRIDE_MEASUREMENT_WEIGHT = 0.7
_MIN_CONFIDENCE = 0.1
_RECORD_EPSILON = 0.01


# ── Extraction ────────────────────────────────────────────────


def extract_measurements(events: Sequence[Event], estimation_time: datetime) -> list[PhysiologicalMeasurement]:
    """Readings from the last 24 h that carry a numeric ``value``."""
    cutoff = estimation_time - MEASUREMENT_WINDOW
    measurements: list[PhysiologicalMeasurement] = []
    for event in events:
        if not event.event_type.is_measurement:
            continue
        measurement_type = _MEASUREMENT_TYPES[event.event_type]
        if not cutoff <= event.timestamp <= estimation_time:
            continue
        value = prop_float(event.properties, "value")
        if value is None:
            continue
        measurements.append(
            PhysiologicalMeasurement(
                measurement_type=measurement_type,
                value=value,
                timestamp=event.timestamp,
                unit=prop_str(event.properties, "unit", ""),
            )
        )
    return measurements


# ── Generation ────────────────────────────────────────────────


def _constraint(
    m: PhysiologicalMeasurement, primitive: Primitive, kind: ConstraintKind, value: float, reason: str
) -> PhysiologicalConstraint:
    return PhysiologicalConstraint(
        source_measurement=m.measurement_type,
        source_value=m.value,
        affects_primitive=primitive,
        kind=kind,
        value=value,
        reason=reason,
    )


def _hrv_constraints(m: PhysiologicalMeasurement, hours_ago: float) -> list[PhysiologicalConstraint]:
    if hours_ago > 2.0:
        return []
    rmssd = m.value
    out: list[PhysiologicalConstraint] = []
    if rmssd < 30.0:
        out.append(
            _constraint(
                m, Primitive.CORTISOL, ConstraintKind.FLOOR, 0.6,
                f"Very low HRV ({rmssd:.1f}ms) indicates high stress/cortisol",
            )
        )
        out.append(
            _constraint(
                m, Primitive.ADENOSINE, ConstraintKind.CONFIDENCE_PENALTY, 0.7,
                f"Low HRV ({rmssd:.1f}ms) suggests stress rather than pure sleep debt",
            )
        )
    if rmssd > 70.0:
        out.append(
            _constraint(
                m, Primitive.CORTISOL, ConstraintKind.CEILING, 0.4,
                f"High HRV ({rmssd:.1f}ms) indicates low stress/cortisol",
            )
        )
    return out


def _heart_rate_constraints(m: PhysiologicalMeasurement, hours_ago: float) -> list[PhysiologicalConstraint]:
    if hours_ago > 1.0:
        return []
    hr = m.value
    out: list[PhysiologicalConstraint] = []
    if hr > 80.0:
        out.append(
            _constraint(
                m, Primitive.NOREPINEPHRINE, ConstraintKind.FLOOR, 0.5,
                f"Elevated HR ({hr:.0f} bpm) indicates norepinephrine activity",
            )
        )
        out.append(
            _constraint(
                m, Primitive.ADENOSINE, ConstraintKind.CONFIDENCE_PENALTY, 0.6,
                f"High HR ({hr:.0f} bpm) contradicts high sleep pressure",
            )
        )
    if hr < 55.0:
        out.append(
            _constraint(
                m, Primitive.NOREPINEPHRINE, ConstraintKind.CEILING, 0.4,
                f"Low HR ({hr:.0f} bpm) indicates low arousal/norepinephrine",
            )
        )
    return out


def _blood_oxygen_constraints(m: PhysiologicalMeasurement, hours_ago: float) -> list[PhysiologicalConstraint]:
    if m.value < 92.0 and hours_ago < 8.0:
        return [
            _constraint(
                m, Primitive.DOPAMINE, ConstraintKind.CONFIDENCE_PENALTY, 0.5,
                f"Low SpO2 ({m.value:.1f}%) suggests impaired sleep quality affecting dopamine recovery",
            )
        ]
    return []


def _glucose_constraints(m: PhysiologicalMeasurement, hours_ago: float) -> list[PhysiologicalConstraint]:
    if hours_ago > 2.0:
        return []
    mg_dl = m.value
    if mg_dl < 70.0:
        return [
            _constraint(
                m, Primitive.CORTISOL, ConstraintKind.FLOOR, 0.6,
                f"Hypoglycemia ({mg_dl:.0f} mg/dL) triggers cortisol release",
            ),
            _constraint(
                m, Primitive.GLUCOSE, ConstraintKind.OVERRIDE, 0.2,
                f"Hypoglycemia: direct glucose measurement {mg_dl:.0f} mg/dL (low)",
            ),
        ]
    if mg_dl <= 100.0:
        normalised = 0.5 + max(-0.3, min(0.3, (mg_dl - 85.0) / 30.0))
        return [
            _constraint(
                m, Primitive.GLUCOSE, ConstraintKind.OVERRIDE, normalised,
                f"Direct glucose measurement: {mg_dl:.0f} mg/dL (normal)",
            )
        ]
    if mg_dl > 140.0:
        return [
            _constraint(
                m, Primitive.GLUCOSE, ConstraintKind.OVERRIDE, 0.8,
                f"Direct glucose measurement: {mg_dl:.0f} mg/dL (high)",
            )
        ]
    return []


def _temperature_constraints(m: PhysiologicalMeasurement, hours_ago: float) -> list[PhysiologicalConstraint]:
    if m.value < 36.5 and hours_ago < 4.0:
        return [
            _constraint(
                m, Primitive.CIRCADIAN_PHASE, ConstraintKind.CONFIDENCE_PENALTY, 0.8,
                f"Low body temp ({m.value:.1f}°C) indicates circadian nadir timing",
            )
        ]
    return []


def _respiratory_constraints(m: PhysiologicalMeasurement, hours_ago: float) -> list[PhysiologicalConstraint]:
    if hours_ago > 1.0 or m.value <= 18.0:
        return []
    rr = m.value
    return [
        _constraint(
            m, Primitive.CORTISOL, ConstraintKind.FLOOR, 0.5,
            f"Elevated respiratory rate ({rr:.0f} bpm) indicates stress",
        ),
        _constraint(
            m, Primitive.SEROTONIN, ConstraintKind.CONFIDENCE_PENALTY, 0.7,
            f"High respiratory rate ({rr:.0f} bpm) suggests anxiety/low serotonin",
        ),
    ]


def _steps_constraints(m: PhysiologicalMeasurement, hours_ago: float) -> list[PhysiologicalConstraint]:
    # Only a full day's count is meaningful
    if hours_ago < 12.0 or hours_ago > 30.0:
        return []
    if m.value < 2000.0:
        return [
            _constraint(
                m, Primitive.DOPAMINE, ConstraintKind.CONFIDENCE_PENALTY, 0.6,
                f"Very low activity ({m.value:.0f} steps) contradicts high dopamine predictions",
            )
        ]
    return []


_GENERATORS: dict[MeasurementType, Callable[[PhysiologicalMeasurement, float], list[PhysiologicalConstraint]]] = {
    MeasurementType.HEART_RATE_VARIABILITY: _hrv_constraints,
    MeasurementType.HEART_RATE: _heart_rate_constraints,
    MeasurementType.BLOOD_OXYGEN: _blood_oxygen_constraints,
    MeasurementType.BLOOD_GLUCOSE: _glucose_constraints,
    MeasurementType.BODY_TEMPERATURE: _temperature_constraints,
    MeasurementType.RESPIRATORY_RATE: _respiratory_constraints,
    MeasurementType.STEPS: _steps_constraints,
}


def generate_constraints(
    measurement: PhysiologicalMeasurement, estimation_time: datetime
) -> list[PhysiologicalConstraint]:
    """Constraints implied by one measurement at *estimation_time*."""
    hours_ago = hours_between(estimation_time, measurement.timestamp)
    return _GENERATORS[measurement.measurement_type](measurement, hours_ago)


# ── Application ───────────────────────────────────────────────


@dataclass(frozen=True)
class ValidationOutcome:
    """Scores and confidences after all constraints were applied."""

    scores: dict[Primitive, float]
    confidence: dict[Primitive, float]
    applied: list[PhysiologicalConstraintApplied] = field(default_factory=list)


def _apply_one(constraint: PhysiologicalConstraint, current: float) -> tuple[float, float]:
    """Return ``(new_score, confidence_impact)`` for a single constraint."""
    kind, value = constraint.kind, constraint.value
    if kind is ConstraintKind.FLOOR:
        return (value, _FLOOR_CEILING_CONFIDENCE) if current < value else (current, 0.0)
    if kind is ConstraintKind.CEILING:
        return (value, _FLOOR_CEILING_CONFIDENCE) if current > value else (current, 0.0)
    if kind is ConstraintKind.OVERRIDE:
        blended = _OVERRIDE_MEASUREMENT_WEIGHT * value + (1.0 - _OVERRIDE_MEASUREMENT_WEIGHT) * current
        return blended, _OVERRIDE_CONFIDENCE
    return current, -(1.0 - value)


def apply_constraints(
    scores: dict[Primitive, float],
    constraints: Sequence[PhysiologicalConstraint],
) -> ValidationOutcome:
    """Apply *constraints* sequentially, in order.

    Later constraints see the score left by earlier ones.  Confidence starts
    at 1.0 per primitive and is clamped to ``[0.1, 1.0]`` after each step.
    A record is kept only when a constraint moved the score or the
    confidence by more than 0.01.
    """
    adjusted = dict(scores)
    confidence = {p: 1.0 for p in scores}
    applied: list[PhysiologicalConstraintApplied] = []

    for constraint in constraints:
        primitive = constraint.affects_primitive
        if primitive not in adjusted:
            continue
        original = adjusted[primitive]
        new_score, confidence_impact = _apply_one(constraint, original)
        adjusted[primitive] = new_score
        confidence[primitive] = max(_MIN_CONFIDENCE, min(1.0, confidence[primitive] + confidence_impact))

        if abs(new_score - original) > _RECORD_EPSILON or abs(confidence_impact) > _RECORD_EPSILON:
            applied.append(
                PhysiologicalConstraintApplied(
                    primitive=primitive,
                    constraint_source=constraint.source_measurement,
                    original_score=original,
                    adjusted_score=new_score,
                    confidence_impact=confidence_impact,
                    reason=constraint.reason,
                )
            )

    return ValidationOutcome(adjusted, confidence, applied)


def validate_scores(
    scores: dict[Primitive, float], events: Sequence[Event], estimation_time: datetime
) -> ValidationOutcome:
    """Extract readings, generate their constraints and apply them."""
    measurements = extract_measurements(events, estimation_time)
    if not measurements:
        return ValidationOutcome(dict(scores), {p: 1.0 for p in scores})

    constraints = [c for m in measurements for c in generate_constraints(m, estimation_time)]
    outcome = apply_constraints(scores, constraints)
    if outcome.applied:
        logger.debug(
            "constraints.applied",
            measurements=len(measurements),
            generated=len(constraints),
            applied=len(outcome.applied),
        )
    return outcome
