"""Estimation orchestrator — runs the staged primitive pipeline.

Each stage consumes the frozen value produced by the previous one, so the
pass order is fixed by the types:

1. :class:`BaseScores` — adenosine, circadian phase, the monoamines, the
   remaining primitives and sleep drive
2. :class:`AdjustedScores` — sequence-pattern adjustments
3. :class:`ModulatedScores` — cross-primitive suppression and the
   effective dopamine / serotonin pair
4. :class:`ValidatedScores` — physiological constraints and confidences

The result is assembled from the last stage together with the ratio and the
functional-state classification.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, NamedTuple, Sequence

import structlog

from neuro_primitives.estimation.constraints import ValidationOutcome, validate_scores
from neuro_primitives.estimation.interactions import (
    EffectiveMonoamines,
    apply_cross_primitive_modifiers,
    effective_monoamines,
)
from neuro_primitives.estimation.models import (
    DetectedSequence,
    EstimationResult,
    EventContribution,
    PrimitiveState,
)
from neuro_primitives.estimation.scoring import (
    MonoamineScore,
    PrimitiveScore,
    compute_adenosine_score,
    compute_circadian_score,
    compute_cortisol_score,
    compute_generic_score,
    compute_monoamine_score,
)
from neuro_primitives.estimation.sequences import SequenceDetector, apply_sequence_adjustments
from neuro_primitives.estimation.state import (
    classify_functional_state,
    compute_sleep_drive,
    dopamine_serotonin_ratio,
)
from neuro_primitives.models import Event, Primitive, ensure_utc

logger = structlog.get_logger(__name__)

_MONOAMINES = (Primitive.DOPAMINE, Primitive.SEROTONIN)


# ── Stage values ──────────────────────────────────────────────


@dataclass(frozen=True)
class BaseScores:
    scores: dict[Primitive, float]
    contributors: dict[Primitive, tuple[EventContribution, ...]]
    monoamines: dict[Primitive, MonoamineScore]
    sleep_drive: float

    @property
    def adenosine(self) -> float:
        return self.scores[Primitive.ADENOSINE]


@dataclass(frozen=True)
class AdjustedScores:
    base: BaseScores
    sequences: tuple[DetectedSequence, ...]
    scores: dict[Primitive, float]


@dataclass(frozen=True)
class ModulatedScores:
    adjusted: AdjustedScores
    scores: dict[Primitive, float]
    effective: EffectiveMonoamines


@dataclass(frozen=True)
class ValidatedScores:
    modulated: ModulatedScores
    outcome: ValidationOutcome

    @property
    def base(self) -> BaseScores:
        return self.modulated.adjusted.base


# ── Stages ────────────────────────────────────────────────────


def compute_base_scores(events: Sequence[Event], estimation_time: datetime) -> BaseScores:
    """Stage 1: behavioural base score for every primitive."""
    results: dict[Primitive, PrimitiveScore] = {}

    adenosine = compute_adenosine_score(events, estimation_time)
    results[Primitive.ADENOSINE] = adenosine
    circadian = compute_circadian_score(events, estimation_time)
    results[Primitive.CIRCADIAN_PHASE] = circadian

    monoamines = {p: compute_monoamine_score(p, events, estimation_time) for p in _MONOAMINES}
    for primitive, mono in monoamines.items():
        results[primitive] = PrimitiveScore(mono.combined, mono.contributors)

    results[Primitive.CORTISOL] = compute_cortisol_score(events, estimation_time)
    for primitive in (Primitive.NOREPINEPHRINE, Primitive.GLUCOSE):
        results[primitive] = compute_generic_score(primitive, events, estimation_time)

    sleep_drive = compute_sleep_drive(adenosine.score, circadian.score, estimation_time)

    return BaseScores(
        scores={p: results[p].score for p in Primitive},
        contributors={p: results[p].contributors for p in Primitive},
        monoamines=monoamines,
        sleep_drive=sleep_drive,
    )


def adjust_for_sequences(
    base: BaseScores,
    detector: SequenceDetector,
    events: Sequence[Event],
    estimation_time: datetime,
) -> AdjustedScores:
    """Stage 2: detect multi-event patterns and apply their adjustments."""
    sequences = detector.detect(events, estimation_time)
    return AdjustedScores(
        base=base,
        sequences=tuple(sequences),
        scores=apply_sequence_adjustments(base.scores, sequences),
    )


def modulate(adjusted: AdjustedScores) -> ModulatedScores:
    """Stage 3: cross-primitive suppression and reciprocal inhibition."""
    scores = apply_cross_primitive_modifiers(adjusted.scores)
    effective = effective_monoamines(scores[Primitive.DOPAMINE], scores[Primitive.SEROTONIN])
    return ModulatedScores(adjusted=adjusted, scores=scores, effective=effective)


def validate(modulated: ModulatedScores, events: Sequence[Event], estimation_time: datetime) -> ValidatedScores:
    """Stage 4: physiological constraints from direct measurements."""
    outcome = validate_scores(modulated.scores, events, estimation_time)
    return ValidatedScores(modulated=modulated, outcome=outcome)


def assemble_result(validated: ValidatedScores, estimation_time: datetime) -> EstimationResult:
    base = validated.base
    effective = validated.modulated.effective
    outcome = validated.outcome

    primitives: dict[str, PrimitiveState] = {}
    for primitive in Primitive:
        extra: dict[str, float] = {}
        if primitive in base.monoamines:
            mono = base.monoamines[primitive]
            extra = {
                "acute_score": mono.acute,
                "chronic_score": mono.chronic,
                "effective_score": (
                    effective.dopamine if primitive is Primitive.DOPAMINE else effective.serotonin
                ),
            }
        primitives[primitive.value] = PrimitiveState(
            base_score=base.scores[primitive],
            modified_score=outcome.scores[primitive],
            confidence=outcome.confidence[primitive],
            contributors=list(base.contributors[primitive]),
            **extra,
        )

    return EstimationResult(
        timestamp=estimation_time,
        primitives=primitives,
        detected_sequences=list(validated.modulated.adjusted.sequences),
        sleep_drive=base.sleep_drive,
        dopamine_serotonin_ratio=dopamine_serotonin_ratio(effective.dopamine, effective.serotonin),
        functional_state=classify_functional_state(effective.dopamine, effective.serotonin),
        physiological_constraints=list(outcome.applied),
    )


# ── Public API ────────────────────────────────────────────────


class PrimitiveEstimator:
    """Estimate all seven primitives for an event log at a point in time.

    The estimator keeps no state between calls: identical inputs always
    produce identical results, and concurrent calls are independent.

    Parameters
    ----------
    sequence_detector : SequenceDetector | None
        Pattern registry to use (defaults to the built-in patterns).
    """

    def __init__(self, sequence_detector: SequenceDetector | None = None) -> None:
        self._detector = sequence_detector or SequenceDetector()

    @property
    def sequence_detector(self) -> SequenceDetector:
        return self._detector

    def estimate_at_time(self, events: Iterable[Event], estimation_time: datetime) -> EstimationResult:
        """Run the full pipeline.

        Naive *estimation_time* values are interpreted as UTC.
        """
        when = ensure_utc(estimation_time)
        event_list = list(events)

        base = compute_base_scores(event_list, when)
        adjusted = adjust_for_sequences(base, self._detector, event_list, when)
        modulated = modulate(adjusted)
        validated = validate(modulated, event_list, when)
        result = assemble_result(validated, when)

        logger.debug(
            "estimator.estimate_complete",
            timestamp=when.isoformat(),
            events=len(event_list),
            sequences=len(result.detected_sequences),
            constraints=len(result.physiological_constraints),
            state=result.functional_state.state_type.value,
        )
        return result


class TimelinePoint(NamedTuple):
    timestamp: datetime
    primitives: dict[str, float]


def build_timeline(
    events: Iterable[Event],
    start: datetime,
    end: datetime,
    resolution_hours: float,
    estimator: PrimitiveEstimator | None = None,
) -> list[TimelinePoint]:
    """Final scores at every ``resolution_hours`` step from *start* to *end*.

    Both ends are inclusive when *end* falls on a step.

    Raises
    ------
    ValueError
        If *resolution_hours* is not strictly positive.
    """
    if resolution_hours <= 0:
        raise ValueError(f"resolution_hours must be positive, got {resolution_hours!r}")

    estimator = estimator or PrimitiveEstimator()
    event_list = list(events)
    step = timedelta(hours=resolution_hours)
    current, stop = ensure_utc(start), ensure_utc(end)

    points: list[TimelinePoint] = []
    while current <= stop:
        result = estimator.estimate_at_time(event_list, current)
        points.append(
            TimelinePoint(
                timestamp=current,
                primitives={key: state.modified_score for key, state in result.primitives.items()},
            )
        )
        current += step
    return points
