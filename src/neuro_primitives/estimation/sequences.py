"""Sequence detector — named multi-event patterns over recent history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Sequence

import structlog

from neuro_primitives.estimation.impacts import prop_str
from neuro_primitives.estimation.models import DetectedSequence
from neuro_primitives.models import Event, EventType, Primitive

logger = structlog.get_logger(__name__)

LOOKBACK_HOURS = 72

# Receives the events inside the lookback window (chronological order) and
# returns the ids of the matching events, or ``None`` when there is no match.
Matcher = Callable[[list[Event]], list[str] | None]


@dataclass(frozen=True)
class SequencePattern:
    """A named pattern and the per-primitive adjustments it triggers."""

    name: str
    matcher: Matcher
    adjustments: dict[Primitive, float] = field(default_factory=dict)


# ── Built-in patterns ─────────────────────────────────────────


def match_chronic_sleep_deprivation(events: list[Event]) -> list[str] | None:
    """Two or more of the three most recent sleeps were poor or fair."""
    sleeps = sorted(
        (e for e in events if e.event_type is EventType.SLEEP),
        key=lambda e: e.timestamp,
        reverse=True,
    )
    if len(sleeps) < 2:
        return None
    recent = sleeps[:3]
    poor = sum(1 for e in recent if prop_str(e.properties, "quality", "good") in ("poor", "fair"))
    if poor < 2:
        return None
    return [e.event_id for e in recent]


CHRONIC_SLEEP_DEPRIVATION = SequencePattern(
    name="chronic_sleep_deprivation",
    matcher=match_chronic_sleep_deprivation,
    adjustments={Primitive.DOPAMINE: -0.2, Primitive.SEROTONIN: -0.15},
)

DEFAULT_PATTERNS: tuple[SequencePattern, ...] = (CHRONIC_SLEEP_DEPRIVATION,)


# ── Detector ──────────────────────────────────────────────────


class SequenceDetector:
    """Evaluate a registry of :class:`SequencePattern` against an event log.

    A matching pattern yields one :class:`DetectedSequence` per adjusted
    primitive, each listing the same contributing event ids.
    """

    def __init__(self, patterns: Sequence[SequencePattern] | None = None) -> None:
        self._patterns: list[SequencePattern] = list(DEFAULT_PATTERNS if patterns is None else patterns)

    # ── Pattern management ────────────────────────────────────

    def add_pattern(self, pattern: SequencePattern) -> None:
        self._patterns.append(pattern)

    def remove_pattern(self, name: str) -> bool:
        before = len(self._patterns)
        self._patterns = [p for p in self._patterns if p.name != name]
        return len(self._patterns) < before

    def list_patterns(self) -> list[SequencePattern]:
        return list(self._patterns)

    # ── Detection ─────────────────────────────────────────────

    def detect(self, events: Sequence[Event], estimation_time: datetime) -> list[DetectedSequence]:
        cutoff = estimation_time - timedelta(hours=LOOKBACK_HOURS)
        recent = sorted(
            (e for e in events if cutoff <= e.timestamp <= estimation_time),
            key=lambda e: e.timestamp,
        )

        detected: list[DetectedSequence] = []
        for pattern in self._patterns:
            event_ids = pattern.matcher(recent)
            if event_ids is None:
                continue
            for primitive, adjustment in pattern.adjustments.items():
                detected.append(
                    DetectedSequence(
                        pattern_name=pattern.name,
                        events=list(event_ids),
                        impact_on_primitive=primitive,
                        adjustment=adjustment,
                    )
                )
            logger.debug("sequences.detected", pattern=pattern.name, events=event_ids)
        return detected


def apply_sequence_adjustments(
    scores: dict[Primitive, float], sequences: Sequence[DetectedSequence]
) -> dict[Primitive, float]:
    """Add each sequence adjustment to its primitive, clamping to ``[0, 1]``."""
    adjusted = dict(scores)
    for sequence in sequences:
        primitive = sequence.impact_on_primitive
        if primitive in adjusted:
            adjusted[primitive] = max(0.0, min(1.0, adjusted[primitive] + sequence.adjustment))
    return adjusted
