"""Derived summaries: functional state, sleep drive and the DA/5-HT ratio."""

from __future__ import annotations

from datetime import datetime

from neuro_primitives.estimation.models import FunctionalState, FunctionalStateType

_HIGH = 0.6
_LOW = 0.5

_STATE_TEXT: dict[FunctionalStateType, tuple[str, list[str]]] = {
    FunctionalStateType.OPTIMAL: (
        "Both motivation and mood are strong. Ideal state for productivity and well-being.",
        [
            "Maintain current patterns",
            "This is a good time for challenging work or important decisions",
        ],
    ),
    FunctionalStateType.DRIVEN_BUT_ANXIOUS: (
        "High motivation but low contentment. Risk of stress and burnout.",
        [
            "Practice stress-reduction techniques",
            "Increase serotonin: social connection, outdoor time, balanced meals",
            "Avoid overcommitting to new projects",
        ],
    ),
    FunctionalStateType.CONTENT_BUT_UNMOTIVATED: (
        "Good mood but low drive. May struggle with initiation and focus.",
        [
            "Boost dopamine: exercise (especially HIIT), achievement tasks, protein-rich meals",
            "Set small, concrete goals to build momentum",
            "Consider caffeine in moderation (morning only)",
        ],
    ),
    FunctionalStateType.DEPLETED: (
        "Both motivation and mood are low. Recovery is the priority.",
        [
            "Prioritize rest and sleep",
            "Avoid demanding decisions or high-stress situations",
            "Gentle exercise, social connection, and balanced nutrition",
        ],
    ),
}


def classify_functional_state(dopamine: float, serotonin: float) -> FunctionalState:
    """Classify effective dopamine / serotonin into one of four states.

    A monoamine in ``[0.5, 0.6)`` never qualifies for the mixed states,
    so such a pair always lands in ``Depleted``.
    """
    if dopamine >= _HIGH and serotonin >= _HIGH:
        state_type = FunctionalStateType.OPTIMAL
    elif dopamine >= _HIGH and serotonin < _LOW:
        state_type = FunctionalStateType.DRIVEN_BUT_ANXIOUS
    elif dopamine < _LOW and serotonin >= _HIGH:
        state_type = FunctionalStateType.CONTENT_BUT_UNMOTIVATED
    else:
        state_type = FunctionalStateType.DEPLETED

    description, recommendations = _STATE_TEXT[state_type]
    return FunctionalState(
        state_type=state_type,
        description=description,
        recommendations=list(recommendations),
    )


def dopamine_serotonin_ratio(dopamine: float, serotonin: float) -> float:
    return dopamine / serotonin if serotonin > 0.01 else dopamine / 0.01


# ── Sleep drive ───────────────────────────────────────────────

_SLEEP_PEAK_HOUR = 3.0
_WAKE_PEAK_HOUR = 15.0


def circadian_sleep_pressure(hour_of_day: float, phase: float) -> float:
    """Circadian component of sleep drive.

    *phase* shifts the clock by up to ±2 h before the distance to the
    03:00 sleep peak and the 15:00 wake-maintenance peak is measured.
    """
    adjusted = (hour_of_day + (phase - 0.5) * 4.0 + 24.0) % 24.0
    from_sleep_peak = abs(adjusted - _SLEEP_PEAK_HOUR)
    from_wake_peak = abs(adjusted - _WAKE_PEAK_HOUR)

    if from_sleep_peak < 6.0:
        pressure = 0.7 + 0.3 * (1.0 - from_sleep_peak / 6.0)
    elif from_wake_peak < 3.0:
        pressure = 0.2
    else:
        pressure = 0.5
    return max(0.0, min(1.0, pressure))


def compute_sleep_drive(adenosine: float, circadian_phase: float, estimation_time: datetime) -> float:
    """Blend of homeostatic (60 %) and circadian (40 %) sleep pressure."""
    hour = estimation_time.hour + estimation_time.minute / 60.0
    pressure = circadian_sleep_pressure(hour, circadian_phase)
    return max(0.0, min(1.0, 0.6 * adenosine + 0.4 * pressure))
