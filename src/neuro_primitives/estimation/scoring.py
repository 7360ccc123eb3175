"""Base score computation — decay-weighted aggregation per primitive.

The generic path sums decayed raw impacts on top of a fixed baseline.
Adenosine and circadian phase have their own models, cortisol is shaped by
its circadian rhythm and the awakening response, and the two monoamines are
scored on an acute and a chronic horizon.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from neuro_primitives.estimation.decay import (
    ContextConfig,
    acute_context_for,
    chronic_context_for,
    context_for,
    decay,
    hours_between,
)
from neuro_primitives.estimation.impacts import (
    compute_caffeine_impacts,
    compute_event_impacts,
    compute_light_impacts,
    compute_nap_impacts,
    compute_sleep_impacts,
    prop_float,
)
from neuro_primitives.estimation.models import EventContribution
from neuro_primitives.models import Event, EventType, Primitive

# ── Constants ─────────────────────────────────────────────────

BASELINES: dict[Primitive, float] = {
    Primitive.DOPAMINE: 0.5,
    Primitive.NOREPINEPHRINE: 0.5,
    Primitive.SEROTONIN: 0.5,
    Primitive.ADENOSINE: 0.3,
    Primitive.CIRCADIAN_PHASE: 0.5,
    Primitive.CORTISOL: 0.4,
    Primitive.GLUCOSE: 0.5,
}

_DEFAULT_HOURS_AWAKE = 8.0
_ADENOSINE_TIME_CONSTANT_H = 16.0
_SLEEP_CLEARANCE_HALF_LIFE_H = 16.0
_CAFFEINE_WINDOW_H = 12
_CAFFEINE_SUPPRESSION_HALF_LIFE_H = 5.0
_NAP_CLEARANCE_HALF_LIFE_H = 8.0

_CAFFEINE_PLASMA_ELIMINATION = 0.15
_CAFFEINE_BOOST_PER_EVENT = 0.25
_CAFFEINE_BOOST_TOTAL = 0.4

_IDEAL_SLEEP_HOUR = 23.0
_CIRCADIAN_SLEEP_SAMPLES = 7

_CORTISOL_FLOOR = 0.15
_CORTISOL_RELAXATION_CAP = -0.15
_AWAKENING_LOOKBACK = timedelta(hours=2)

_MONOAMINE_CHRONIC_WEIGHT = 0.7
_MONOAMINE_ACUTE_WEIGHT = 0.3


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


def _sort_contributors(contributors: list[EventContribution]) -> list[EventContribution]:
    return sorted(contributors, key=lambda c: abs(c.decayed_impact), reverse=True)


def _events_in_window(
    events: Sequence[Event], config: ContextConfig, estimation_time: datetime
) -> list[Event]:
    return [e for e in events if config.contains(e.timestamp, estimation_time)]


def _hour_of_day(when: datetime) -> float:
    return when.hour + when.minute / 60.0


# ── Result containers ─────────────────────────────────────────


@dataclass(frozen=True)
class PrimitiveScore:
    """Score of one primitive plus the events that produced it."""

    score: float
    contributors: tuple[EventContribution, ...] = ()


@dataclass(frozen=True)
class MonoamineScore:
    """Dopamine / serotonin score on both time horizons."""

    acute: float
    chronic: float
    combined: float
    contributors: tuple[EventContribution, ...] = ()


# ── Generic path ──────────────────────────────────────────────


def _accumulate(
    primitive: Primitive, events: Sequence[Event], estimation_time: datetime
) -> tuple[float, list[EventContribution]]:
    config = context_for(primitive)
    total = 0.0
    contributors: list[EventContribution] = []
    for event in _events_in_window(events, config, estimation_time):
        raw = compute_event_impacts(event).get(primitive)
        if raw is None:
            continue
        hours_ago = hours_between(estimation_time, event.timestamp)
        decayed = raw * config.weight(hours_ago)
        total += decayed
        contributors.append(
            EventContribution(
                event_id=event.event_id,
                event_type=event.event_type.value,
                impact=raw,
                decayed_impact=decayed,
                hours_ago=hours_ago,
            )
        )
    return total, contributors


def compute_generic_score(
    primitive: Primitive, events: Sequence[Event], estimation_time: datetime
) -> PrimitiveScore:
    """Baseline plus decayed impacts, clamped to ``[0, 1]``.

    Used for norepinephrine and glucose.  Cortisol goes through
    :func:`compute_cortisol_score`.
    """
    total, contributors = _accumulate(primitive, events, estimation_time)
    score = clamp(BASELINES[primitive] + total)
    return PrimitiveScore(score, tuple(_sort_contributors(contributors)))


# ── Caffeine plasma boost ─────────────────────────────────────


def compute_caffeine_dopamine_boost(events: Sequence[Event], estimation_time: datetime) -> float:
    """Extra dopamine from caffeine still circulating in plasma.

    Each intake in the last 12 h adds ``dose·e^(−0.15·h)/100`` capped at
    0.25; the total is capped at 0.4.
    """
    cutoff = estimation_time - timedelta(hours=_CAFFEINE_WINDOW_H)
    total = 0.0
    for event in events:
        if event.event_type is not EventType.CAFFEINE:
            continue
        if not cutoff <= event.timestamp <= estimation_time:
            continue
        dose = prop_float(event.properties, "dose_mg", 100.0)
        hours_ago = hours_between(estimation_time, event.timestamp)
        plasma = dose * math.exp(-_CAFFEINE_PLASMA_ELIMINATION * hours_ago)
        total += min(plasma / 100.0, _CAFFEINE_BOOST_PER_EVENT)
    return min(total, _CAFFEINE_BOOST_TOTAL)


# ── Adenosine ─────────────────────────────────────────────────


def most_recent_wake_time(events: Sequence[Event], estimation_time: datetime) -> datetime | None:
    """Latest wake marker at or before *estimation_time*.

    A wake marker is either a ``wake`` event or the end of a ``sleep``
    event.
    """
    latest: datetime | None = None
    for event in events:
        if event.event_type is EventType.WAKE:
            candidate = event.timestamp
        elif event.event_type is EventType.SLEEP and event.end_timestamp is not None:
            candidate = event.end_timestamp
        else:
            continue
        if candidate <= estimation_time and (latest is None or candidate > latest):
            latest = candidate
    return latest


def wake_accumulation(hours_awake: float) -> float:
    """Homeostatic build-up, asymptotic to 1.0 with a 16 h time constant."""
    return clamp(1.0 - math.exp(-hours_awake / _ADENOSINE_TIME_CONSTANT_H))


def compute_adenosine_score(events: Sequence[Event], estimation_time: datetime) -> PrimitiveScore:
    """Sleep pressure from time awake minus sleep, nap and caffeine effects."""
    wake_time = most_recent_wake_time(events, estimation_time)
    if wake_time is None:
        hours_awake = _DEFAULT_HOURS_AWAKE
    else:
        hours_awake = max(hours_between(estimation_time, wake_time), 0.0)
    accumulation = wake_accumulation(hours_awake)

    window = context_for(Primitive.ADENOSINE)
    cutoff = window.cutoff(estimation_time)
    caffeine_cutoff = estimation_time - timedelta(hours=_CAFFEINE_WINDOW_H)

    clearance = 0.0
    suppression = 0.0
    contributors: list[EventContribution] = []

    def _record(event: Event, raw: float, hours_ago: float, half_life: float) -> float:
        decayed = raw * decay(hours_ago, half_life)
        contributors.append(
            EventContribution(
                event_id=event.event_id,
                event_type=event.event_type.value,
                impact=raw,
                decayed_impact=decayed,
                hours_ago=hours_ago,
            )
        )
        return decayed

    # Sleep clearance manifests at the end of the sleep period
    for event in events:
        if event.event_type is not EventType.SLEEP or event.end_timestamp is None:
            continue
        if not cutoff <= event.end_timestamp <= estimation_time:
            continue
        raw = compute_sleep_impacts(event)[Primitive.ADENOSINE]
        hours_ago = hours_between(estimation_time, event.end_timestamp)
        clearance += _record(event, raw, hours_ago, _SLEEP_CLEARANCE_HALF_LIFE_H)

    for event in events:
        if event.event_type is not EventType.CAFFEINE:
            continue
        if not caffeine_cutoff <= event.timestamp <= estimation_time:
            continue
        raw = compute_caffeine_impacts(event)[Primitive.ADENOSINE]
        hours_ago = hours_between(estimation_time, event.timestamp)
        suppression += _record(event, raw, hours_ago, _CAFFEINE_SUPPRESSION_HALF_LIFE_H)

    for event in events:
        if event.event_type is not EventType.NAP:
            continue
        if not cutoff <= event.timestamp <= estimation_time:
            continue
        raw = compute_nap_impacts(event)[Primitive.ADENOSINE]
        hours_ago = hours_between(estimation_time, event.timestamp)
        clearance += _record(event, raw, hours_ago, _NAP_CLEARANCE_HALF_LIFE_H)

    contributors.append(
        EventContribution(
            event_id="accumulated_wake_time",
            event_type="wake_accumulation",
            impact=accumulation,
            decayed_impact=accumulation,
            hours_ago=0.0,
        )
    )

    score = clamp(BASELINES[Primitive.ADENOSINE] + accumulation + clearance + suppression)
    return PrimitiveScore(score, tuple(_sort_contributors(contributors)))


# ── Circadian phase ───────────────────────────────────────────


def compute_circadian_score(events: Sequence[Event], estimation_time: datetime) -> PrimitiveScore:
    """Phase from habitual sleep onset relative to 23:00 plus light shifts.

    Onset hours are averaged on the raw clock (01:00 counts as 1), seeded
    with the 23:00 anchor, so post-midnight onsets pull the phase low.
    """
    sleeps = sorted(
        (e for e in events if e.event_type is EventType.SLEEP and e.timestamp <= estimation_time),
        key=lambda e: e.timestamp,
        reverse=True,
    )[:_CIRCADIAN_SLEEP_SAMPLES]

    onset_sum = _IDEAL_SLEEP_HOUR
    for event in sleeps:
        onset_sum += float(event.timestamp.hour)
    avg_onset = onset_sum / (len(sleeps) + 1)
    phase_offset = (avg_onset - _IDEAL_SLEEP_HOUR) / 10.0

    config = context_for(Primitive.CIRCADIAN_PHASE)
    light_adjustment = 0.0
    contributors: list[EventContribution] = []
    for event in _events_in_window(events, config, estimation_time):
        if event.event_type is not EventType.LIGHT_EXPOSURE:
            continue
        raw = compute_light_impacts(event).get(Primitive.CIRCADIAN_PHASE)
        if raw is None:
            continue
        hours_ago = hours_between(estimation_time, event.timestamp)
        decayed = raw * config.weight(hours_ago)
        light_adjustment += decayed
        contributors.append(
            EventContribution(
                event_id=event.event_id,
                event_type=event.event_type.value,
                impact=raw,
                decayed_impact=decayed,
                hours_ago=hours_ago,
            )
        )

    score = clamp(BASELINES[Primitive.CIRCADIAN_PHASE] + phase_offset + light_adjustment)
    return PrimitiveScore(score, tuple(_sort_contributors(contributors)))


# ── Cortisol ──────────────────────────────────────────────────


def cortisol_circadian_multiplier(when: datetime) -> float:
    """Diurnal cortisol rhythm in ``[0.25, 1.0]``, peaking at 07:30."""
    h = _hour_of_day(when)
    if h < 2.0:
        return 0.25
    if h < 6.0:
        return 0.25 + 0.35 * (h - 2.0) / 4.0
    if h < 9.0:
        progress = (h - 6.0) / 3.0
        if progress < 0.5:
            return 0.6 + 0.4 * progress * 2.0
        return 1.0 - 0.1 * (progress - 0.5) * 2.0
    if h < 12.0:
        return 0.9 - 0.2 * (h - 9.0) / 3.0
    if h < 18.0:
        return 0.7 - 0.25 * (h - 12.0) / 6.0
    if h < 22.0:
        return 0.45 - 0.15 * (h - 18.0) / 4.0
    return 0.3 - 0.05 * (h - 22.0) / 2.0


def cortisol_awakening_boost(events: Sequence[Event], estimation_time: datetime) -> float:
    """Cortisol awakening response multiplier in ``[1.0, 1.75]``.

    Peaks 35 min after the most recent ``wake`` event and fades out over
    two hours.
    """
    lookback = estimation_time - _AWAKENING_LOOKBACK
    wakes = [
        e.timestamp
        for e in events
        if e.event_type is EventType.WAKE and lookback <= e.timestamp <= estimation_time
    ]
    if not wakes:
        return 1.0

    minutes = int((estimation_time - max(wakes)).total_seconds() / 60)
    if minutes <= 35:
        return 1.0 + 0.75 * minutes / 35.0
    if minutes <= 60:
        return 1.75 - 0.35 * (minutes - 35) / 25.0
    if minutes <= 120:
        return 1.4 - 0.4 * (minutes - 60) / 60.0
    return 1.0


def compute_cortisol_score(events: Sequence[Event], estimation_time: datetime) -> PrimitiveScore:
    """Circadian baseline plus stress load, amplified around awakening.

    Relaxing events can lower cortisol by at most 0.15 and the result never
    drops below the nocturnal floor of 0.15.
    """
    total, contributors = _accumulate(Primitive.CORTISOL, events, estimation_time)

    rhythm = cortisol_circadian_multiplier(estimation_time)
    awakening = cortisol_awakening_boost(events, estimation_time)
    healthy_baseline = 0.15 + 0.5 * rhythm
    stress_load = max(total, 0.0)
    relaxation = clamp(total, _CORTISOL_RELAXATION_CAP, 0.0)
    sensitivity = 0.5 + 0.5 * rhythm

    score = clamp(healthy_baseline + stress_load * awakening * sensitivity + relaxation, _CORTISOL_FLOOR, 1.0)
    return PrimitiveScore(score, tuple(_sort_contributors(contributors)))


# ── Dopamine / serotonin ──────────────────────────────────────


def compute_monoamine_score(
    primitive: Primitive, events: Sequence[Event], estimation_time: datetime
) -> MonoamineScore:
    """Acute and chronic aggregates blended 30 / 70.

    Dopamine also receives the caffeine plasma boost on its acute horizon,
    whose 12 h window matches the boost's window.
    """
    acute_cfg = acute_context_for(primitive)
    chronic_cfg = chronic_context_for(primitive)
    baseline = BASELINES[primitive]

    acute_sum = 0.0
    chronic_sum = 0.0
    contributors: list[EventContribution] = []
    for event in _events_in_window(events, chronic_cfg, estimation_time):
        raw = compute_event_impacts(event).get(primitive)
        if raw is None:
            continue
        hours_ago = hours_between(estimation_time, event.timestamp)
        chronic_part = raw * chronic_cfg.weight(hours_ago)
        chronic_sum += chronic_part
        if hours_ago <= acute_cfg.window_hours:
            acute_sum += raw * acute_cfg.weight(hours_ago)
        contributors.append(
            EventContribution(
                event_id=event.event_id,
                event_type=event.event_type.value,
                impact=raw,
                decayed_impact=chronic_part,
                hours_ago=hours_ago,
            )
        )

    if primitive is Primitive.DOPAMINE:
        acute_sum += compute_caffeine_dopamine_boost(events, estimation_time)

    acute = clamp(baseline + acute_sum)
    chronic = clamp(baseline + chronic_sum)
    combined = clamp(_MONOAMINE_CHRONIC_WEIGHT * chronic + _MONOAMINE_ACUTE_WEIGHT * acute)
    return MonoamineScore(acute, chronic, combined, tuple(_sort_contributors(contributors)))
