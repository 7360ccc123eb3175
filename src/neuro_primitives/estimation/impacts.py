"""Event impact functions — research-based mapping from one event to raw impacts.

Each event category has a pure function returning ``{Primitive: impact}``
where the impact is a signed magnitude (roughly ``[-1, 1]``) *before*
temporal decay.  Every property read falls back to a named default, so a
missing or wrongly-typed property never raises.

Evidence mapping
----------------
==================  ==========================================================
Category            Main effects
==================  ==========================================================
sleep               adenosine clearance, monoamine restoration, cortisol
light_exposure      circadian phase shift (sign depends on time of day)
meal                glucose, tryptophan/serotonin, tyrosine/dopamine
caffeine            A2A receptor occupancy (adenosine), catecholamines
exercise            dopamine/norepinephrine/serotonin, glucose depletion
nap                 partial adenosine clearance
stress_event        HPA axis (cortisol), sympathetic activation
social_interaction  serotonin / cortisol buffering (or the reverse)
screen_time         evening blue light: phase delay, alertness
interruption        cortisol up, dopamine down
==================  ==========================================================
"""

from __future__ import annotations

from typing import Any, Callable

from neuro_primitives.models import Event, EventType, Primitive

Impacts = dict[Primitive, float]

# ── Property lookup helpers ──────────────────────────────────


def prop_float(properties: dict[str, Any], key: str, default: float | None = None) -> float | None:
    """Read a numeric property; non-numeric values count as missing."""
    value = properties.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def prop_str(properties: dict[str, Any], key: str, default: str) -> str:
    value = properties.get(key)
    return value if isinstance(value, str) else default


def prop_bool(properties: dict[str, Any], key: str, default: bool) -> bool:
    value = properties.get(key)
    return value if isinstance(value, bool) else default


# ── Tier tables ───────────────────────────────────────────────

_SLEEP_QUALITY = {"excellent": 1.0, "good": 0.8, "fair": 0.6, "poor": 0.4}
_GLYCEMIC_INDEX = {"low": 0.3, "medium": 0.6, "high": 1.0}
_EXERCISE_INTENSITY_PCT = {"light": 40.0, "moderate": 65.0, "vigorous": 75.0, "high_intensity": 85.0}
_STRESS_INTENSITY = {"mild": 0.3, "moderate": 0.6, "high": 1.0, "severe": 1.3}
_SOCIAL_QUALITY = {
    "very_positive": 1.0,
    "positive": 0.7,
    "neutral": 0.0,
    "negative": -0.5,
    "very_negative": -1.0,
}
_BLUE_LIGHT = {"low": 0.3, "medium": 0.6, "high": 1.0}


def sleep_quality_score(quality: str) -> float:
    return _SLEEP_QUALITY.get(quality, 0.8)


# ── Sleep ─────────────────────────────────────────────────────


def compute_sleep_impacts(event: Event) -> Impacts:
    """Sleep clears adenosine and restores monoamines in proportion to
    duration × quality; short or poor sleep raises cortisol and impairs
    glucose regulation."""
    props = event.properties
    duration = prop_float(props, "duration_hours", 7.0)
    quality = sleep_quality_score(prop_str(props, "quality", "good"))
    efficiency = prop_float(props, "sleep_efficiency", 0.85)

    if duration >= 7.0:
        dopamine = 0.3 * quality
    elif duration >= 6.0:
        dopamine = 0.15 * quality
    else:
        dopamine = -0.2 * (1.0 - quality)

    # Good sleep stays inside the -0.15 relaxation cap applied to cortisol
    cortisol = -0.12 if quality >= 0.7 else 0.15 * (1.0 - quality)

    if duration >= 6.0 and efficiency >= 0.67:
        glucose = 0.2
    else:
        glucose = -0.3 * (1.0 - min(duration / 6.0, 1.0))

    onset_hour = event.timestamp.hour
    phase = 0.2 * (onset_hour / 2.0) if onset_hour <= 2 else 0.0

    return {
        Primitive.ADENOSINE: -(duration / 7.5) * quality * 0.85,
        Primitive.DOPAMINE: dopamine,
        Primitive.SEROTONIN: 0.25 * quality * min(duration / 7.5, 1.0),
        Primitive.CORTISOL: cortisol,
        Primitive.GLUCOSE: glucose,
        Primitive.CIRCADIAN_PHASE: phase,
    }


# ── Light ─────────────────────────────────────────────────────


def compute_light_impacts(event: Event) -> Impacts:
    """Bright morning light advances the clock (negative phase), evening
    light delays it (positive phase)."""
    props = event.properties
    lux = prop_float(props, "intensity_lux", 1000.0)
    duration_min = prop_float(props, "duration_minutes", 30.0)

    hour = event.timestamp.hour
    is_morning = 6 <= hour <= 11
    is_evening = 18 <= hour <= 22

    if lux >= 2000.0:
        if is_morning:
            phase = -0.8 * min(duration_min / 120.0, 1.0)
        elif is_evening:
            phase = 0.6 * min(duration_min / 120.0, 1.0)
        else:
            phase = -0.2
    elif lux >= 100.0:
        phase = -0.3 if is_morning else 0.3 if is_evening else 0.0
    else:
        phase = 0.0

    impacts: Impacts = {Primitive.CIRCADIAN_PHASE: phase}

    if is_morning and lux >= 2000.0:
        impacts[Primitive.SEROTONIN] = (
            0.25 * min(lux / 10000.0, 1.0) * min(duration_min / 30.0, 1.0)
        )

    if is_morning:
        # Modest: the awakening response already models most of the morning rise
        if lux >= 5000.0:
            impacts[Primitive.CORTISOL] = 0.08
        elif lux >= 800.0:
            impacts[Primitive.CORTISOL] = 0.05
        else:
            impacts[Primitive.CORTISOL] = 0.02

    return impacts


# ── Meal ──────────────────────────────────────────────────────


def compute_meal_impacts(event: Event) -> Impacts:
    props = event.properties
    carbs = prop_float(props, "carb_grams", 50.0)
    protein = prop_float(props, "protein_grams", 20.0)
    protein_pct = prop_float(props, "protein_percentage", 20.0)
    gi = _GLYCEMIC_INDEX.get(prop_str(props, "glycemic_index", "medium"), 0.6)

    glucose = 0.1 + gi * 0.1 if protein >= 50.0 else 0.15 + gi * 0.15

    # Carb-rich, protein-poor meals favour tryptophan uptake into the brain
    if protein_pct < 10.0 and carbs > 40.0:
        serotonin = 0.35 * max(1.0 - protein_pct / 20.0, 0.0)
    elif protein_pct > 25.0:
        serotonin = -0.15
    else:
        serotonin = 0.1

    dopamine = 0.15 * min(protein / 50.0, 1.0) if protein >= 15.0 else 0.05
    dopamine += gi * 0.1

    meal_type = prop_str(props, "meal_type", "lunch")
    hour = event.timestamp.hour
    if meal_type == "breakfast" and 6 <= hour <= 9:
        phase = 0.1
    elif meal_type == "dinner" and hour >= 21:
        phase = 0.2
    else:
        phase = 0.0

    return {
        Primitive.GLUCOSE: glucose,
        Primitive.SEROTONIN: serotonin,
        Primitive.DOPAMINE: dopamine,
        Primitive.CIRCADIAN_PHASE: phase,
    }


# ── Caffeine ──────────────────────────────────────────────────


def caffeine_occupancy(dose_mg: float) -> float:
    """Saturating A2A receptor occupancy for a caffeine dose."""
    return min(dose_mg / (dose_mg + 65.0), 1.0)


def compute_caffeine_impacts(event: Event) -> Impacts:
    props = event.properties
    dose = prop_float(props, "dose_mg", 100.0)

    impacts: Impacts = {
        Primitive.ADENOSINE: -0.5 * caffeine_occupancy(dose),
        Primitive.DOPAMINE: 0.15 * min(dose / 200.0, 1.0),
        Primitive.NOREPINEPHRINE: 0.25 * min(dose / 200.0, 1.3),
        Primitive.CORTISOL: 0.15 * min(dose / 200.0, 1.0),
    }

    hours_before_sleep = prop_float(props, "hours_before_intended_sleep")
    if hours_before_sleep is not None and hours_before_sleep <= 6.0:
        impacts[Primitive.CIRCADIAN_PHASE] = (
            0.3 * min(dose / 200.0, 1.0) * (1.0 - hours_before_sleep / 6.0)
        )

    return impacts


# ── Exercise ──────────────────────────────────────────────────


def compute_exercise_impacts(event: Event) -> Impacts:
    props = event.properties
    duration_min = prop_float(props, "duration_minutes", 30.0)
    vo2max_pct = prop_float(props, "vo2max_percentage", 65.0)
    intensity_pct = _EXERCISE_INTENSITY_PCT.get(prop_str(props, "intensity", "moderate"), vo2max_pct)
    exercise_type = prop_str(props, "type", "cardio")

    if exercise_type == "hiit":
        dopamine = 0.35 * min(duration_min / 45.0, 1.0)
    elif intensity_pct >= 70.0:
        dopamine = 0.25 * min(duration_min / 60.0, 1.0)
    else:
        dopamine = 0.15 * min(duration_min / 60.0, 1.0)

    norepinephrine = 0.4 * (intensity_pct / 100.0) if intensity_pct >= 70.0 else 0.2

    # Long, hard sessions spike cortisol; everything else lowers it slightly
    cortisol = 0.2 if intensity_pct >= 75.0 and duration_min >= 45.0 else -0.08

    return {
        Primitive.DOPAMINE: dopamine,
        Primitive.NOREPINEPHRINE: norepinephrine,
        Primitive.SEROTONIN: 0.2 * min(duration_min / 60.0, 1.0),
        Primitive.CORTISOL: cortisol,
        Primitive.GLUCOSE: -0.3 * (intensity_pct / 100.0) * min(duration_min / 60.0, 1.0),
    }


# ── Nap ───────────────────────────────────────────────────────


def compute_nap_impacts(event: Event) -> Impacts:
    duration_min = prop_float(event.properties, "duration_minutes", 20.0)

    if duration_min <= 30.0:
        clearance = -0.25 * (duration_min / 30.0)
    else:
        clearance = -0.4 * min(duration_min / 90.0, 1.0)

    impacts: Impacts = {Primitive.ADENOSINE: clearance}
    if duration_min >= 60.0:
        impacts[Primitive.CIRCADIAN_PHASE] = 0.15
    return impacts


# ── Stress ────────────────────────────────────────────────────


def compute_stress_impacts(event: Event) -> Impacts:
    """Uncontrollable and socially-evaluative stressors provoke the largest
    cortisol response."""
    props = event.properties
    intensity = _STRESS_INTENSITY.get(prop_str(props, "intensity", "moderate"), 0.6)

    multiplier = 1.0
    if not prop_bool(props, "controllable", False):
        multiplier *= 1.4
    if prop_bool(props, "social_evaluative", False):
        multiplier *= 1.25

    return {
        Primitive.CORTISOL: min(0.25 * intensity * multiplier, 0.55),
        Primitive.NOREPINEPHRINE: 0.3 * intensity,
        Primitive.DOPAMINE: -0.2 * intensity,
        Primitive.SEROTONIN: -0.25 * intensity,
        # Counter-regulatory glucose release
        Primitive.GLUCOSE: min(0.25 * intensity * min(multiplier / 2.0, 1.2), 0.4),
    }


# ── Social ────────────────────────────────────────────────────


def compute_social_impacts(event: Event) -> Impacts:
    props = event.properties
    quality = _SOCIAL_QUALITY.get(prop_str(props, "quality", "neutral"), 0.0)
    duration_hours = prop_float(props, "duration_minutes", 60.0) / 60.0

    if quality > 0.0:
        return {
            Primitive.SEROTONIN: 0.3 * quality * min(duration_hours / 2.0, 1.0),
            Primitive.DOPAMINE: 0.2 * quality,
            Primitive.CORTISOL: -0.2 * quality,
        }
    return {
        Primitive.SEROTONIN: 0.3 * quality,
        Primitive.CORTISOL: -0.4 * quality,
    }


# ── Screen time ───────────────────────────────────────────────


def compute_screen_impacts(event: Event) -> Impacts:
    """Screens only matter close to bedtime (≤ 3 h before sleep)."""
    props = event.properties
    hours_before_sleep = prop_float(props, "hours_before_sleep")
    if hours_before_sleep is None or hours_before_sleep > 3.0:
        return {}

    factor = _BLUE_LIGHT.get(prop_str(props, "blue_light_intensity", "medium"), 0.6)
    return {
        Primitive.CIRCADIAN_PHASE: 0.25 * factor * (1.0 - hours_before_sleep / 3.0),
        Primitive.ADENOSINE: -0.15 * factor,
    }


# ── Interruption ──────────────────────────────────────────────


def compute_interruption_impacts(event: Event) -> Impacts:
    frequency = prop_float(event.properties, "frequency", 3.0)
    stress_factor = min(frequency / 10.0, 1.0)
    return {
        Primitive.CORTISOL: 0.2 * stress_factor,
        Primitive.DOPAMINE: -0.15 * stress_factor,
    }


# ── Dispatch ──────────────────────────────────────────────────

_IMPACT_FUNCTIONS: dict[EventType, Callable[[Event], Impacts]] = {
    EventType.SLEEP: compute_sleep_impacts,
    EventType.LIGHT_EXPOSURE: compute_light_impacts,
    EventType.MEAL: compute_meal_impacts,
    EventType.CAFFEINE: compute_caffeine_impacts,
    EventType.EXERCISE: compute_exercise_impacts,
    EventType.NAP: compute_nap_impacts,
    EventType.STRESS_EVENT: compute_stress_impacts,
    EventType.SOCIAL_INTERACTION: compute_social_impacts,
    EventType.SCREEN_TIME: compute_screen_impacts,
    EventType.INTERRUPTION: compute_interruption_impacts,
}


def compute_event_impacts(event: Event) -> Impacts:
    """Raw impacts of *event* on every primitive it affects.

    Wake markers and ``health_*`` measurements have no direct impact; they
    are consumed by the adenosine / cortisol logic and the constraint
    engine instead.
    """
    if event.event_type.is_measurement:
        return {}
    func = _IMPACT_FUNCTIONS.get(event.event_type)
    if func is None:
        return {}
    return func(event)
