"""Demo profiles — synthetic multi-day event logs for five lifestyles.

Each generator replays the same daily routine for ``days + 1`` days starting
``days`` days before *now*, so the most recent routine ends in the future
and the estimator only sees the part that already happened.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Callable

from pydantic import BaseModel, Field

from neuro_primitives.models import Event, EventData, EventType

DEMO_USER_ID = "demo_user"
DISPLAY_DAYS = 3


class Profile(BaseModel):
    """A named lifestyle plus a short sample of its schedule."""

    id: str
    name: str
    description: str
    schedule: list[Event] = Field(default_factory=list)


class _Schedule:
    """Accumulates events with sequential ``evt_<n>`` ids."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def add(
        self,
        event_type: EventType,
        timestamp: datetime,
        end: datetime | None = None,
        **properties: Any,
    ) -> None:
        self.events.append(
            Event(
                event_id=f"evt_{len(self.events) + 1}",
                event_type=event_type,
                timestamp=timestamp,
                end_timestamp=end,
                properties=properties,
            )
        )


def _at_hour(day_start: datetime, hour: int) -> datetime:
    return day_start.replace(hour=hour, minute=0, second=0, microsecond=0)


# ── Routines ──────────────────────────────────────────────────


def _healthy_routine(base: datetime, days: int) -> list[Event]:
    s = _Schedule()
    for day in range(days + 1):
        sleep_start = _at_hour(base + timedelta(days=day), 23)
        wake = sleep_start + timedelta(hours=8)
        s.add(EventType.SLEEP, sleep_start, wake, duration_hours=8.0, quality="good", sleep_efficiency=0.88)
        s.add(EventType.WAKE, wake, natural_wake=True)
        s.add(EventType.HEALTH_HRV, wake + timedelta(minutes=15), value=68.0 + day % 5, unit="ms")
        s.add(EventType.LIGHT_EXPOSURE, wake + timedelta(minutes=30), intensity_lux=8000.0, duration_minutes=20.0)
        s.add(
            EventType.MEAL, wake + timedelta(hours=1),
            meal_type="breakfast", carb_grams=45.0, protein_grams=25.0, fat_grams=15.0,
            glycemic_index="medium", protein_percentage=22.0,
        )
        s.add(EventType.CAFFEINE, wake + timedelta(hours=1, minutes=15), dose_mg=100.0, form="coffee")
        s.add(
            EventType.EXERCISE, wake + timedelta(hours=2),
            duration_minutes=40.0, intensity="moderate", type="cardio", vo2max_percentage=65.0,
        )
        s.add(
            EventType.MEAL, wake + timedelta(hours=5),
            meal_type="lunch", carb_grams=60.0, protein_grams=30.0, fat_grams=20.0,
            glycemic_index="low", protein_percentage=27.0,
        )
        s.add(EventType.SOCIAL_INTERACTION, wake + timedelta(hours=10), duration_minutes=60.0, quality="positive")
        s.add(
            EventType.MEAL, wake + timedelta(hours=11),
            meal_type="dinner", carb_grams=50.0, protein_grams=35.0, fat_grams=18.0,
            glycemic_index="low", protein_percentage=34.0,
        )
    return s.events


def _sleep_deprived(base: datetime, days: int) -> list[Event]:
    s = _Schedule()
    for day in range(days + 1):
        sleep_start = _at_hour(base + timedelta(days=day), 1)
        wake = sleep_start + timedelta(minutes=270)
        s.add(EventType.SLEEP, sleep_start, wake, duration_hours=4.5, quality="poor", sleep_efficiency=0.60)
        s.add(EventType.WAKE, wake, natural_wake=False, alarm=True)
        s.add(EventType.HEALTH_HRV, wake + timedelta(minutes=15), value=28.0 + day % 3, unit="ms")
        s.add(EventType.HEALTH_HEART_RATE, wake + timedelta(minutes=15), value=82.0, unit="bpm")
        s.add(EventType.CAFFEINE, wake + timedelta(minutes=30), dose_mg=200.0, form="coffee")
        s.add(EventType.CAFFEINE, wake + timedelta(hours=3), dose_mg=150.0, form="energy_drink")
        s.add(
            EventType.MEAL, wake + timedelta(hours=6),
            meal_type="lunch", carb_grams=80.0, protein_grams=10.0, fat_grams=15.0,
            glycemic_index="high", protein_percentage=9.0,
        )
        s.add(
            EventType.STRESS_EVENT, wake + timedelta(hours=8),
            intensity="high", controllable=False, social_evaluative=True,
        )
        s.add(
            EventType.SCREEN_TIME, wake + timedelta(hours=17),
            duration_minutes=120.0, blue_light_intensity="high", hours_before_sleep=2.0,
        )
    return s.events


def _high_stress(base: datetime, days: int) -> list[Event]:
    s = _Schedule()
    for day in range(days + 1):
        sleep_start = _at_hour(base + timedelta(days=day), 0)
        wake = sleep_start + timedelta(hours=6)
        s.add(EventType.SLEEP, sleep_start, wake, duration_hours=6.0, quality="fair", sleep_efficiency=0.72)
        s.add(EventType.WAKE, wake)
        s.add(EventType.HEALTH_HRV, wake + timedelta(minutes=15), value=38.0, unit="ms")
        s.add(EventType.CAFFEINE, wake + timedelta(minutes=30), dose_mg=150.0)
        s.add(
            EventType.STRESS_EVENT, wake + timedelta(hours=2),
            intensity="moderate", controllable=False, social_evaluative=True,
        )
        s.add(EventType.INTERRUPTION, wake + timedelta(hours=4), frequency=8.0, total_disruption_minutes=35.0)
        s.add(
            EventType.STRESS_EVENT, wake + timedelta(hours=8),
            intensity="high", controllable=False, social_evaluative=True,
        )
        s.add(EventType.HEALTH_HEART_RATE, wake + timedelta(hours=9), value=88.0, unit="bpm")
        s.add(EventType.HEALTH_RESPIRATORY_RATE, wake + timedelta(hours=9), value=21.0, unit="breaths/min")
        s.add(
            EventType.MEAL, wake + timedelta(hours=14),
            meal_type="dinner", carb_grams=70.0, protein_grams=20.0, fat_grams=25.0, glycemic_index="high",
        )
    return s.events


def _athlete(base: datetime, days: int) -> list[Event]:
    s = _Schedule()
    for day in range(days + 1):
        sleep_start = _at_hour(base + timedelta(days=day), 22)
        wake = sleep_start + timedelta(minutes=510)
        s.add(EventType.SLEEP, sleep_start, wake, duration_hours=8.5, quality="excellent", sleep_efficiency=0.92)
        s.add(EventType.WAKE, wake)
        s.add(EventType.HEALTH_HRV, wake + timedelta(minutes=15), value=85.0, unit="ms")
        s.add(EventType.LIGHT_EXPOSURE, wake + timedelta(minutes=30), intensity_lux=10000.0, duration_minutes=30.0)
        s.add(
            EventType.MEAL, wake + timedelta(hours=1),
            meal_type="breakfast", carb_grams=50.0, protein_grams=40.0, fat_grams=20.0,
            glycemic_index="low", protein_percentage=36.0,
        )
        s.add(
            EventType.EXERCISE, wake + timedelta(hours=2),
            duration_minutes=45.0, intensity="high_intensity", type="hiit", vo2max_percentage=85.0,
        )
        s.add(
            EventType.MEAL, wake + timedelta(hours=3),
            meal_type="post_workout", carb_grams=60.0, protein_grams=35.0, fat_grams=10.0, glycemic_index="medium",
        )
        if day % 2 == 0:
            s.add(
                EventType.EXERCISE, wake + timedelta(hours=8),
                duration_minutes=60.0, intensity="moderate", type="cardio", vo2max_percentage=65.0,
            )
        s.add(
            EventType.MEAL, wake + timedelta(hours=11),
            meal_type="dinner", carb_grams=55.0, protein_grams=45.0, fat_grams=20.0,
            glycemic_index="low", protein_percentage=38.0,
        )
        s.add(EventType.HEALTH_BLOOD_GLUCOSE, wake + timedelta(hours=12), value=92.0, unit="mg/dL")
    return s.events


def _shift_worker(base: datetime, days: int) -> list[Event]:
    s = _Schedule()
    for day in range(days + 1):
        rotation = day % 3
        # Night, then morning (after night shift), then afternoon (after evening shift)
        sleep_start = _at_hour(base + timedelta(days=day), (23, 8, 15)[rotation])
        wake = sleep_start + timedelta(hours=6)
        normal_night = rotation == 0
        s.add(
            EventType.SLEEP, sleep_start, wake,
            duration_hours=6.0,
            quality="fair" if normal_night else "poor",
            sleep_efficiency=0.75 if normal_night else 0.62,
        )
        s.add(EventType.WAKE, wake)
        s.add(EventType.HEALTH_HRV, wake + timedelta(minutes=15), value=55.0 if normal_night else 38.0, unit="ms")
        s.add(EventType.CAFFEINE, wake + timedelta(minutes=30), dose_mg=200.0)
        s.add(
            EventType.MEAL, wake + timedelta(hours=2),
            carb_grams=60.0, protein_grams=20.0, fat_grams=18.0, glycemic_index="medium",
        )
        s.add(EventType.CAFFEINE, wake + timedelta(hours=6), dose_mg=150.0)
        if not normal_night:
            s.add(EventType.LIGHT_EXPOSURE, wake + timedelta(hours=4), intensity_lux=3000.0, duration_minutes=60.0)
    return s.events


# ── Registry ──────────────────────────────────────────────────

_PROFILES: dict[str, tuple[str, str, Callable[[datetime, int], list[Event]]]] = {
    "healthy": (
        "Healthy Routine",
        "Consistent sleep, balanced meals, regular exercise, and good habits",
        _healthy_routine,
    ),
    "sleep_deprived": (
        "Sleep Deprived",
        "Multiple nights of poor sleep with high caffeine use",
        _sleep_deprived,
    ),
    "high_stress": (
        "High Stress",
        "Work pressure, frequent stress events, and irregular eating",
        _high_stress,
    ),
    "athlete": (
        "Athlete Training",
        "Intense exercise routine with optimized nutrition and recovery",
        _athlete,
    ),
    "shift_worker": (
        "Shift Worker",
        "Irregular sleep schedule with circadian misalignment",
        _shift_worker,
    ),
}

DEFAULT_PROFILE = "healthy"


def profile_ids() -> list[str]:
    return list(_PROFILES)


def get_all_profiles(now: datetime | None = None) -> list[Profile]:
    """All demo profiles with a short display schedule."""
    now = now or datetime.now(UTC)
    base = now - timedelta(days=DISPLAY_DAYS)
    return [
        Profile(id=pid, name=name, description=description, schedule=generator(base, DISPLAY_DAYS))
        for pid, (name, description, generator) in _PROFILES.items()
    ]


def generate_profile_events(profile_id: str, days: int, now: datetime | None = None) -> EventData:
    """Event log for *profile_id* covering the last *days* days.

    Unknown ids fall back to the healthy routine.
    """
    now = now or datetime.now(UTC)
    _, _, generator = _PROFILES.get(profile_id, _PROFILES[DEFAULT_PROFILE])
    return EventData(user_id=DEMO_USER_ID, events=generator(now - timedelta(days=days), days))


def shift_events(events: list[Event], offset_minutes: int) -> list[Event]:
    """Move every timestamp (and end timestamp) by *offset_minutes*.

    Used to place UTC-generated routines on the caller's local clock.
    """
    if offset_minutes == 0:
        return list(events)
    shift = timedelta(minutes=offset_minutes)
    return [
        event.model_copy(
            update={
                "timestamp": event.timestamp + shift,
                "end_timestamp": event.end_timestamp + shift if event.end_timestamp else None,
            }
        )
        for event in events
    ]
