"""Tests for base score computation."""

from __future__ import annotations

import math
from datetime import timedelta

import pytest

from neuro_primitives.estimation.scoring import (
    compute_adenosine_score,
    compute_caffeine_dopamine_boost,
    compute_circadian_score,
    compute_cortisol_score,
    compute_generic_score,
    compute_monoamine_score,
    cortisol_awakening_boost,
    cortisol_circadian_multiplier,
    most_recent_wake_time,
)
from neuro_primitives.models import EventType, Primitive


# ── Adenosine ─────────────────────────────────────────────────


class TestAdenosine:
    def test_rises_with_hours_awake(self, make_event, now):
        scores = []
        for hours in (1, 4, 8, 12):
            wake = make_event(EventType.WAKE, now - timedelta(hours=hours))
            scores.append(compute_adenosine_score([wake], now).score)
        assert scores == sorted(scores)
        assert len(set(scores)) == len(scores)

    def test_default_hours_awake_without_marker(self, now):
        result = compute_adenosine_score([], now)
        assert result.score == pytest.approx(0.3 + 1.0 - math.exp(-0.5))

    def test_wake_accumulation_contributor(self, make_event, now):
        result = compute_adenosine_score([make_event(EventType.WAKE, now - timedelta(hours=2))], now)
        ids = [c.event_id for c in result.contributors]
        assert "accumulated_wake_time" in ids

    def test_caffeine_lowers_pressure(self, make_event, now):
        wake = make_event(EventType.WAKE, now - timedelta(hours=6))
        coffee = make_event(EventType.CAFFEINE, now - timedelta(hours=1), dose_mg=150.0)
        assert compute_adenosine_score([wake, coffee], now).score < compute_adenosine_score([wake], now).score

    def test_sleep_end_counts_as_wake(self, make_event, now):
        wake = make_event(EventType.WAKE, now - timedelta(hours=10))
        sleep = make_event(
            EventType.SLEEP, now - timedelta(hours=11), end=now - timedelta(hours=3), duration_hours=8.0
        )
        assert most_recent_wake_time([wake, sleep], now) == now - timedelta(hours=3)

    def test_future_wake_ignored(self, make_event, now):
        wake = make_event(EventType.WAKE, now + timedelta(hours=1))
        assert most_recent_wake_time([wake], now) is None


# ── Caffeine plasma boost ─────────────────────────────────────


class TestCaffeineBoost:
    def test_single_dose_capped(self, make_event, now):
        coffee = make_event(EventType.CAFFEINE, now, dose_mg=100.0)
        assert compute_caffeine_dopamine_boost([coffee], now) == pytest.approx(0.25)

    def test_total_capped(self, make_event, now):
        events = [make_event(EventType.CAFFEINE, now - timedelta(minutes=m), dose_mg=200.0) for m in (0, 30)]
        assert compute_caffeine_dopamine_boost(events, now) == pytest.approx(0.4)

    def test_outside_window(self, make_event, now):
        coffee = make_event(EventType.CAFFEINE, now - timedelta(hours=13), dose_mg=200.0)
        assert compute_caffeine_dopamine_boost([coffee], now) == 0.0


# ── Circadian phase ───────────────────────────────────────────


class TestCircadian:
    def test_no_history_is_neutral(self, now):
        assert compute_circadian_score([], now).score == pytest.approx(0.5)

    def test_ideal_onset_is_neutral(self, make_event, now):
        sleep = make_event(EventType.SLEEP, now.replace(day=17, hour=23), end=now.replace(hour=7))
        assert compute_circadian_score([sleep], now).score == pytest.approx(0.5)

    def test_post_midnight_onset_uses_raw_hour(self, make_event, now):
        sleep = make_event(EventType.SLEEP, now.replace(hour=1), end=now.replace(hour=8))
        # (23 + 1) / 2 = 12 → offset −1.1 → clamped
        assert compute_circadian_score([sleep], now).score == 0.0

    def test_week_of_post_midnight_onsets(self, make_event, now):
        sleeps = [
            make_event(EventType.SLEEP, (now - timedelta(days=d)).replace(hour=1), duration_hours=7.0)
            for d in range(7)
        ]
        assert compute_circadian_score(sleeps, now).score == 0.0

    def test_evening_onset_average(self, make_event, now):
        sleeps = [
            make_event(EventType.SLEEP, (now - timedelta(days=d)).replace(hour=22)) for d in (1, 2, 3)
        ]
        # (23 + 3·22) / 4 = 22.25 → offset −0.075
        assert compute_circadian_score(sleeps, now).score == pytest.approx(0.425)


# ── Cortisol ──────────────────────────────────────────────────


class TestCortisol:
    @pytest.mark.parametrize(
        ("hour", "minute", "expected"),
        [(1, 0, 0.25), (4, 0, 0.425), (7, 30, 1.0), (12, 0, 0.7), (23, 0, 0.275)],
    )
    def test_circadian_multiplier(self, now, hour, minute, expected):
        assert cortisol_circadian_multiplier(now.replace(hour=hour, minute=minute)) == pytest.approx(expected)

    def test_multiplier_peaks_at_half_past_seven(self, now):
        peak = cortisol_circadian_multiplier(now.replace(hour=7, minute=30))
        for hour in range(24):
            assert cortisol_circadian_multiplier(now.replace(hour=hour, minute=0)) <= peak

    @pytest.mark.parametrize(("minutes", "expected"), [(0, 1.0), (35, 1.75), (60, 1.4), (90, 1.2)])
    def test_awakening_boost(self, make_event, now, minutes, expected):
        wake = make_event(EventType.WAKE, now - timedelta(minutes=minutes))
        assert cortisol_awakening_boost([wake], now) == pytest.approx(expected)

    def test_no_boost_long_after_waking(self, make_event, now):
        wake = make_event(EventType.WAKE, now - timedelta(hours=3))
        assert cortisol_awakening_boost([wake], now) == 1.0

    def test_empty_log_follows_rhythm(self, now):
        at = now.replace(hour=7, minute=30)
        assert compute_cortisol_score([], at).score == pytest.approx(0.65)

    def test_stress_raises_score(self, make_event, now):
        stress = make_event(EventType.STRESS_EVENT, now - timedelta(hours=1), intensity="high")
        assert compute_cortisol_score([stress], now).score > compute_cortisol_score([], now).score

    def test_relaxation_is_capped(self, make_event, now):
        night = now.replace(hour=1)
        calm = [
            make_event(EventType.SOCIAL_INTERACTION, night - timedelta(hours=h), quality="very_positive")
            for h in (1, 2, 3)
        ]
        baseline = compute_cortisol_score([], night).score
        assert compute_cortisol_score(calm, night).score == pytest.approx(max(baseline - 0.15, 0.15))


# ── Monoamines / generic ──────────────────────────────────────


class TestMonoamines:
    def test_empty_log_at_baseline(self, now):
        result = compute_monoamine_score(Primitive.SEROTONIN, [], now)
        assert (result.acute, result.chronic, result.combined) == (0.5, 0.5, 0.5)

    def test_caffeine_boost_lands_on_acute_dopamine(self, make_event, now):
        coffee = make_event(EventType.CAFFEINE, now, dose_mg=100.0)
        result = compute_monoamine_score(Primitive.DOPAMINE, [coffee], now)
        assert result.acute == pytest.approx(0.5 + 0.075 + 0.25)
        assert result.chronic == pytest.approx(0.575)
        assert result.combined == pytest.approx(0.7 * 0.575 + 0.3 * 0.825)

    def test_old_event_only_in_chronic(self, make_event, now):
        meal = make_event(EventType.MEAL, now - timedelta(hours=20), protein_grams=40.0)
        result = compute_monoamine_score(Primitive.DOPAMINE, [meal], now)
        assert result.acute == 0.5
        assert result.chronic > 0.5

    def test_contributors_sorted_by_magnitude(self, make_event, now):
        events = [
            make_event(EventType.INTERRUPTION, now - timedelta(hours=1), frequency=1.0),
            make_event(EventType.STRESS_EVENT, now - timedelta(hours=2), intensity="severe"),
        ]
        result = compute_monoamine_score(Primitive.DOPAMINE, events, now)
        magnitudes = [abs(c.decayed_impact) for c in result.contributors]
        assert magnitudes == sorted(magnitudes, reverse=True)


class TestGenericScore:
    def test_baseline(self, now):
        assert compute_generic_score(Primitive.GLUCOSE, [], now).score == 0.5

    def test_clamped(self, make_event, now):
        meals = [make_event(EventType.MEAL, now, glycemic_index="high") for _ in range(5)]
        assert compute_generic_score(Primitive.GLUCOSE, meals, now).score == 1.0
