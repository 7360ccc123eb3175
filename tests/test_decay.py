"""Tests for temporal decay and context windows."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from neuro_primitives.estimation.decay import (
    ContextConfig,
    acute_context_for,
    chronic_context_for,
    context_for,
    decay,
    hours_between,
)
from neuro_primitives.models import Primitive


class TestDecay:
    def test_no_decay_at_zero(self):
        assert decay(0.0, 4.0) == 1.0

    @pytest.mark.parametrize("half_life", [2.0, 16.0, 72.0])
    def test_half_at_half_life(self, half_life):
        assert decay(half_life, half_life) == pytest.approx(0.5, abs=1e-9)

    def test_strictly_decreasing(self):
        values = [decay(h, 6.0) for h in (0.0, 1.0, 5.0, 20.0, 200.0)]
        assert all(a > b for a, b in zip(values, values[1:]))
        assert values[-1] > 0.0

    @pytest.mark.parametrize("half_life", [0.0, -3.0])
    def test_non_positive_half_life_rejected(self, half_life):
        with pytest.raises(ValueError):
            decay(1.0, half_life)


class TestHoursBetween:
    def test_whole_minutes(self):
        t = datetime(2025, 1, 1, 12, tzinfo=UTC)
        assert hours_between(t, t - timedelta(minutes=90)) == 1.5

    def test_truncates_seconds(self):
        t = datetime(2025, 1, 1, 12, tzinfo=UTC)
        assert hours_between(t, t - timedelta(minutes=30, seconds=59)) == 0.5


class TestContextWindows:
    def test_default_table(self):
        assert context_for(Primitive.GLUCOSE) == ContextConfig(8, 2.0)
        assert context_for(Primitive.CIRCADIAN_PHASE) == ContextConfig(168, 72.0)

    def test_acute_and_chronic_monoamines(self):
        assert acute_context_for(Primitive.DOPAMINE) == ContextConfig(12, 6.0)
        assert acute_context_for(Primitive.SEROTONIN) == ContextConfig(16, 8.0)
        assert chronic_context_for(Primitive.SEROTONIN) == ContextConfig(96, 36.0)

    def test_fallback_to_default(self):
        assert acute_context_for(Primitive.CORTISOL) == context_for(Primitive.CORTISOL)

    def test_window_bounds_inclusive(self):
        cfg = context_for(Primitive.GLUCOSE)
        t = datetime(2025, 1, 1, 12, tzinfo=UTC)
        assert cfg.contains(t - timedelta(hours=8), t)
        assert cfg.contains(t, t)
        assert not cfg.contains(t - timedelta(hours=8, minutes=1), t)
        assert not cfg.contains(t + timedelta(minutes=1), t)
