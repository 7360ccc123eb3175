"""Tests for cross-primitive interactions, sleep drive and functional state."""

from __future__ import annotations

import pytest

from neuro_primitives.estimation.interactions import (
    apply_cross_primitive_modifiers,
    effective_monoamines,
)
from neuro_primitives.estimation.models import FunctionalStateType
from neuro_primitives.estimation.state import (
    circadian_sleep_pressure,
    classify_functional_state,
    compute_sleep_drive,
    dopamine_serotonin_ratio,
)
from neuro_primitives.models import Primitive

P = Primitive


# ── Interactions ──────────────────────────────────────────────


class TestCrossPrimitiveModifiers:
    def test_no_suppression_below_threshold(self):
        scores = {P.DOPAMINE: 0.5, P.SEROTONIN: 0.5, P.ADENOSINE: 0.6, P.CORTISOL: 0.6}
        assert apply_cross_primitive_modifiers(scores) == scores

    def test_high_adenosine_suppresses_dopamine(self):
        scores = {P.DOPAMINE: 0.5, P.SEROTONIN: 0.5, P.ADENOSINE: 0.8, P.CORTISOL: 0.5}
        modified = apply_cross_primitive_modifiers(scores)
        assert modified[P.DOPAMINE] == pytest.approx(0.47)
        assert modified[P.SEROTONIN] == 0.5

    def test_high_cortisol_suppresses_both(self):
        scores = {P.DOPAMINE: 0.5, P.SEROTONIN: 0.5, P.ADENOSINE: 0.3, P.CORTISOL: 0.9}
        modified = apply_cross_primitive_modifiers(scores)
        assert modified[P.DOPAMINE] == pytest.approx(0.44)
        assert modified[P.SEROTONIN] == pytest.approx(0.455)
        assert modified[P.CORTISOL] == 0.9

    def test_input_untouched(self):
        scores = {P.DOPAMINE: 0.5, P.ADENOSINE: 1.0}
        apply_cross_primitive_modifiers(scores)
        assert scores[P.DOPAMINE] == 0.5


class TestEffectiveMonoamines:
    def test_reciprocal_inhibition(self):
        effective = effective_monoamines(0.6, 0.6)
        assert effective.dopamine == pytest.approx(0.51)
        assert effective.serotonin == pytest.approx(0.51)

    def test_never_negative(self):
        effective = effective_monoamines(0.0, 1.0)
        assert effective.dopamine == 0.0
        assert effective.serotonin == 1.0


# ── Functional state ──────────────────────────────────────────


class TestFunctionalState:
    @pytest.mark.parametrize(
        ("dopamine", "serotonin", "expected"),
        [
            (0.6, 0.6, FunctionalStateType.OPTIMAL),
            (0.59, 0.6, FunctionalStateType.DEPLETED),
            (0.7, 0.4, FunctionalStateType.DRIVEN_BUT_ANXIOUS),
            (0.4, 0.7, FunctionalStateType.CONTENT_BUT_UNMOTIVATED),
            (0.55, 0.3, FunctionalStateType.DEPLETED),
            (0.2, 0.2, FunctionalStateType.DEPLETED),
        ],
    )
    def test_classification(self, dopamine, serotonin, expected):
        assert classify_functional_state(dopamine, serotonin).state_type is expected

    def test_recommendations_present(self):
        state = classify_functional_state(0.2, 0.2)
        assert state.recommendations[0] == "Prioritize rest and sleep"
        assert "Recovery is the priority" in state.description

    def test_ratio(self):
        assert dopamine_serotonin_ratio(0.6, 0.3) == pytest.approx(2.0)
        assert dopamine_serotonin_ratio(0.5, 0.0) == pytest.approx(50.0)


# ── Sleep drive ───────────────────────────────────────────────


class TestSleepDrive:
    @pytest.mark.parametrize(
        ("hour", "phase", "expected"),
        [(3.0, 0.5, 1.0), (15.0, 0.5, 0.2), (10.0, 0.5, 0.5), (1.0, 1.0, 1.0), (0.0, 0.5, 0.85)],
    )
    def test_circadian_pressure(self, hour, phase, expected):
        assert circadian_sleep_pressure(hour, phase) == pytest.approx(expected)

    def test_blend(self, now):
        night = now.replace(hour=3, minute=0)
        afternoon = now.replace(hour=15, minute=0)
        assert compute_sleep_drive(1.0, 0.5, night) == pytest.approx(1.0)
        assert compute_sleep_drive(0.0, 0.5, afternoon) == pytest.approx(0.08)
