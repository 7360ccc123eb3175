"""Tests for the sequence detector and its pattern registry."""

from __future__ import annotations

from datetime import timedelta

import pytest

from neuro_primitives.estimation.models import DetectedSequence
from neuro_primitives.estimation.sequences import (
    SequenceDetector,
    SequencePattern,
    apply_sequence_adjustments,
)
from neuro_primitives.models import EventType, Primitive


@pytest.fixture
def three_nights(make_event, now):
    """Three nights ending this morning: poor, fair, good (oldest first)."""
    qualities = ["poor", "fair", "good"]
    return [
        make_event(
            EventType.SLEEP,
            now - timedelta(days=3 - i, hours=-13),
            end=now - timedelta(days=3 - i, hours=-21),
            event_id=f"sleep_{i}",
            quality=quality,
        )
        for i, quality in enumerate(qualities)
    ]


class TestChronicSleepDeprivation:
    def test_two_poor_of_three_detected(self, three_nights, now):
        detected = SequenceDetector().detect(three_nights, now)
        assert len(detected) == 2
        assert {d.impact_on_primitive for d in detected} == {Primitive.DOPAMINE, Primitive.SEROTONIN}
        adjustments = {d.impact_on_primitive: d.adjustment for d in detected}
        assert adjustments == {Primitive.DOPAMINE: -0.2, Primitive.SEROTONIN: -0.15}
        for d in detected:
            assert d.pattern_name == "chronic_sleep_deprivation"
            assert sorted(d.events) == ["sleep_0", "sleep_1", "sleep_2"]

    def test_one_poor_night_not_detected(self, make_event, now):
        sleeps = [
            make_event(EventType.SLEEP, now - timedelta(hours=h), quality=q)
            for h, q in ((58, "good"), (34, "poor"), (10, "excellent"))
        ]
        assert SequenceDetector().detect(sleeps, now) == []

    def test_single_sleep_never_matches(self, make_event, now):
        sleep = make_event(EventType.SLEEP, now - timedelta(hours=10), quality="poor")
        assert SequenceDetector().detect([sleep], now) == []

    def test_old_sleeps_outside_lookback(self, make_event, now):
        sleeps = [make_event(EventType.SLEEP, now - timedelta(hours=h), quality="poor") for h in (80, 100)]
        assert SequenceDetector().detect(sleeps, now) == []


class TestPatternRegistry:
    def test_remove_pattern(self, three_nights, now):
        detector = SequenceDetector()
        assert detector.remove_pattern("chronic_sleep_deprivation") is True
        assert detector.remove_pattern("chronic_sleep_deprivation") is False
        assert detector.detect(three_nights, now) == []

    def test_add_pattern(self, make_event, now):
        def match_any_caffeine(events):
            ids = [e.event_id for e in events if e.event_type is EventType.CAFFEINE]
            return ids or None

        detector = SequenceDetector(patterns=[])
        detector.add_pattern(
            SequencePattern("caffeinated", match_any_caffeine, {Primitive.NOREPINEPHRINE: 0.1})
        )
        coffee = make_event(EventType.CAFFEINE, now - timedelta(hours=1), event_id="c1")
        detected = detector.detect([coffee], now)
        assert [d.pattern_name for d in detected] == ["caffeinated"]
        assert detected[0].events == ["c1"]
        assert [p.name for p in detector.list_patterns()] == ["caffeinated"]


class TestApplyAdjustments:
    def test_clamped(self):
        sequences = [
            DetectedSequence(
                pattern_name="x", events=[], impact_on_primitive=Primitive.DOPAMINE, adjustment=-0.3
            )
        ]
        scores = {Primitive.DOPAMINE: 0.1, Primitive.SEROTONIN: 0.5}
        adjusted = apply_sequence_adjustments(scores, sequences)
        assert adjusted == {Primitive.DOPAMINE: 0.0, Primitive.SEROTONIN: 0.5}
        assert scores[Primitive.DOPAMINE] == 0.1
