"""Shared pytest fixtures."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime
from typing import Any, Callable

import pytest

from neuro_primitives.estimation.pipeline import PrimitiveEstimator
from neuro_primitives.models import Event, EventType

EventFactory = Callable[..., Event]


@pytest.fixture
def now() -> datetime:
    """Fixed estimation time: 2025-01-18 10:00 UTC."""
    return datetime(2025, 1, 18, 10, 0, tzinfo=UTC)


@pytest.fixture
def make_event() -> EventFactory:
    counter = itertools.count(1)

    def _make(
        event_type: EventType | str,
        timestamp: datetime,
        end: datetime | None = None,
        event_id: str | None = None,
        **properties: Any,
    ) -> Event:
        return Event(
            event_id=event_id or f"e{next(counter)}",
            event_type=EventType(event_type),
            timestamp=timestamp,
            end_timestamp=end,
            properties=properties,
        )

    return _make


@pytest.fixture
def estimator() -> PrimitiveEstimator:
    return PrimitiveEstimator()
