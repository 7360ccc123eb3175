"""Temporal decay and per-primitive context windows.

Every event influence fades exponentially with a primitive-specific
half-life, and only events inside the primitive's lookback window are
considered at all.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from neuro_primitives.models import Primitive

_LN2 = math.log(2.0)


def decay(hours_ago: float, half_life: float) -> float:
    """Exponential half-life decay factor in ``(0, 1]``.

    ``decay(0, h) == 1`` and ``decay(h, h) == 0.5``.

    Raises
    ------
    ValueError
        If *half_life* is not strictly positive.  Half-lives are fixed
        policy constants, so this always indicates a programming error.
    """
    if half_life <= 0:
        raise ValueError(f"half_life must be positive, got {half_life!r}")
    return math.exp(-_LN2 / half_life * hours_ago)


def hours_between(later: datetime, earlier: datetime) -> float:
    """Elapsed time in hours, counted in whole minutes."""
    minutes = int((later - earlier).total_seconds() / 60)
    return minutes / 60.0


# ── Context windows ──────────────────────────────────────────


@dataclass(frozen=True)
class ContextConfig:
    """Lookback window and decay half-life for one primitive."""

    window_hours: int
    decay_half_life_hours: float

    def cutoff(self, estimation_time: datetime) -> datetime:
        return estimation_time - timedelta(hours=self.window_hours)

    def contains(self, timestamp: datetime, estimation_time: datetime) -> bool:
        """True if *timestamp* lies inside ``[cutoff, estimation_time]``."""
        return self.cutoff(estimation_time) <= timestamp <= estimation_time

    def weight(self, hours_ago: float) -> float:
        return decay(hours_ago, self.decay_half_life_hours)


_DEFAULT_CONFIGS: dict[Primitive, ContextConfig] = {
    Primitive.GLUCOSE: ContextConfig(window_hours=8, decay_half_life_hours=2.0),
    Primitive.NOREPINEPHRINE: ContextConfig(window_hours=12, decay_half_life_hours=4.0),
    Primitive.ADENOSINE: ContextConfig(window_hours=20, decay_half_life_hours=16.0),
    Primitive.CORTISOL: ContextConfig(window_hours=48, decay_half_life_hours=12.0),
    Primitive.DOPAMINE: ContextConfig(window_hours=72, decay_half_life_hours=24.0),
    Primitive.SEROTONIN: ContextConfig(window_hours=96, decay_half_life_hours=36.0),
    Primitive.CIRCADIAN_PHASE: ContextConfig(window_hours=168, decay_half_life_hours=72.0),
}

# Short-window "recent state" for the two monoamines
_ACUTE_CONFIGS: dict[Primitive, ContextConfig] = {
    Primitive.DOPAMINE: ContextConfig(window_hours=12, decay_half_life_hours=6.0),
    Primitive.SEROTONIN: ContextConfig(window_hours=16, decay_half_life_hours=8.0),
}

# Long-window "baseline state" for the two monoamines
_CHRONIC_CONFIGS: dict[Primitive, ContextConfig] = {
    Primitive.DOPAMINE: ContextConfig(window_hours=72, decay_half_life_hours=24.0),
    Primitive.SEROTONIN: ContextConfig(window_hours=96, decay_half_life_hours=36.0),
}


def context_for(primitive: Primitive) -> ContextConfig:
    """Default lookback window / half-life for *primitive*."""
    return _DEFAULT_CONFIGS[primitive]


def acute_context_for(primitive: Primitive) -> ContextConfig:
    """Acute window for dopamine / serotonin; default window otherwise."""
    return _ACUTE_CONFIGS.get(primitive, _DEFAULT_CONFIGS[primitive])


def chronic_context_for(primitive: Primitive) -> ContextConfig:
    """Chronic window for dopamine / serotonin; default window otherwise."""
    return _CHRONIC_CONFIGS.get(primitive, _DEFAULT_CONFIGS[primitive])
