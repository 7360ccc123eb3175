"""Primitive estimation — time-aware neurobiological state from life events.

This package turns a chronological event log into seven primitive scores
(dopamine, norepinephrine, serotonin, adenosine, circadian phase,
cortisol, glucose) at any point in time.

Architecture
------------
1. **Decay & context windows** (`decay.py`)
   - Exponential half-life decay
   - Per-primitive lookback windows, acute / chronic monoamine horizons

2. **Event impacts** (`impacts.py`)
   - One pure mapping per event category to signed raw impacts

3. **Base scores** (`scoring.py`)
   - Generic decayed aggregation over a baseline
   - Adenosine (wake accumulation, sleep / nap clearance, caffeine)
   - Circadian phase (habitual sleep onset, light exposure)
   - Cortisol rhythm with the awakening response
   - Dopamine / serotonin on acute and chronic horizons

4. **Sequences, interactions, constraints** (`sequences.py`,
   `interactions.py`, `constraints.py`)
   - Multi-event pattern registry
   - Cross-primitive suppression and reciprocal inhibition
   - Physiological readings as floors, ceilings, overrides and
     confidence penalties

5. **Orchestration** (`pipeline.py`, `state.py`)
   - Staged pipeline, sleep drive, functional state, timelines

Limitations
-----------
Scores are heuristic, research-inspired indices in ``[0, 1]``, not
measured concentrations.  Nothing here is a diagnosis.
"""

from neuro_primitives.estimation.models import (
    DetectedSequence,
    EstimationResult,
    EventContribution,
    FunctionalState,
    FunctionalStateType,
    MeasurementType,
    PhysiologicalConstraintApplied,
    PrimitiveState,
)
from neuro_primitives.estimation.pipeline import PrimitiveEstimator, TimelinePoint, build_timeline

__all__ = [
    "DetectedSequence",
    "EstimationResult",
    "EventContribution",
    "FunctionalState",
    "FunctionalStateType",
    "MeasurementType",
    "PhysiologicalConstraintApplied",
    "PrimitiveEstimator",
    "TimelinePoint",
    "build_timeline",
]
