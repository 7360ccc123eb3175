"""Cross-primitive interactions.

High sleep pressure and high cortisol suppress the monoamines, and
dopamine and serotonin inhibit each other reciprocally.  The reciprocal
("effective") pair is reported alongside the modified scores and drives
the functional-state classification.
"""

from __future__ import annotations

from dataclasses import dataclass

from neuro_primitives.models import Primitive

_SUPPRESSION_THRESHOLD = 0.6
_ADENOSINE_ON_DOPAMINE = 0.15
_CORTISOL_ON_DOPAMINE = 0.2
_CORTISOL_ON_SEROTONIN = 0.15
INHIBITION_STRENGTH = 0.15


@dataclass(frozen=True)
class EffectiveMonoamines:
    dopamine: float
    serotonin: float


def _excess(value: float) -> float:
    return max(value - _SUPPRESSION_THRESHOLD, 0.0)


def apply_cross_primitive_modifiers(scores: dict[Primitive, float]) -> dict[Primitive, float]:
    """Return a copy of *scores* with adenosine/cortisol suppression applied."""
    modified = dict(scores)
    adenosine = scores.get(Primitive.ADENOSINE, 0.5)
    cortisol = scores.get(Primitive.CORTISOL, 0.5)

    if Primitive.DOPAMINE in scores:
        dopamine = (
            scores[Primitive.DOPAMINE]
            - _ADENOSINE_ON_DOPAMINE * _excess(adenosine)
            - _CORTISOL_ON_DOPAMINE * _excess(cortisol)
        )
        modified[Primitive.DOPAMINE] = max(0.0, min(1.0, dopamine))

    if Primitive.SEROTONIN in scores:
        serotonin = scores[Primitive.SEROTONIN] - _CORTISOL_ON_SEROTONIN * _excess(cortisol)
        modified[Primitive.SEROTONIN] = max(0.0, min(1.0, serotonin))

    return modified


def effective_monoamines(dopamine: float, serotonin: float) -> EffectiveMonoamines:
    """Reciprocal inhibition between dopamine and serotonin."""
    return EffectiveMonoamines(
        dopamine=max(0.0, dopamine - serotonin * INHIBITION_STRENGTH),
        serotonin=max(0.0, serotonin - dopamine * INHIBITION_STRENGTH),
    )
