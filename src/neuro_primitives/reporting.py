"""Human-readable text report for an :class:`EstimationResult`."""

from __future__ import annotations

from neuro_primitives.estimation.models import EstimationResult
from neuro_primitives.models import Primitive

_RULE = "═" * 66

# (≥0.7, ≥0.5, ≥0.3, otherwise)
_LEVELS: dict[Primitive, tuple[str, str, str, str]] = {
    Primitive.DOPAMINE: (
        "High (good for focus/work)",
        "Moderate",
        "Low (may affect motivation)",
        "Very low (impaired motivation/focus)",
    ),
    Primitive.SEROTONIN: (
        "High (stable mood)",
        "Moderate",
        "Low (may affect mood)",
        "Very low (mood instability risk)",
    ),
    Primitive.NOREPINEPHRINE: (
        "High (alert and focused)",
        "Moderate",
        "Low (reduced alertness)",
        "Very low (drowsy)",
    ),
    Primitive.CORTISOL: (
        "High (stressed/activated)",
        "Moderate (normal stress response)",
        "Low (relaxed)",
        "Very low (calm/depleted)",
    ),
    Primitive.ADENOSINE: (
        "High pressure (need sleep)",
        "Moderate pressure (building)",
        "Low pressure (alert)",
        "Very low pressure (recently rested)",
    ),
    Primitive.GLUCOSE: (
        "High (good energy availability)",
        "Moderate",
        "Low (may need food)",
        "Very low (depleted)",
    ),
}


def level_description(primitive: Primitive, score: float) -> str:
    levels = _LEVELS.get(primitive)
    if levels is None:
        return f"{score:.3f}"
    high, moderate, low, very_low = levels
    if score >= 0.7:
        return high
    if score >= 0.5:
        return moderate
    if score >= 0.3:
        return low
    return very_low


def sleep_drive_status(sleep_drive: float) -> str:
    if sleep_drive >= 0.75:
        return "🔴 VERY HIGH - Strong urge to sleep"
    if sleep_drive >= 0.6:
        return "🟠 HIGH - Significant sleep pressure"
    if sleep_drive >= 0.4:
        return "🟡 MODERATE - Building sleep pressure"
    return "🟢 LOW - Alert and wakeful"


def confidence_indicator(confidence: float) -> str:
    if confidence < 0.6:
        return "⚠️"
    if confidence > 0.9:
        return "✓"
    return ""


def _banner(title: str) -> list[str]:
    return ["", f"╔{_RULE}╗", f"║{title.center(66)}║", f"╚{_RULE}╝", ""]


def render_report(result: EstimationResult) -> str:
    """Multi-section report: constraints, primitives, sleep drive, state."""
    lines: list[str] = []
    lines += _banner("NEUROBIOLOGICAL PRIMITIVE ESTIMATION RESULTS")
    lines.append(f"Timestamp: {result.timestamp.isoformat()}")

    if result.physiological_constraints:
        lines += _banner("PHYSIOLOGICAL VALIDATION ADJUSTMENTS")
        for applied in result.physiological_constraints:
            lines.append(f"🔬 {applied.constraint_source.value} → {applied.primitive.value}")
            lines.append(f"   Original Score: {applied.original_score:.3f} → Adjusted: {applied.adjusted_score:.3f}")
            if applied.confidence_impact != 0.0:
                lines.append(f"   Confidence Impact: {applied.confidence_impact:+.2f}")
            lines.append(f"   Reason: {applied.reason}")
            lines.append("")

    lines += _banner("PRIMITIVE ESTIMATES")
    for primitive in Primitive:
        state = result.primitives.get(primitive.value)
        if state is None:
            continue
        lines.append(f"┌─ {primitive.value.upper()} {confidence_indicator(state.confidence)}".rstrip())
        lines.append(f"│  Score: {state.modified_score:.3f} (Confidence: {state.confidence * 100:.1f}%)")
        if state.acute_score is not None:
            lines.append(f"│  Acute: {state.acute_score:.3f} | Chronic: {state.chronic_score or 0.0:.3f}")
        if state.effective_score is not None:
            lines.append(f"│  Effective (after inhibition): {state.effective_score:.3f}")
        lines.append(f"│  Description: {level_description(primitive, state.modified_score)}")
        if state.contributors:
            lines.append("│")
            lines.append("│  Top Contributors:")
            for i, contrib in enumerate(state.contributors[:3], start=1):
                lines.append(
                    f"│    {i}. {contrib.event_type} ({contrib.hours_ago:.1f}h ago): {contrib.decayed_impact:+.3f}"
                )
        lines.append("└" + "─" * 57)
        lines.append("")

    lines += _banner("SLEEP DRIVE (Two-Process Model)")
    lines.append(f"Overall Sleep Drive: {result.sleep_drive:.3f} ({sleep_drive_status(result.sleep_drive)})")

    lines += _banner("INTERPRETATION")
    state = result.functional_state
    lines.append(f"Functional State: {state.state_type.value}")
    lines.append(state.description)
    lines.append("")
    lines.append("Recommendations:")
    lines.extend(f"  {i}. {rec}" for i, rec in enumerate(state.recommendations, start=1))
    return "\n".join(lines)
