"""Render an :class:`EstimationResult` as plain-text context for the LLM."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Sequence

from neuro_primitives.estimation.decay import hours_between
from neuro_primitives.estimation.models import EstimationResult
from neuro_primitives.models import Event, EventType, Primitive

RECENT_EVENTS_HOURS = 12
MAX_RECENT_EVENTS = 10
TOP_CONTRIBUTORS = 3

# (>0.7, >0.5, >0.3, otherwise)
_INTERPRETATIONS: dict[Primitive, tuple[str, str, str, str]] = {
    Primitive.DOPAMINE: (
        "High motivation and drive",
        "Moderate motivation",
        "Low motivation",
        "Very low drive, depleted",
    ),
    Primitive.SEROTONIN: (
        "Good mood and contentment",
        "Stable mood",
        "Low mood, some irritability",
        "Very low mood, high irritability",
    ),
    Primitive.NOREPINEPHRINE: (
        "High alertness and focus",
        "Normal alertness",
        "Reduced alertness",
        "Very low alertness, foggy",
    ),
    Primitive.ADENOSINE: (
        "High sleep pressure, very tired",
        "Building sleep pressure",
        "Low sleep pressure",
        "Recently woken, alert",
    ),
    Primitive.CORTISOL: (
        "High stress response",
        "Moderate stress",
        "Normal stress levels",
        "Low stress, calm",
    ),
    Primitive.GLUCOSE: (
        "High blood sugar",
        "Stable blood sugar",
        "Declining blood sugar",
        "Low blood sugar, need fuel",
    ),
    Primitive.CIRCADIAN_PHASE: (
        "Aligned with natural rhythm",
        "Moderate circadian alignment",
        "Some circadian disruption",
        "Significant circadian misalignment",
    ),
}


def interpret_primitive_score(primitive: Primitive, score: float) -> str:
    high, moderate, low, very_low = _INTERPRETATIONS[primitive]
    if score > 0.7:
        return high
    if score > 0.5:
        return moderate
    if score > 0.3:
        return low
    return very_low


def _describe_event(event: Event) -> str:
    """Short property summary for the categories worth spelling out."""
    props: dict[str, Any] = event.properties
    if event.event_type is EventType.SLEEP and "duration_hours" in props and "quality" in props:
        return f": {props['duration_hours']} hours, {props['quality']} quality"
    if event.event_type is EventType.CAFFEINE and "dose_mg" in props:
        return f": {props['dose_mg']}mg"
    if event.event_type is EventType.EXERCISE and "intensity" in props and "duration_minutes" in props:
        return f": {props['intensity']} intensity, {props['duration_minutes']} min"
    if event.event_type is EventType.MEAL and "protein_grams" in props and "carb_grams" in props:
        return f": {props['protein_grams']}g protein, {props['carb_grams']}g carbs"
    return ""


def format_neurological_context(result: EstimationResult, events: Sequence[Event], now: datetime) -> str:
    """Build the multi-section state summary embedded in the system prompt."""
    lines: list[str] = []
    state = result.functional_state

    lines.append(f"CURRENT STATE: {state.state_type.value}")
    lines.append(state.description)
    lines.append("")

    lines.append("KEY METRICS:")
    lines.append(f"- Sleep Drive: {result.sleep_drive * 100:.1f}% (0=alert, 100=exhausted)")
    lines.append(f"- Dopamine/Serotonin Ratio: {result.dopamine_serotonin_ratio:.2f}")
    lines.append("")

    lines.append("NEUROLOGICAL PRIMITIVES (0.0-1.0 scale):")
    for primitive in Primitive:
        pstate = result.primitives.get(primitive.value)
        if pstate is None:
            continue
        score = pstate.modified_score
        lines.append(f"- {primitive.value.upper()}: {score:.2f} - {interpret_primitive_score(primitive, score)}")
        top = pstate.contributors[:TOP_CONTRIBUTORS]
        if top:
            influences = ", ".join(
                f"{c.event_type} {c.hours_ago:.1f}h ago ({c.decayed_impact:+.2f})" for c in top
            )
            lines.append(f"  Recent influences: {influences}")
        if pstate.acute_score is not None and pstate.chronic_score is not None:
            lines.append(
                f"  Acute (recent): {pstate.acute_score:.2f}, Chronic (baseline): {pstate.chronic_score:.2f}"
            )
    lines.append("")

    if result.detected_sequences:
        lines.append("DETECTED PATTERNS:")
        for seq in result.detected_sequences:
            lines.append(f"- {seq.pattern_name}: affects {seq.impact_on_primitive.value} ({seq.adjustment:+.2f})")
        lines.append("")

    cutoff = now - timedelta(hours=RECENT_EVENTS_HOURS)
    recent = sorted(
        (e for e in events if cutoff <= e.timestamp <= now),
        key=lambda e: e.timestamp,
        reverse=True,
    )[:MAX_RECENT_EVENTS]
    if recent:
        lines.append(f"RECENT EVENTS (last {RECENT_EVENTS_HOURS} hours):")
        for event in recent:
            hours_ago = hours_between(now, event.timestamp)
            lines.append(f"- {event.event_type.value} {hours_ago:.1f}h ago{_describe_event(event)}")
        lines.append("")

    if state.recommendations:
        lines.append("RECOMMENDATIONS:")
        lines.extend(f"- {rec}" for rec in state.recommendations)

    return "\n".join(lines)
