"""FastAPI application — demo profiles, estimation timelines and chat.

This module wires together:
- CORS, request logging and error-handling middleware
- Demo profile listing with timezone shifting
- Profile timelines and custom event-log estimates
- The LLM chat bridge
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta

import structlog
from fastapi import FastAPI, HTTPException, Query

from neuro_primitives import __version__
from neuro_primitives.agent.core import (
    ChatBridge,
    ChatBridgeError,
    ChatNotConfiguredError,
    ChatRequest,
    ChatResponse,
)
from neuro_primitives.api.middleware import setup_middleware
from neuro_primitives.api.schemas import (
    EstimateRequest,
    EstimateResponse,
    EventsEstimateRequest,
    TimelinePointOut,
)
from neuro_primitives.config import get_settings
from neuro_primitives.estimation.models import EstimationResult
from neuro_primitives.estimation.pipeline import PrimitiveEstimator, build_timeline
from neuro_primitives.profiles import Profile, generate_profile_events, get_all_profiles, shift_events

logger = structlog.get_logger(__name__)

# ── Shared state (initialised in lifespan) ────────────────────

_estimator: PrimitiveEstimator | None = None
_chat_bridge: ChatBridge | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hooks."""
    global _estimator, _chat_bridge

    settings = get_settings()
    _estimator = PrimitiveEstimator()
    _chat_bridge = ChatBridge(settings=settings, estimator=_estimator)

    logger.info("server.started", port=settings.api_port, chat_configured=bool(settings.openai_api_key))

    yield  # ← application runs

    _estimator = None
    _chat_bridge = None
    logger.info("server.stopped")


app = FastAPI(
    title="Neuro Primitives API",
    description="Research-based estimation of neurobiological primitives from life events.",
    version=__version__,
    lifespan=lifespan,
)

# ── Middleware ────────────────────────────────────────────────
setup_middleware(app)


def _require_estimator() -> PrimitiveEstimator:
    if _estimator is None:
        raise HTTPException(503, "Estimator not ready.")
    return _estimator


# ── Health ────────────────────────────────────────────────────


@app.get("/health", tags=["system"])
async def health():
    return {"status": "ok", "version": __version__}


# ── Profiles ──────────────────────────────────────────────────


@app.get("/api/profiles", response_model=list[Profile], tags=["profiles"])
async def list_profiles(tz_offset: int = Query(0, description="Minutes to shift schedules by.")):
    profiles = get_all_profiles()
    if tz_offset:
        for profile in profiles:
            profile.schedule = shift_events(profile.schedule, tz_offset)
    return profiles


# ── Estimation ────────────────────────────────────────────────


@app.post("/api/estimate", response_model=EstimateResponse, tags=["estimation"])
def estimate_profile(body: EstimateRequest):
    """Timeline over the last display days for a demo profile.

    Events are generated with extra padding days so that the longest
    context window has full history from the first timeline point.
    """
    estimator = _require_estimator()
    settings = get_settings()
    now = datetime.now(UTC)

    days = settings.timeline_display_days + settings.timeline_padding_days
    events = generate_profile_events(body.profile_id, days, now=now).events
    events = shift_events(events, body.timezone_offset_minutes)

    start = now - timedelta(days=settings.timeline_display_days)
    points = build_timeline(events, start, now, body.resolution_hours, estimator=estimator)
    final_state = estimator.estimate_at_time(events, now)

    logger.info(
        "api.estimate_profile",
        profile=body.profile_id,
        points=len(points),
        state=final_state.functional_state.state_type.value,
    )
    return EstimateResponse(
        timeline=[TimelinePointOut(timestamp=p.timestamp, primitives=p.primitives) for p in points],
        final_state=final_state,
    )


@app.post("/api/estimate/events", response_model=EstimationResult, tags=["estimation"])
def estimate_events(body: EventsEstimateRequest):
    """Single estimate for a caller-supplied event log."""
    estimator = _require_estimator()
    when = body.timestamp or datetime.now(UTC)
    return estimator.estimate_at_time(body.events, when)


# ── Chat ──────────────────────────────────────────────────────


@app.post("/api/chat", response_model=ChatResponse, tags=["chat"])
async def chat(body: ChatRequest):
    if _chat_bridge is None:
        raise HTTPException(503, "Chat bridge not ready.")
    try:
        return await _chat_bridge.reply(body)
    except ChatNotConfiguredError as exc:
        raise HTTPException(503, str(exc)) from exc
    except ChatBridgeError as exc:
        raise HTTPException(502, str(exc)) from exc
