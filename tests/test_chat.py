"""Tests for the chat bridge and its neurological context rendering."""

from __future__ import annotations

import threading

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from neuro_primitives.agent.context import format_neurological_context, interpret_primitive_score
from neuro_primitives.agent.core import (
    ChatBridge,
    ChatBridgeError,
    ChatMessage,
    ChatNotConfiguredError,
    ChatRequest,
)
from neuro_primitives.config import Settings
from neuro_primitives.models import Primitive
from neuro_primitives.profiles import generate_profile_events


class FakeLLM:
    """Records the prompt and returns a canned reply."""

    def __init__(self, reply: str = "You slept well.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list] = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, openai_api_key="", chat_context_days=3)


@pytest.fixture
def request_body() -> ChatRequest:
    return ChatRequest(
        messages=[
            ChatMessage(role="user", content="Why am I tired?"),
            ChatMessage(role="assistant", content="Let me check."),
            ChatMessage(role="user", content="Well?"),
        ],
        profile_id="sleep_deprived",
    )


# ── Context rendering ─────────────────────────────────────────


class TestContext:
    @pytest.mark.parametrize(
        ("score", "expected"),
        [(0.8, "High motivation and drive"), (0.7, "Moderate motivation"), (0.31, "Low motivation"), (0.3, "Very low drive, depleted")],
    )
    def test_interpretation_thresholds(self, score, expected):
        assert interpret_primitive_score(Primitive.DOPAMINE, score) == expected

    def test_sections(self, estimator, now):
        events = generate_profile_events("sleep_deprived", 3, now=now).events
        result = estimator.estimate_at_time(events, now)
        text = format_neurological_context(result, events, now)

        assert text.startswith(f"CURRENT STATE: {result.functional_state.state_type.value}")
        for section in ("KEY METRICS:", "NEUROLOGICAL PRIMITIVES", "DETECTED PATTERNS:", "RECENT EVENTS (last 12 hours):", "RECOMMENDATIONS:"):
            assert section in text
        assert "Acute (recent):" in text
        assert "- caffeine" in text
        assert "200.0mg" in text

    def test_no_patterns_section_when_none(self, estimator, now):
        result = estimator.estimate_at_time([], now)
        text = format_neurological_context(result, [], now)
        assert "DETECTED PATTERNS" not in text
        assert "RECENT EVENTS" not in text


# ── Bridge ────────────────────────────────────────────────────


class TestChatBridge:
    async def test_reply(self, settings, request_body, now):
        llm = FakeLLM()
        bridge = ChatBridge(settings=settings, llm=llm)
        response = await bridge.reply(request_body, now=now)

        assert response.reply == "You slept well."
        (messages,) = llm.calls
        assert isinstance(messages[0], SystemMessage)
        assert "chronic_sleep_deprivation" in messages[0].content
        assert "2025-01-18 10:00 UTC" in messages[0].content
        assert [type(m) for m in messages[1:]] == [HumanMessage, AIMessage, HumanMessage]
        assert messages[-1].content == "Well?"

    async def test_empty_reply(self, settings, request_body, now):
        bridge = ChatBridge(settings=settings, llm=FakeLLM(reply=""))
        response = await bridge.reply(request_body, now=now)
        assert response.reply == "No reply."

    async def test_not_configured(self, settings, request_body):
        bridge = ChatBridge(settings=settings)
        with pytest.raises(ChatNotConfiguredError):
            await bridge.reply(request_body)

    async def test_upstream_failure(self, settings, request_body, now):
        bridge = ChatBridge(settings=settings, llm=FakeLLM(error=TimeoutError("slow")))
        with pytest.raises(ChatBridgeError, match="slow"):
            await bridge.reply(request_body, now=now)

    def test_default_profile(self, settings, now):
        bridge = ChatBridge(settings=settings, llm=FakeLLM())
        messages = bridge.build_messages(ChatRequest(messages=[]), now)
        assert len(messages) == 1
        assert "CURRENT STATE:" in messages[0].content

    async def test_estimation_runs_off_event_loop(self, settings, request_body, now):
        loop_thread = threading.get_ident()
        seen: list[int] = []

        class RecordingBridge(ChatBridge):
            def build_messages(self, request, when):
                seen.append(threading.get_ident())
                return super().build_messages(request, when)

        bridge = RecordingBridge(settings=settings, llm=FakeLLM())
        await bridge.reply(request_body, now=now)
        assert seen and seen[0] != loop_thread
