"""Chat bridge — LLM conversation grounded in the current primitive estimate."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any, Literal

import structlog
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, Field

from neuro_primitives.agent.context import format_neurological_context
from neuro_primitives.agent.prompts import SYSTEM_PROMPT
from neuro_primitives.config import Settings, get_settings
from neuro_primitives.estimation.pipeline import PrimitiveEstimator
from neuro_primitives.profiles import generate_profile_events

logger = structlog.get_logger(__name__)


# ── Models ────────────────────────────────────────────────────


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Conversation so far plus the profile whose state grounds the reply."""

    messages: list[ChatMessage] = Field(default_factory=list)
    user_id: str | None = None
    profile_id: str | None = None


class ChatResponse(BaseModel):
    reply: str


# ── Errors ────────────────────────────────────────────────────


class ChatBridgeError(RuntimeError):
    """The chat model could not produce a reply."""


class ChatNotConfiguredError(ChatBridgeError):
    """No API key is configured for the chat model."""


# ── Bridge ────────────────────────────────────────────────────


_ROLE_TO_MESSAGE: dict[str, type[BaseMessage]] = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


class ChatBridge:
    """Estimate the requested profile, then ask the chat model.

    The chat model is created lazily on first use so that the API can start
    without credentials; pass *llm* to supply a pre-built model.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        estimator: PrimitiveEstimator | None = None,
        llm: Any | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._estimator = estimator or PrimitiveEstimator()
        self._llm = llm

    # ── Lazy LLM initialisation ───────────────────────────────

    def _ensure_llm(self) -> Any:
        if self._llm is None:
            if not self._settings.openai_api_key.strip():
                raise ChatNotConfiguredError("OPENAI_API_KEY is not configured")
            self._llm = ChatOpenAI(
                model=self._settings.openai_model,
                api_key=self._settings.openai_api_key.strip(),
                temperature=self._settings.chat_temperature,
                timeout=self._settings.chat_timeout_seconds,
            )
            logger.info("chat.llm_initialised", model=self._settings.openai_model)
        return self._llm

    # ── Conversation ──────────────────────────────────────────

    def build_messages(self, request: ChatRequest, now: datetime) -> list[BaseMessage]:
        """System prompt with the current state, followed by the conversation."""
        profile_id = request.profile_id or self._settings.default_profile
        event_data = generate_profile_events(profile_id, self._settings.chat_context_days, now=now)
        result = self._estimator.estimate_at_time(event_data.events, now)

        system = SYSTEM_PROMPT.format(
            context=format_neurological_context(result, event_data.events, now),
            current_time=now.strftime("%Y-%m-%d %H:%M UTC"),
        )
        messages: list[BaseMessage] = [SystemMessage(content=system)]
        messages.extend(_ROLE_TO_MESSAGE[m.role](content=m.content) for m in request.messages)
        return messages

    async def reply(self, request: ChatRequest, now: datetime | None = None) -> ChatResponse:
        """Produce the assistant's next message.

        Raises
        ------
        ChatNotConfiguredError
            If no API key is configured.
        ChatBridgeError
            If the chat model call fails.
        """
        llm = self._ensure_llm()
        now = now or datetime.now(UTC)
        # Estimation is CPU-bound; keep it off the event loop
        messages = await asyncio.to_thread(self.build_messages, request, now)

        try:
            response = await llm.ainvoke(messages)
        except Exception as exc:
            logger.error("chat.request_failed", error=str(exc))
            raise ChatBridgeError(f"chat model request failed: {exc}") from exc

        content = response.content if isinstance(response.content, str) else ""
        logger.info(
            "chat.reply",
            profile=request.profile_id or self._settings.default_profile,
            turns=len(request.messages),
            reply_chars=len(content),
        )
        return ChatResponse(reply=content or "No reply.")
