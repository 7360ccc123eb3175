"""LLM chat bridge grounded in the current neurobiological estimate."""

from neuro_primitives.agent.core import (
    ChatBridge,
    ChatBridgeError,
    ChatMessage,
    ChatNotConfiguredError,
    ChatRequest,
    ChatResponse,
)

__all__ = [
    "ChatBridge",
    "ChatBridgeError",
    "ChatMessage",
    "ChatNotConfiguredError",
    "ChatRequest",
    "ChatResponse",
]
