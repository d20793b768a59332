"""Socratic Coach — four-step coaching dialogue over a text-generation provider."""

from socratic_coach.config import CONFIG, CoachConfig, ProviderConfig, __version__
from socratic_coach.domain import (
    Action,
    ChatSession,
    DialogueResult,
    DialogueState,
    ParsedMessage,
    SocraticCoach,
    create_initial_state,
    parse_message_tokens,
)
from socratic_coach.ports import ProviderError, TextGenerationPort
from socratic_coach.adapters.llm import ClaudeCliAdapter, GroqAdapter, create_provider
from socratic_coach.adapters.storage import JsonStorage

__all__ = [
    "__version__",
    "CONFIG",
    "CoachConfig",
    "ProviderConfig",
    "Action",
    "ChatSession",
    "DialogueResult",
    "DialogueState",
    "ParsedMessage",
    "SocraticCoach",
    "create_initial_state",
    "parse_message_tokens",
    "ProviderError",
    "TextGenerationPort",
    "ClaudeCliAdapter",
    "GroqAdapter",
    "create_provider",
    "JsonStorage",
]
