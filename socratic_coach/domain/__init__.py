"""Domain layer — pure Python, no framework dependencies."""

from socratic_coach.domain.models import (
    Action,
    ActionCategory,
    ActionToken,
    ButtonsToken,
    ChatMessage,
    ChatToken,
    ConversationTurn,
    DialogueResult,
    DialogueState,
    ParsedMessage,
    TextToken,
)
from socratic_coach.domain.token_parser import parse_message_tokens, strip_tokens
from socratic_coach.domain.dialogue import create_initial_state, determine_next_step, describe_step
from socratic_coach.domain.coach import SocraticCoach
from socratic_coach.domain.session import ChatSession, SessionRegistry

__all__ = [
    "Action",
    "ActionCategory",
    "ActionToken",
    "ButtonsToken",
    "ChatMessage",
    "ChatToken",
    "ConversationTurn",
    "DialogueResult",
    "DialogueState",
    "ParsedMessage",
    "TextToken",
    "parse_message_tokens",
    "strip_tokens",
    "create_initial_state",
    "determine_next_step",
    "describe_step",
    "SocraticCoach",
    "ChatSession",
    "SessionRegistry",
]
