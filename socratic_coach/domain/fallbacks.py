"""Canned content used when the provider call fails."""

from typing import Dict, List

from socratic_coach.domain.models import Action, ActionCategory
from socratic_coach.domain.token_parser import new_action_id

# One reply per dialogue step; step 4 carries a well-formed ACTION token
FALLBACK_RESPONSES: Dict[int, str] = {
    1: (
        "I hear you. What you're feeling is valid, and I'm grateful you're "
        "sharing this with me. Take your time. I'm here."
    ),
    2: "That's really helpful to understand. Can you tell me more about what that feels like for you?",
    3: (
        "Here's what I'm noticing: sometimes our fears are actually invitations in disguise. "
        "What if this challenge is showing you exactly where your next growth is?"
    ),
    4: (
        "Let me suggest something small but meaningful:\n\n"
        '<ACTION>{"title": "A moment of self-compassion", '
        '"description": "Place your hand on your heart and say: I am doing the best I can, and that is enough.", '
        '"duration": 2, "category": "reflection", "limitingBelief": "I am not enough"}</ACTION>'
    ),
}

FALLBACK_STUCK_OPTIONS: List[str] = [
    "I need to think about that",
    "There's more to it",
    "I'm not sure how I feel",
]

# Defaults for fields missing from a synthesized core action
CORE_ACTION_DEFAULT_TITLE = "Transform Your Belief"
CORE_ACTION_DEFAULT_DESCRIPTION = "Take a moment to challenge this limiting belief."


def fallback_response(step: int) -> str:
    return FALLBACK_RESPONSES.get(step, FALLBACK_RESPONSES[1])


def fallback_stuck_options() -> List[str]:
    return list(FALLBACK_STUCK_OPTIONS)


def fallback_core_action(limiting_belief: str) -> Action:
    return Action(
        id=new_action_id(),
        title="Challenge Your Inner Story",
        description=(
            f'Write down the belief "{limiting_belief}" and then write 3 pieces '
            "of evidence that contradict it."
        ),
        duration=5,
        category=ActionCategory.REFLECTION.value,
        limiting_belief=limiting_belief,
    )
