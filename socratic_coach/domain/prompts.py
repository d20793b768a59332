"""Prompt composition for the coach.

Static wording lives in ``templates/*.md`` (package data). A directory
named by ``COACH_TEMPLATE_DIR`` overrides individual files, so the persona
can be edited without touching code.
"""

from functools import lru_cache
from importlib import resources
from pathlib import Path
from string import Template
from typing import Optional, Sequence

from socratic_coach.config import CONFIG
from socratic_coach.domain.dialogue import STEP_ACT, STEP_INQUIRE, STEP_REFRAME, STEP_VALIDATE, INQUIRY_TURNS
from socratic_coach.domain.models import ConversationTurn, DialogueState

PERSONA_TEMPLATE = "persona.md"
CORE_ACTION_TEMPLATE = "core_action.md"
STUCK_OPTIONS_TEMPLATE = "stuck_options.md"

SPEAKER_LABELS = {"user": "User", "assistant": "Gabby"}
EMPTY_HISTORY = "This is the start of the conversation."


@lru_cache(maxsize=None)
def _read_template(name: str, override_dir: str) -> str:
    if override_dir:
        candidate = Path(override_dir) / name
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8").strip()
    return (resources.files("socratic_coach.domain") / "templates" / name).read_text(encoding="utf-8").strip()


def load_template(name: str) -> str:
    return _read_template(name, CONFIG.get("template_dir", ""))


def step_instructions(state: DialogueState) -> str:
    """Guidance for the current step of the protocol."""
    if state.step == STEP_VALIDATE:
        return (
            "CURRENT STEP: VALIDATION (Step 1)\n"
            "Your task: Validate their feeling completely. Make them feel heard. "
            "Do NOT ask questions yet, do NOT offer advice. Just reflect back what they "
            "shared with genuine empathy. This builds trust.\n"
            "After this message, we'll move to inquiry."
        )

    if state.step == STEP_INQUIRE:
        lines = [
            "CURRENT STEP: DEEP INQUIRY (Step 2)",
            f"Inquiry turn: {state.inquiry_count + 1} of 2-3",
            "Your task: Ask ONE thoughtful question to go deeper. You're looking for the "
            "CORE BELIEF beneath their surface concern. What story are they telling themselves? "
            "What would it mean about them if their fear came true?",
        ]
        if state.inquiry_count >= INQUIRY_TURNS:
            lines.append(
                "You've asked enough questions. If you sense the core belief, "
                "move to the reframe in your next message."
            )
        lines.append("If they seem stuck, offer BUTTONS with emotional/direction options.")
        return "\n".join(lines)

    if state.step == STEP_REFRAME:
        if state.core_belief_identified:
            belief_line = f'Core belief identified: "{state.core_belief_identified}"'
        else:
            belief_line = "Identify and address the core limiting belief you've uncovered."
        return (
            "CURRENT STEP: REFRAME (Step 3)\n"
            f"{belief_line}\n"
            "Your task: Offer a powerful cognitive reframe. This should address the DEEP belief, "
            "not the surface issue. Make it feel like a gift, an insight they can carry with them. "
            "Use sophisticated psychology woven into warm language.\n"
            "After this reframe, we'll suggest an action."
        )

    if state.step == STEP_ACT:
        belief = state.core_belief_identified or "limiting belief about themselves"
        return (
            "CURRENT STEP: ACTION SUGGESTION (Step 4)\n"
            f'Core belief addressed: "{belief}"\n'
            "Your task: Now offer a micro-action using the <ACTION> token. The action MUST "
            "directly address the limiting belief you reframed, not just the surface concern. "
            "Make it feel inviting and achievable.\n"
            "The action should be:\n"
            "- 5 minutes or less\n"
            "- Specifically connected to transforming their limiting belief\n"
            "- Elegant and intentional, not generic\n"
            "Include the ACTION token in your response."
        )

    return ""


def format_history(history: Sequence[ConversationTurn], window: int = 6) -> str:
    """Last ``window`` turns, oldest first, as speaker-labelled lines."""
    recent = list(history)[-window:] if window > 0 else []
    if not recent:
        return EMPTY_HISTORY
    return "\n\n".join(
        f"{SPEAKER_LABELS.get(turn.role, 'User')}: {turn.content}" for turn in recent
    )


def compose_dialogue_prompt(
    state: DialogueState,
    user_message: str,
    history: Sequence[ConversationTurn] = (),
    user_context: Optional[str] = None,
    window: int = 6,
) -> str:
    """Build the single prompt string for one dialogue turn."""
    parts = [
        load_template(PERSONA_TEMPLATE),
        step_instructions(state),
        "CONVERSATION SO FAR:\n" + format_history(history, window),
    ]
    if user_context:
        parts.append(f"User's general life area they're working on: {user_context}")
    parts.append(f'User\'s latest message: "{user_message}"')
    parts.append("Gabby's response (following the current step instructions exactly):")
    return "\n\n".join(parts)


def compose_core_action_prompt(
    limiting_belief: str,
    user_context: str,
    life_area: Optional[str] = None,
) -> str:
    return Template(load_template(CORE_ACTION_TEMPLATE)).substitute(
        limiting_belief=limiting_belief,
        user_context=user_context,
        life_area_line=f"Life area: {life_area}" if life_area else "",
    )


def compose_stuck_options_prompt(user_message: str, context: str) -> str:
    return Template(load_template(STUCK_OPTIONS_TEMPLATE)).substitute(
        user_message=user_message,
        context=context,
    )
