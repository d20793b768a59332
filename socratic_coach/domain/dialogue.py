"""Four-step dialogue protocol: Validate -> Inquire -> Reframe -> Act.

Step 4 wraps back to step 2; step 1 is only re-entered by starting a new
conversation. Transitions depend on the current state and the model's raw
response text, never on the parsed tokens.
"""

import re
from dataclasses import replace
from typing import Optional

from socratic_coach.domain.models import DialogueState

STEP_VALIDATE = 1
STEP_INQUIRE = 2
STEP_REFRAME = 3
STEP_ACT = 4

# Inquiry turns before moving to the reframe
INQUIRY_TURNS = 2

# Loose trigger phrase, then the first quoted or colon-delimited clause
CORE_BELIEF_RE = re.compile(
    r"(?:core belief|root belief|underlying belief|you believe|the story).*?[\":]\s*([^.!?\"]+)",
    re.IGNORECASE,
)

STEP_DESCRIPTIONS = {
    STEP_VALIDATE: "Validating your feelings",
    STEP_INQUIRE: "Understanding deeper",
    STEP_REFRAME: "Offering a new perspective",
    STEP_ACT: "Suggesting an action",
}


def create_initial_state() -> DialogueState:
    """Fresh state for a new conversation."""
    return DialogueState()


def extract_core_belief(response: str) -> Optional[str]:
    """First clause the model labelled as the user's belief, or None."""
    match = CORE_BELIEF_RE.search(response or "")
    if not match:
        return None
    return match.group(1).strip()


def determine_next_step(state: DialogueState, response: str) -> DialogueState:
    """Return the state that follows one completed exchange."""
    if state.step == STEP_VALIDATE:
        return replace(state, step=STEP_INQUIRE, validation_complete=True)

    if state.step == STEP_INQUIRE:
        count = state.inquiry_count + 1
        if count < INQUIRY_TURNS:
            return replace(state, inquiry_count=count)
        belief = extract_core_belief(response)
        return replace(
            state,
            step=STEP_REFRAME,
            inquiry_count=count,
            core_belief_identified=belief if belief is not None else state.core_belief_identified,
        )

    if state.step == STEP_REFRAME:
        return replace(state, step=STEP_ACT, reframe_given=True)

    if state.step == STEP_ACT:
        return replace(state, step=STEP_INQUIRE, inquiry_count=0, reframe_given=False)

    # Unknown step (e.g. corrupted persisted state): leave unchanged
    return state


def describe_step(state: DialogueState) -> str:
    return STEP_DESCRIPTIONS.get(state.step, "Listening")
