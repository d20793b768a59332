"""SocraticCoach — coaching dialogue logic, no framework dependencies.

Every public entry point makes exactly one provider call and always
returns a usable value: provider failures are replaced by canned content
that runs through the same parse/transition path as a real response.
"""

import asyncio
import json
import re
import sys
from typing import List, Optional, Sequence

from socratic_coach.domain.dialogue import determine_next_step
from socratic_coach.domain.fallbacks import (
    CORE_ACTION_DEFAULT_DESCRIPTION,
    CORE_ACTION_DEFAULT_TITLE,
    fallback_core_action,
    fallback_response,
    fallback_stuck_options,
)
from socratic_coach.domain.models import (
    Action,
    ActionCategory,
    ConversationTurn,
    DialogueResult,
    DialogueState,
)
from socratic_coach.domain.prompts import (
    compose_core_action_prompt,
    compose_dialogue_prompt,
    compose_stuck_options_prompt,
)
from socratic_coach.domain.token_parser import (
    coerce_category,
    coerce_duration,
    new_action_id,
    parse_message_tokens,
)
from socratic_coach.ports.outbound import ProviderError, TextGenerationPort

# Greedy: outermost object / array in the reply
JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
JSON_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)

STUCK_OPTION_COUNT = 3


def _pad_options(options: List[str]) -> List[str]:
    """Exactly three replies; short lists are topped up from the defaults."""
    padded = list(options[:STUCK_OPTION_COUNT])
    for option in fallback_stuck_options():
        if len(padded) >= STUCK_OPTION_COUNT:
            break
        if option not in padded:
            padded.append(option)
    return padded


def _log(msg: str):
    print(f"[coach] {msg}", file=sys.stderr)


class SocraticCoach:
    """Runs coaching turns against a TextGenerationPort.

    Holds no conversation state: the caller passes the current
    DialogueState in and stores the returned one.
    """

    def __init__(
        self,
        provider: TextGenerationPort,
        history_window: int = 6,
        timeout: Optional[float] = 30.0,
    ):
        self.provider = provider
        self.history_window = history_window
        self.timeout = timeout

    async def _generate(self, prompt: str) -> str:
        """One provider attempt, bounded by ``timeout``. Raises on failure."""
        if self.timeout:
            text = await asyncio.wait_for(self.provider.generate_text(prompt), timeout=self.timeout)
        else:
            text = await self.provider.generate_text(prompt)
        if not text or not text.strip():
            raise ProviderError("Empty response from provider")
        return text

    @staticmethod
    def _complete_turn(state: DialogueState, response: str) -> DialogueResult:
        return DialogueResult(
            response=response,
            parsed_response=parse_message_tokens(response),
            new_state=determine_next_step(state, response),
        )

    async def generate_response(
        self,
        user_message: str,
        history: Sequence[ConversationTurn],
        state: DialogueState,
        user_context: Optional[str] = None,
    ) -> DialogueResult:
        """Run one dialogue turn. Never raises."""
        try:
            prompt = compose_dialogue_prompt(
                state,
                user_message,
                history=history,
                user_context=user_context,
                window=self.history_window,
            )
            response = await self._generate(prompt)
            return self._complete_turn(state, response)
        except Exception as e:
            _log(f"Socratic coaching error (step {state.step}), using fallback: {e!r}")
        return self._complete_turn(state, fallback_response(state.step))

    async def generate_core_action(
        self,
        limiting_belief: str,
        user_context: str,
        life_area: Optional[str] = None,
    ) -> Action:
        """Synthesize one micro-action for a limiting belief. Never raises."""
        try:
            prompt = compose_core_action_prompt(limiting_belief, user_context, life_area)
            response = await self._generate(prompt)
            match = JSON_OBJECT_RE.search(response)
            if match:
                parsed = json.loads(match.group(0))
                if isinstance(parsed, dict):
                    return Action(
                        id=new_action_id(),
                        title=str(parsed.get("title") or CORE_ACTION_DEFAULT_TITLE),
                        description=str(parsed.get("description") or CORE_ACTION_DEFAULT_DESCRIPTION),
                        duration=coerce_duration(parsed.get("duration")),
                        category=coerce_category(parsed.get("category"), ActionCategory.REFLECTION.value),
                        limiting_belief=str(parsed.get("limitingBelief") or limiting_belief),
                    )
            _log("Core action reply had no usable JSON object, using fallback")
        except Exception as e:
            _log(f"Failed to generate core action: {e!r}")
        return fallback_core_action(limiting_belief)

    async def generate_stuck_options(self, user_message: str, context: str) -> List[str]:
        """Suggest three short replies for a user who seems stuck. Never raises."""
        try:
            prompt = compose_stuck_options_prompt(user_message, context)
            response = await self._generate(prompt)
            match = JSON_ARRAY_RE.search(response)
            if match:
                parsed = json.loads(match.group(0))
                if parsed and isinstance(parsed, list) and all(isinstance(o, str) for o in parsed):
                    return _pad_options(parsed)
            _log("Stuck options reply had no usable JSON array, using fallback")
        except Exception as e:
            _log(f"Failed to generate stuck options: {e!r}")
        return fallback_stuck_options()
