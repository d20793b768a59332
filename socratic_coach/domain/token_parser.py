"""Inline token parsing for coach responses.

Pure Python, no framework dependencies.

Two token forms may appear anywhere in the model's free text:

    <BUTTONS>["Option 1", "Option 2"]</BUTTONS>
    <ACTION>{"title": "...", "duration": 5, ...}</ACTION>

Each form is scanned independently over the whole text; the matches are
then merged by start offset. When a BUTTONS and an ACTION match start at
the same offset, BUTTONS comes first (scan order). A match whose payload
is not valid JSON of the expected shape is dropped on its own; the rest
of the message still parses.
"""

from __future__ import annotations

import json
import re
import sys
import uuid
from typing import Any, List, NamedTuple, Optional

from socratic_coach.domain.models import (
    Action,
    ActionCategory,
    ActionToken,
    ButtonsToken,
    ChatToken,
    ParsedMessage,
    TextToken,
)

BUTTONS_RE = re.compile(r"<BUTTONS>\s*(\[.*?\])\s*</BUTTONS>", re.DOTALL)
ACTION_RE = re.compile(r"<ACTION>\s*(\{.*?\})\s*</ACTION>", re.DOTALL)

# Defaults for fields missing from an ACTION payload
DEFAULT_ACTION_TITLE = "Take Action"
DEFAULT_ACTION_DESCRIPTION = ""
DEFAULT_ACTION_DURATION = 5
DEFAULT_ACTION_CATEGORY = ActionCategory.ACTION.value
DEFAULT_LIMITING_BELIEF = ""

# Scan order, used as the tie-breaker for matches at the same offset
_BUTTONS_ORDER = 0
_ACTION_ORDER = 1


def _log(msg: str):
    print(f"[parser] {msg}", file=sys.stderr)


class _TokenMatch(NamedTuple):
    start: int
    order: int
    end: int
    token: Optional[ChatToken]


def new_action_id() -> str:
    """Fresh identifier for a parsed action. Never read from model output."""
    return f"action-{uuid.uuid4().hex[:12]}"


def coerce_duration(value: Any, default: int = DEFAULT_ACTION_DURATION) -> int:
    """Minutes as a positive int; falsy or unusable values take the default."""
    if isinstance(value, bool) or not value:
        return default
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return default
    return minutes if minutes > 0 else default


def coerce_category(value: Any, default: str = DEFAULT_ACTION_CATEGORY) -> str:
    """One of the ActionCategory values; anything else takes the default."""
    if not isinstance(value, str) or not value.strip():
        return default
    try:
        return ActionCategory(value.strip().lower()).value
    except ValueError:
        return default


def build_buttons_token(payload: str) -> Optional[ButtonsToken]:
    """Parse a BUTTONS payload; None when it is not a JSON array of strings."""
    try:
        options = json.loads(payload)
    except json.JSONDecodeError as e:
        _log(f"Failed to parse BUTTONS token: {e}")
        return None
    if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
        _log("Dropped BUTTONS token: payload is not a list of strings")
        return None
    return ButtonsToken(options=options)


def build_action_token(payload: str) -> Optional[ActionToken]:
    """Parse an ACTION payload; None when it is not a JSON object."""
    try:
        fields = json.loads(payload)
    except json.JSONDecodeError as e:
        _log(f"Failed to parse ACTION token: {e}")
        return None
    if not isinstance(fields, dict):
        _log("Dropped ACTION token: payload is not an object")
        return None
    return ActionToken(action=Action(
        id=new_action_id(),
        title=str(fields.get("title") or DEFAULT_ACTION_TITLE),
        description=str(fields.get("description") or DEFAULT_ACTION_DESCRIPTION),
        duration=coerce_duration(fields.get("duration")),
        category=coerce_category(fields.get("category")),
        limiting_belief=str(fields.get("limitingBelief") or DEFAULT_LIMITING_BELIEF),
    ))


def _collect_matches(text: str) -> List[_TokenMatch]:
    """All BUTTONS and ACTION spans, sorted by (start, scan order).

    Spans whose payload failed to parse are kept with ``token=None`` so
    they still separate the text around them.
    """
    matches: List[_TokenMatch] = []
    for m in BUTTONS_RE.finditer(text):
        token = build_buttons_token(m.group(1))
        matches.append(_TokenMatch(m.start(), _BUTTONS_ORDER, m.end(), token))
    for m in ACTION_RE.finditer(text):
        token = build_action_token(m.group(1))
        matches.append(_TokenMatch(m.start(), _ACTION_ORDER, m.end(), token))
    matches.sort(key=lambda tm: (tm.start, tm.order))
    return matches


def parse_message_tokens(content: str) -> ParsedMessage:
    """Split a raw model response into ordered text/buttons/action tokens."""
    matches = _collect_matches(content)
    if not matches:
        return ParsedMessage(tokens=[TextToken(content=content.strip())], raw_content=content)

    tokens: List[ChatToken] = []
    last_end = 0
    for match in matches:
        if match.start < last_end:
            # Nested inside a span already consumed
            continue
        text = content[last_end:match.start].strip()
        if text:
            tokens.append(TextToken(content=text))
        if match.token is not None:
            tokens.append(match.token)
        last_end = match.end

    trailing = content[last_end:].strip()
    if trailing:
        tokens.append(TextToken(content=trailing))

    if not tokens:
        # Only dropped spans, nothing else to show
        tokens.append(TextToken(content=""))

    return ParsedMessage(tokens=tokens, raw_content=content)


def strip_tokens(text: str) -> str:
    """Remove all BUTTONS/ACTION markup from text."""
    text = BUTTONS_RE.sub("", text)
    text = ACTION_RE.sub("", text)
    return re.sub(r"\n{3,}", "\n\n", text).strip()
