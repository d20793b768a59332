"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ActionCategory(str, Enum):
    REFLECTION = "reflection"
    ACTION = "action"
    CONNECTION = "connection"
    RESEARCH = "research"
    PLANNING = "planning"


@dataclass(frozen=True)
class DialogueState:
    """Position of one conversation in the Validate/Inquire/Reframe/Act loop.

    Frozen: every turn produces a new value via ``dataclasses.replace``.
    """

    step: int = 1  # 1-Validate, 2-Inquire, 3-Reframe, 4-Act
    validation_complete: bool = False
    inquiry_count: int = 0
    core_belief_identified: Optional[str] = None
    reframe_given: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "validationComplete": self.validation_complete,
            "inquiryCount": self.inquiry_count,
            "coreBeliefIdentified": self.core_belief_identified,
            "reframeGiven": self.reframe_given,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DialogueState":
        step = data.get("step", 1)
        if step not in (1, 2, 3, 4):
            step = 1
        return cls(
            step=step,
            validation_complete=bool(data.get("validationComplete", False)),
            inquiry_count=max(0, int(data.get("inquiryCount", 0) or 0)),
            core_belief_identified=data.get("coreBeliefIdentified"),
            reframe_given=bool(data.get("reframeGiven", False)),
        )


@dataclass
class Action:
    """Micro-action card suggested to the user."""

    id: str
    title: str
    description: str
    duration: int  # minutes
    category: str
    limiting_belief: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "duration": self.duration,
            "category": self.category,
            "limitingBelief": self.limiting_belief,
        }


@dataclass
class TextToken:
    content: str
    type: str = field(default="text", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "content": self.content}


@dataclass
class ButtonsToken:
    options: List[str]
    type: str = field(default="buttons", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "options": list(self.options)}


@dataclass
class ActionToken:
    action: Action
    type: str = field(default="action", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "action": self.action.to_dict()}


ChatToken = Union[TextToken, ButtonsToken, ActionToken]


@dataclass
class ParsedMessage:
    """Ordered tokens of one model response plus the raw text they came from."""

    tokens: List[ChatToken]
    raw_content: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokens": [t.to_dict() for t in self.tokens],
            "rawContent": self.raw_content,
        }


@dataclass
class ConversationTurn:
    """One prior message in the conversation window."""

    role: str  # "user" | "assistant"
    content: str


@dataclass
class DialogueResult:
    """Outcome of one main dialogue turn."""

    response: str
    parsed_response: ParsedMessage
    new_state: DialogueState

    def to_dict(self) -> Dict[str, Any]:
        return {
            "response": self.response,
            "parsedResponse": self.parsed_response.to_dict(),
            "newState": self.new_state.to_dict(),
        }


@dataclass
class ChatMessage:
    """Persisted chat message as kept by a ChatSession."""

    id: str
    role: str
    content: str
    tokens: List[ChatToken]
    dialogue_step: int
    timestamp: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "tokens": [t.to_dict() for t in self.tokens],
            "dialogueStep": self.dialogue_step,
            "timestamp": self.timestamp,
            "metadata": dict(self.metadata),
        }


def token_from_dict(data: Dict[str, Any]) -> ChatToken:
    """Rebuild a token from its ``to_dict`` form."""
    kind = data.get("type")
    if kind == "buttons":
        return ButtonsToken(options=list(data.get("options", [])))
    if kind == "action":
        raw = data.get("action", {})
        return ActionToken(action=Action(
            id=raw.get("id", ""),
            title=raw.get("title", ""),
            description=raw.get("description", ""),
            duration=raw.get("duration", 5),
            category=raw.get("category", ActionCategory.ACTION.value),
            limiting_belief=raw.get("limitingBelief", ""),
        ))
    return TextToken(content=data.get("content", ""))


def message_from_dict(data: Dict[str, Any]) -> ChatMessage:
    return ChatMessage(
        id=data["id"],
        role=data["role"],
        content=data["content"],
        tokens=[token_from_dict(t) for t in data.get("tokens", [])],
        dialogue_step=data.get("dialogueStep", 1),
        timestamp=data["timestamp"],
        metadata=data.get("metadata") or {},
    )
