"""ChatSession — one conversation's messages and dialogue state.

Wraps SocraticCoach with the bookkeeping a client needs: the message
list, the current DialogueState, and persistence through a StoragePort.
"""

import asyncio
import sys
import uuid
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from socratic_coach.domain.coach import SocraticCoach
from socratic_coach.domain.dialogue import create_initial_state, describe_step
from socratic_coach.domain.models import (
    ChatMessage,
    ConversationTurn,
    DialogueState,
    TextToken,
    message_from_dict,
)
from socratic_coach.ports.outbound import StoragePort

MAX_STORED_MESSAGES = 50
RESTORE_WINDOW = timedelta(hours=24)


def _log(msg: str):
    print(f"[session] {msg}", file=sys.stderr)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ChatSession:
    """Messages + DialogueState for a single conversation."""

    def __init__(
        self,
        coach: SocraticCoach,
        conversation_id: str = "default",
        storage: Optional[StoragePort] = None,
        user_context: Optional[str] = None,
    ):
        self.coach = coach
        self.conversation_id = conversation_id
        self.user_context = user_context
        self._storage = storage
        self._lock = asyncio.Lock()
        self.messages: List[ChatMessage] = []
        self.state: DialogueState = create_initial_state()

    @property
    def _messages_key(self) -> str:
        return f"chat_{self.conversation_id}"

    @property
    def _state_key(self) -> str:
        return f"dialogue_{self.conversation_id}"

    @property
    def is_loading(self) -> bool:
        return self._lock.locked()

    def restore(self, now: Optional[datetime] = None):
        """Load persisted messages (last 24h only) and dialogue state.

        Unreadable messages are skipped one by one; the dialogue state is
        loaded independently of them.
        """
        if not self._storage:
            return
        cutoff = (now or _now()) - RESTORE_WINDOW
        try:
            stored_messages = self._storage.load(self._messages_key)
        except Exception as e:
            _log(f"[{self.conversation_id}] failed to load messages: {e}")
            stored_messages = []
        restored = []
        for raw in stored_messages:
            try:
                msg = message_from_dict(raw)
                if datetime.fromisoformat(msg.timestamp) > cutoff:
                    restored.append(msg)
            except (KeyError, TypeError, ValueError) as e:
                _log(f"[{self.conversation_id}] skipped unreadable message: {e}")
        if restored:
            self.messages = restored

        try:
            stored_state = self._storage.load(self._state_key)
            if stored_state:
                self.state = DialogueState.from_dict(stored_state[0])
        except Exception as e:
            _log(f"[{self.conversation_id}] failed to restore dialogue state: {e}")

    def _persist(self):
        if not self._storage or not self.messages:
            return
        try:
            self._storage.save(
                self._messages_key,
                [m.to_dict() for m in self.messages[-MAX_STORED_MESSAGES:]],
            )
            self._storage.save(self._state_key, [self.state.to_dict()])
        except Exception as e:
            _log(f"[{self.conversation_id}] failed to save chat state: {e}")

    def history(self) -> List[ConversationTurn]:
        return [ConversationTurn(role=m.role, content=m.content) for m in self.messages]

    async def send_message(self, text: str) -> Optional[ChatMessage]:
        """Send a user message and return the coach's reply.

        Returns None (and does nothing) for blank input or while another
        message of this session is in flight.
        """
        trimmed = (text or "").strip()
        if not trimmed or self._lock.locked():
            return None

        async with self._lock:
            step = self.state.step
            history = self.history()
            self.messages.append(ChatMessage(
                id=f"user-{uuid.uuid4().hex[:12]}",
                role="user",
                content=trimmed,
                tokens=[TextToken(content=trimmed)],
                dialogue_step=step,
                timestamp=_now().isoformat(),
            ))

            result = await self.coach.generate_response(
                trimmed, history, self.state, user_context=self.user_context,
            )

            reply = ChatMessage(
                id=f"assistant-{uuid.uuid4().hex[:12]}",
                role="assistant",
                content=result.response,
                tokens=result.parsed_response.tokens,
                dialogue_step=step,
                timestamp=_now().isoformat(),
                metadata={"coreBeliefIdentified": result.new_state.core_belief_identified},
            )
            self.messages.append(reply)
            self.state = result.new_state
            self._persist()
            return reply

    async def select_option(self, option: str) -> Optional[ChatMessage]:
        """A tapped button sends its label as the user's message."""
        return await self.send_message(option)

    def clear(self):
        """Start a new conversation: drop messages and reset to step 1."""
        self.messages = []
        self.state = create_initial_state()
        if self._storage:
            try:
                self._storage.delete(self._messages_key)
                self._storage.delete(self._state_key)
            except Exception as e:
                _log(f"[{self.conversation_id}] failed to clear chat state: {e}")

    def last_user_message(self) -> str:
        for msg in reversed(self.messages):
            if msg.role == "user":
                return msg.content
        return ""

    def step_description(self) -> str:
        return describe_step(self.state)


class SessionRegistry:
    """Keeps recently used ChatSessions, evicting the least recent."""

    _MAX_SESSIONS = 100

    def __init__(self, coach: SocraticCoach, storage: Optional[StoragePort] = None):
        self.coach = coach
        self._storage = storage
        self._sessions: "OrderedDict[str, ChatSession]" = OrderedDict()

    def get(self, conversation_id: str, user_context: Optional[str] = None) -> ChatSession:
        """Return the session for ``conversation_id``, restoring it on first use."""
        session = self._sessions.get(conversation_id)
        if session is not None:
            self._sessions.move_to_end(conversation_id)
        else:
            session = ChatSession(self.coach, conversation_id, storage=self._storage)
            session.restore()
            self._sessions[conversation_id] = session
            while len(self._sessions) > self._MAX_SESSIONS:
                evicted_id, _ = self._sessions.popitem(last=False)
                _log(f"[sessions] evicted session: {evicted_id}")
        if user_context:
            session.user_context = user_context
        return session

    def __len__(self) -> int:
        return len(self._sessions)
