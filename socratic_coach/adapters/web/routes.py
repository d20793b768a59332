"""Coach API routes."""

import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from socratic_coach.adapters.llm import create_provider
from socratic_coach.adapters.storage import JsonStorage
from socratic_coach.config import CoachConfig
from socratic_coach.domain.coach import SocraticCoach
from socratic_coach.domain.dialogue import create_initial_state
from socratic_coach.domain.models import ConversationTurn, DialogueState
from socratic_coach.domain.session import SessionRegistry

coach_router = APIRouter(prefix="/coach", tags=["Coach"])

_config = CoachConfig.from_env()
coach = SocraticCoach(
    create_provider(_config.provider),
    history_window=_config.history_window,
    timeout=_config.provider.timeout,
)
sessions = SessionRegistry(coach, JsonStorage(_config.storage_dir))

_CONVERSATION_ID_RE = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")


class TurnModel(BaseModel):
    role: str = Field(pattern="^(user|assistant)$")
    content: str


class StateModel(BaseModel):
    step: int = Field(default=1, ge=1, le=4)
    validationComplete: bool = False
    inquiryCount: int = Field(default=0, ge=0)
    coreBeliefIdentified: Optional[str] = None
    reframeGiven: bool = False


class RespondRequest(BaseModel):
    message: str
    history: List[TurnModel] = []
    state: Optional[StateModel] = None
    userContext: Optional[str] = None


class CoreActionRequest(BaseModel):
    limitingBelief: str
    userContext: str = ""
    lifeArea: Optional[str] = None


class StuckOptionsRequest(BaseModel):
    message: str
    context: str = ""


class StuckOptionsResponse(BaseModel):
    options: List[str]


class SessionMessageRequest(BaseModel):
    message: str
    userContext: Optional[str] = None


def _session_view(session) -> Dict[str, Any]:
    return {
        "conversationId": session.conversation_id,
        "messages": [m.to_dict() for m in session.messages],
        "state": session.state.to_dict(),
        "stepDescription": session.step_description(),
    }


def _check_conversation_id(conversation_id: str):
    if not _CONVERSATION_ID_RE.match(conversation_id):
        raise HTTPException(status_code=400, detail="Invalid conversation id")


@coach_router.get("/state/initial")
async def initial_state():
    return create_initial_state().to_dict()


@coach_router.post("/respond")
async def respond(req: RespondRequest):
    state = DialogueState.from_dict(req.state.model_dump()) if req.state else create_initial_state()
    history = [ConversationTurn(role=t.role, content=t.content) for t in req.history]
    result = await coach.generate_response(req.message, history, state, user_context=req.userContext)
    return result.to_dict()


@coach_router.post("/core-action")
async def core_action(req: CoreActionRequest):
    action = await coach.generate_core_action(req.limitingBelief, req.userContext, req.lifeArea)
    return action.to_dict()


@coach_router.post("/stuck-options", response_model=StuckOptionsResponse)
async def stuck_options(req: StuckOptionsRequest):
    return StuckOptionsResponse(options=await coach.generate_stuck_options(req.message, req.context))


# --- Session endpoints ---


@coach_router.get("/sessions/{conversation_id}")
async def get_session(conversation_id: str):
    _check_conversation_id(conversation_id)
    return _session_view(sessions.get(conversation_id))


@coach_router.post("/sessions/{conversation_id}/messages")
async def send_session_message(conversation_id: str, req: SessionMessageRequest):
    _check_conversation_id(conversation_id)
    if not req.message.strip():
        raise HTTPException(status_code=400, detail="Message is empty")
    session = sessions.get(conversation_id, user_context=req.userContext)
    if session.is_loading:
        raise HTTPException(status_code=409, detail="A message is already in flight")
    reply = await session.send_message(req.message)
    if reply is None:
        raise HTTPException(status_code=409, detail="A message is already in flight")
    view = _session_view(session)
    view["reply"] = reply.to_dict()
    return view


@coach_router.delete("/sessions/{conversation_id}")
async def clear_session(conversation_id: str):
    _check_conversation_id(conversation_id)
    session = sessions.get(conversation_id)
    session.clear()
    return _session_view(session)
