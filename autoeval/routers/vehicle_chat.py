from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException # type: ignore

from autoeval.agent.conversation import ConversationSession, SessionRegistry
from autoeval.agent.errors import SessionBusyError, SessionClosedError
from autoeval.auth.auth import verify_token
from autoeval.models.vehicle_chat import (
    ChatReply,
    ChatRequest,
    ChatSessionCreate,
    ChatSessionResponse,
)
from autoeval.routers.deps import get_session_registry

router = APIRouter(
    prefix="/vehicle/chat",
    tags=["Vehicle Chat"]
)


def _session_or_404(registry: SessionRegistry, chat_id: UUID, user: dict) -> ConversationSession:
    # another user's chat is reported exactly like a missing one
    session = registry.get(chat_id, owner=user["sub"])
    if session is None:
        raise HTTPException(status_code=404, detail="Chat not found")
    return session


@router.post("/sessions", response_model=ChatSessionResponse)
async def create_chat(
    req: ChatSessionCreate,
    user=Depends(verify_token),
    registry: SessionRegistry = Depends(get_session_registry),
):
    chat_id = registry.create(owner=user["sub"], vehicle=req.vehicle, greeting=req.greeting)
    session = registry.get(chat_id, owner=user["sub"])
    return {"chat_id": chat_id, "history": session.history}


@router.post("/{chat_id}", response_model=ChatReply)
async def send_message(
    chat_id: UUID,
    req: ChatRequest,
    user=Depends(verify_token),
    registry: SessionRegistry = Depends(get_session_registry),
):
    session = _session_or_404(registry, chat_id, user)

    try:
        reply = await session.send(req.message)
    except SessionBusyError:
        raise HTTPException(status_code=409, detail="Previous message is still being answered")
    except SessionClosedError:
        raise HTTPException(status_code=410, detail="Chat is closed")

    return {"reply": reply, "history": session.history}


@router.get("/{chat_id}", response_model=ChatSessionResponse)
async def get_chat(
    chat_id: UUID,
    user=Depends(verify_token),
    registry: SessionRegistry = Depends(get_session_registry),
):
    session = _session_or_404(registry, chat_id, user)
    return {"chat_id": chat_id, "history": session.history}


@router.delete("/{chat_id}", status_code=204)
async def close_chat(
    chat_id: UUID,
    user=Depends(verify_token),
    registry: SessionRegistry = Depends(get_session_registry),
):
    if not registry.close(chat_id, owner=user["sub"]):
        raise HTTPException(status_code=404, detail="Chat not found")
