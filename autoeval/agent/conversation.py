"""
Multi-turn consultant chat about one vehicle.

A ConversationSession owns the upstream context (system persona plus every
completed exchange) and the display history. Turns are strictly sequential:
a send() while another is in flight is rejected with SessionBusyError, never
interleaved. Upstream failures are absorbed into a fallback reply and the
session stays usable.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Optional
from uuid import UUID, uuid4

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage # type: ignore

from autoeval import config
from autoeval.agent.errors import SessionBusyError, SessionClosedError
from autoeval.agent.inference import InferenceClient, InferenceRequest
from autoeval.agent.prompts.chat_prompt import build_chat_instruction
from autoeval.models.vehicle import VehicleQuery
from autoeval.models.vehicle_chat import ChatTurn

logger = logging.getLogger(__name__)

CHAT_FALLBACK = "I'm having trouble connecting right now. Please try again."
EMPTY_REPLY = "I don't have an answer for that yet. Could you rephrase the question?"


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    AWAITING_RESPONSE = "awaiting_response"
    CLOSED = "closed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ConversationSession:
    def __init__(
        self,
        client: InferenceClient,
        vehicle: Optional[VehicleQuery] = None,
        greeting: Optional[str] = None,
        model: str = config.CHAT_MODEL,
    ):
        self._client = client
        self._model = model
        self.vehicle = vehicle
        self.state = SessionState.UNINITIALIZED

        self._context: List[BaseMessage] = []
        self._history: List[ChatTurn] = []
        if greeting:
            self._history.append(ChatTurn(role="assistant", text=greeting, timestamp=_now()))

    @property
    def history(self) -> List[ChatTurn]:
        return list(self._history)

    def _ensure_ready(self) -> None:
        if self.state is SessionState.CLOSED:
            raise SessionClosedError("Conversation is closed")
        if self.state is SessionState.AWAITING_RESPONSE:
            raise SessionBusyError("A reply is still pending for this conversation")
        if self.state is SessionState.UNINITIALIZED:
            self._context = [SystemMessage(content=build_chat_instruction(self.vehicle))]
            self.state = SessionState.READY

    async def send(self, text: str) -> str:
        # check and transition happen before the first await, so two tasks
        # on the same loop cannot both get past this point
        self._ensure_ready()
        self.state = SessionState.AWAITING_RESPONSE
        self._history.append(ChatTurn(role="user", text=text, timestamp=_now()))

        user_message = HumanMessage(content=text)
        request = InferenceRequest(
            model=self._model,
            messages=[*self._context, user_message],
        )

        try:
            response = await self._client.generate(request)
        except (Exception, asyncio.CancelledError):
            logger.warning("Chat turn failed", exc_info=True)
            reply = CHAT_FALLBACK
        else:
            if response.text:
                reply = response.text
                self._context.extend([user_message, AIMessage(content=reply)])
            else:
                logger.warning("Chat model returned no text")
                reply = EMPTY_REPLY
        finally:
            if self.state is SessionState.AWAITING_RESPONSE:
                self.state = SessionState.READY

        self._history.append(ChatTurn(role="assistant", text=reply, timestamp=_now()))
        return reply

    def close(self) -> None:
        self.state = SessionState.CLOSED


@dataclass
class _Entry:
    session: ConversationSession
    owner: str
    last_used: float


class SessionRegistry:
    """
    In-process map of chat id to live session; nothing survives a restart.

    Every session belongs to the user who created it: lookups by anyone else
    behave as if the chat did not exist. Sessions idle for longer than
    ``idle_seconds`` are closed and dropped on the next registry access.
    """

    def __init__(
        self,
        client: InferenceClient,
        idle_seconds: float = config.CHAT_SESSION_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: Dict[UUID, _Entry] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict_idle(self) -> None:
        cutoff = self._clock() - self._idle_seconds
        expired = [
            chat_id
            for chat_id, entry in self._sessions.items()
            if entry.last_used < cutoff
            and entry.session.state is not SessionState.AWAITING_RESPONSE
        ]
        for chat_id in expired:
            self._sessions.pop(chat_id).session.close()
        if expired:
            logger.info("Expired %d idle chat sessions", len(expired))

    def create(
        self,
        owner: str,
        vehicle: Optional[VehicleQuery] = None,
        greeting: Optional[str] = None,
    ) -> UUID:
        self._evict_idle()
        chat_id = uuid4()
        self._sessions[chat_id] = _Entry(
            session=ConversationSession(self._client, vehicle, greeting),
            owner=owner,
            last_used=self._clock(),
        )
        return chat_id

    def get(self, chat_id: UUID, owner: str) -> Optional[ConversationSession]:
        self._evict_idle()
        entry = self._sessions.get(chat_id)
        if entry is None or entry.owner != owner:
            return None
        entry.last_used = self._clock()
        return entry.session

    def close(self, chat_id: UUID, owner: str) -> bool:
        entry = self._sessions.get(chat_id)
        if entry is None or entry.owner != owner:
            return False
        del self._sessions[chat_id]
        entry.session.close()
        return True

    def close_all(self) -> None:
        for entry in self._sessions.values():
            entry.session.close()
        self._sessions.clear()
