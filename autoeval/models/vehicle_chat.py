# autoeval/models/vehicle_chat.py

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict # type: ignore
from pydantic.alias_generators import to_camel # type: ignore

from autoeval.models.vehicle import VehicleQuery


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatTurn(CamelModel):
    role: Literal["user", "assistant"]
    text: str
    timestamp: datetime


class ChatSessionCreate(CamelModel):
    vehicle: Optional[VehicleQuery] = None
    greeting: Optional[str] = None      # shown to the user, never sent upstream


class ChatSessionResponse(CamelModel):
    chat_id: UUID
    history: List[ChatTurn]


class ChatRequest(CamelModel):
    message: str


class ChatReply(CamelModel):
    reply: str
    history: List[ChatTurn]


class IssueDetailRequest(CamelModel):
    vehicle: VehicleQuery
    issue: str


class IssueDetailResponse(CamelModel):
    issue: str
    detail: str
