# app/db/schemas/chat_schemas.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from datetime import datetime
from ..models import ChatMessageType


class ChatMessageCreate(BaseModel):
    sender_id: str
    receiver_id: str
    message: str = Field(..., min_length=1, max_length=5000)
    type: ChatMessageType = ChatMessageType.TEXT


class ChatMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message_id: str
    sender_id: str
    receiver_id: str
    message: str
    type: ChatMessageType
    is_read: bool
    timestamp: datetime = Field(
        ..., validation_alias=AliasChoices("sent_at", "timestamp")
    )
