# app/db/models/chat_message_table.py
from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlalchemy import (
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Enum as sqlalchemy_Enum,
)
from sqlalchemy.orm import Mapped, mapped_column
from app.domain.events import ChatMessageSent
from .db_base_model import DbBaseModel, utc_now
from .user_table import enum_values


class ChatMessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"


class ChatMessage(DbBaseModel):
    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_pair", "sender_id", "receiver_id", "sent_at"),
    )

    message_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=DbBaseModel.generate_uuid,
    )
    sender_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    receiver_id: Mapped[str] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[ChatMessageType] = mapped_column(
        sqlalchemy_Enum(
            ChatMessageType,
            name="chat_message_type",
            native_enum=False,
            length=10,
            values_callable=enum_values,
        ),
        nullable=False,
        default=ChatMessageType.TEXT,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    @classmethod
    def send(
        cls,
        *,
        sender_id: str,
        receiver_id: str,
        message: str,
        type: ChatMessageType = ChatMessageType.TEXT,
        at: Optional[datetime] = None,
    ) -> tuple["ChatMessage", ChatMessageSent]:
        now = at or utc_now()
        chat_message = cls(
            message_id=cls.generate_uuid(),
            sender_id=sender_id,
            receiver_id=receiver_id,
            message=message,
            type=type,
            is_read=False,
            sent_at=now,
            created_at=now,
            updated_at=now,
        )
        return chat_message, ChatMessageSent(
            message_id=chat_message.message_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            occurred_at=now,
        )


__all__ = ["ChatMessage", "ChatMessageType"]
