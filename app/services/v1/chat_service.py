# app/services/v1/chat_service.py
from sqlalchemy import and_, or_
from common.api_error import ValidationError
from app.db.models import ChatMessage
from app.db.schemas import ChatMessageCreate, ChatMessageResponse
from app.db.unit_of_work import UnitOfWork
from .user_service import require_user


class ChatService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def send_message(self, data: ChatMessageCreate) -> ChatMessageResponse:
        if data.sender_id == data.receiver_id:
            raise ValidationError("Cannot send a message to yourself")
        await require_user(self.uow, data.sender_id)
        await require_user(self.uow, data.receiver_id)

        message, sent = ChatMessage.send(
            sender_id=data.sender_id,
            receiver_id=data.receiver_id,
            message=data.message,
            type=data.type,
        )
        self.uow.add(message, sent)
        await self.uow.save_changes()
        return ChatMessageResponse.model_validate(message)

    async def list_conversation(
        self, user_id: str, other_user_id: str
    ) -> list[ChatMessageResponse]:
        """Both directions between two users, oldest first."""
        messages = await self.uow.chat_messages.find(
            or_(
                and_(
                    ChatMessage.sender_id == user_id,
                    ChatMessage.receiver_id == other_user_id,
                ),
                and_(
                    ChatMessage.sender_id == other_user_id,
                    ChatMessage.receiver_id == user_id,
                ),
            ),
            order_by=[ChatMessage.sent_at, ChatMessage.created_at],
        )
        return [ChatMessageResponse.model_validate(m) for m in messages]


__all__ = ["ChatService"]
