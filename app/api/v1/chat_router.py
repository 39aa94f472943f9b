# app/api/v1/chat_router.py
from fastapi import APIRouter, Depends, Query, status
from app.db import UnitOfWork, get_unit_of_work
from app.db.schemas import ChatMessageCreate, ChatMessageResponse
from app.services.v1 import ChatService

chat_router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
)


@chat_router.get(
    "/messages",
    response_model=list[ChatMessageResponse],
    summary="Conversation between two users",
)
async def list_messages(
    user_id: str = Query(...),
    other_user_id: str = Query(...),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await ChatService(uow).list_conversation(user_id, other_user_id)


@chat_router.post(
    "/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a chat message",
    responses={404: {"description": "Sender or receiver not found"}},
)
async def send_message(
    data: ChatMessageCreate, uow: UnitOfWork = Depends(get_unit_of_work)
):
    return await ChatService(uow).send_message(data)


__all__ = ["chat_router"]
