"""채팅 기록 API 엔드포인트"""
import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query

from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.base import SuccessResponse
from app.schemas.chat import (
    ChatCreate,
    ChatCreatedResponse,
    ChatDetailResponse,
    ChatListResponse,
    ChatUpdate,
)
from app.services.chat_store import ChatStore, DEFAULT_CHAT_TITLE, get_chat_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Union[ChatDetailResponse, ChatListResponse])
async def get_chats(
    id: Optional[str] = Query(None, description="채팅 ID (지정 시 단건 조회)"),
    store: ChatStore = Depends(get_chat_store),
):
    if id:
        chat = await store.get_chat(id)
        if chat is None:
            raise NotFoundError("Chat not found")
        return ChatDetailResponse(chat=chat)

    return ChatListResponse(chats=await store.list_chats())


@router.post("", response_model=ChatCreatedResponse)
async def create_chat(
    body: ChatCreate,
    store: ChatStore = Depends(get_chat_store),
):
    chat = await store.create_chat(body.title or DEFAULT_CHAT_TITLE)
    return ChatCreatedResponse(chat=chat)


@router.put("", response_model=SuccessResponse)
async def update_chat(
    body: ChatUpdate,
    store: ChatStore = Depends(get_chat_store),
):
    """
    채팅 수정 (title, message, fileIds 중 전달된 것만 순서대로 반영)
    """
    if not body.id:
        raise ValidationError("Chat ID is required")

    if body.title:
        if not await store.update_title(body.id, body.title):
            raise NotFoundError("Chat not found")

    if body.message:
        if await store.add_message(body.id, body.message.role, body.message.content) is None:
            raise NotFoundError("Chat not found")

    if body.file_ids:
        if not await store.associate_files(body.id, body.file_ids):
            raise NotFoundError("Chat not found")

    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
async def delete_chat(
    id: Optional[str] = Query(None, description="채팅 ID"),
    store: ChatStore = Depends(get_chat_store),
):
    if not id:
        raise ValidationError("Chat ID is required")

    if not await store.delete_chat(id):
        raise NotFoundError("Chat not found")
    return SuccessResponse()
