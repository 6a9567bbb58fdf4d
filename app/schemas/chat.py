"""
채팅 기록 스키마 (Redis에 JSON으로 저장되는 레코드)

타임스탬프는 epoch 밀리초 정수입니다.
"""
from typing import List, Literal, Optional

from pydantic import Field

from app.schemas.base import CamelModel

MessageRole = Literal["user", "assistant", "system"]


class ChatMessage(CamelModel):
    id: str
    role: MessageRole
    content: str
    created_at: int


class ChatRecord(CamelModel):
    id: str
    title: str
    messages: List[ChatMessage] = Field(default_factory=list)
    file_ids: List[str] = Field(default_factory=list)
    created_at: int
    updated_at: int


class NewChatMessage(CamelModel):
    role: MessageRole
    content: str


class ChatCreate(CamelModel):
    title: Optional[str] = None


class ChatUpdate(CamelModel):
    id: Optional[str] = None
    title: Optional[str] = None
    message: Optional[NewChatMessage] = None
    file_ids: Optional[List[str]] = None


class ChatListResponse(CamelModel):
    chats: List[ChatRecord]


class ChatDetailResponse(CamelModel):
    chat: ChatRecord


class ChatCreatedResponse(CamelModel):
    chat: ChatRecord
    success: bool = True
