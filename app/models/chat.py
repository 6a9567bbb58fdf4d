"""
챗봇 스트리밍 관련 Pydantic 모델
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Literal
from enum import Enum

from app.config import settings


class CompletionMessage(BaseModel):
    """LLM에 전달되는 대화 메시지"""
    role: Literal["user", "assistant", "system"] = Field(..., description="메시지 역할")
    content: str = Field(..., description="메시지 내용")


class ChatCompletionRequest(BaseModel):
    """
    채팅 스트리밍 요청 모델

    필드명은 프론트엔드와 동일한 camelCase를 사용합니다.
    """
    messages: List[CompletionMessage] = Field(default_factory=list, description="대화 메시지 목록")
    useKnowledge: bool = Field(True, description="지식 컨텍스트 사용 여부")
    attachments: List[str] = Field(default_factory=list, description="첨부 파일 URL 목록")
    model: str = Field(default_factory=lambda: settings.default_chat_model, description="사용할 LLM 모델")
    personaId: Optional[str] = Field(None, description="페르소나 ID")
    language: str = Field(default_factory=lambda: settings.default_language, description="응답 언어 (en, vi)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "messages": [{"role": "user", "content": "What is our refund policy?"}],
                "useKnowledge": True,
                "attachments": [],
                "model": "deepseek-r1-distill-llama-70b",
                "personaId": None,
                "language": "en"
            }
        }
    )

    def last_user_message(self) -> Optional[CompletionMessage]:
        """가장 마지막 user 메시지 (없으면 None)"""
        for message in reversed(self.messages):
            if message.role == "user":
                return message
        return None


# ============================================================================
# SSE 스트리밍 이벤트 모델
# ============================================================================

class ErrorCode(str, Enum):
    """SSE 에러 코드"""
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    STREAM_ERROR = "STREAM_ERROR"


class ContentEvent(BaseModel):
    """콘텐츠 청크 이벤트"""
    type: Literal["content"] = "content"
    data: str = Field(..., description="스트리밍 텍스트 조각")


class ErrorEvent(BaseModel):
    """에러 이벤트"""
    type: Literal["error"] = "error"
    code: ErrorCode = Field(..., description="에러 코드")
    message: str = Field(..., description="에러 메시지")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "error",
                "code": "RATE_LIMIT_EXCEEDED",
                "message": "There was an error processing your request"
            }
        }
    )
