"""
챗봇 오케스트레이션 서비스

시스템 프롬프트 조립(페르소나 + 언어 + 지식 컨텍스트 + 첨부 파일)과
LLM 스트리밍 응답을 SSE 이벤트(JSON 문자열)로 변환하는 역할을 담당합니다.
"""
import asyncio
import json
import logging
from typing import AsyncGenerator, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.exceptions import LLMRateLimitError
from app.core.file_extractor import FileContentExtractor, get_file_extractor
from app.core.llm_base import BaseLLMClient
from app.core.llm_client import get_llm_client
from app.core.prompt_templates import PromptTemplate, resolve_language
from app.models.chat import ChatCompletionRequest, ContentEvent, ErrorCode, ErrorEvent
from app.services.knowledge_context import (
    KnowledgeContextBuilder,
    LLMRelevanceSelector,
    RelevanceSelector,
)
from app.services.persona_service import PersonaService

logger = logging.getLogger(__name__)

STREAM_ERROR_MESSAGE = "There was an error processing your request"


def _event(payload) -> str:
    return json.dumps(payload.model_dump(mode="json"), ensure_ascii=False)


class ChatService:
    """채팅 요청 -> LLM 스트리밍"""

    def __init__(
        self,
        db: AsyncSession,
        llm_client: Optional[BaseLLMClient] = None,
        selector: Optional[RelevanceSelector] = None,
        extractor: Optional[FileContentExtractor] = None,
    ):
        self.db = db
        self._llm_client = llm_client
        self._selector = selector
        self.extractor = extractor or get_file_extractor()

    @property
    def llm_client(self) -> BaseLLMClient:
        # API 키 누락 등 설정 오류는 실제 요청 처리 시점에 드러나도록 지연 생성
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    @property
    def selector(self) -> RelevanceSelector:
        if self._selector is None:
            self._selector = LLMRelevanceSelector(self.llm_client)
        return self._selector

    async def _attachment_contents(self, urls: List[str]) -> str:
        if not urls:
            return ""
        contents = await asyncio.gather(*(self.extractor.extract(url) for url in urls))
        return "\n\n".join(contents)

    async def _base_prompt(self, persona_id: Optional[str]) -> Optional[str]:
        if not persona_id:
            return None
        persona = await PersonaService(self.db).get_persona(persona_id)
        if persona is None:
            logger.warning(f"[ChatService] 페르소나 없음, 기본 프롬프트 사용: {persona_id}")
            return None
        return persona.system_prompt

    async def build_system_prompt(self, request: ChatCompletionRequest) -> str:
        """요청 기준 시스템 프롬프트 조립 (DB 작업은 모두 여기서 끝냄)"""
        file_contents = await self._attachment_contents(request.attachments)

        knowledge_context = ""
        last_user_message = request.last_user_message()
        if request.useKnowledge and last_user_message:
            builder = KnowledgeContextBuilder(self.db, self.selector)
            knowledge_context = await builder.build(last_user_message.content)

        base_prompt = await self._base_prompt(request.personaId)

        return PromptTemplate.build_system_prompt(
            base_prompt=base_prompt,
            language=resolve_language(request.language),
            knowledge_context=knowledge_context,
            file_contents=file_contents,
        )

    async def prepare_messages(self, request: ChatCompletionRequest) -> List[Dict[str, str]]:
        """조립한 시스템 프롬프트를 맨 앞에 두고 클라이언트 메시지는 그대로 전달"""
        system_prompt = await self.build_system_prompt(request)
        return [
            {"role": "system", "content": system_prompt},
            *(message.model_dump() for message in request.messages),
        ]

    async def stream_events(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
    ) -> AsyncGenerator[str, None]:
        """
        LLM 스트리밍 응답을 SSE 이벤트 JSON 문자열로 변환

        오류는 예외 대신 ErrorEvent 하나로 전달하고 종료합니다.
        """
        resolved_model = model or settings.default_chat_model
        try:
            async for chunk in self.llm_client.generate_stream(
                messages=messages,
                temperature=settings.chat_temperature,
                max_tokens=settings.chat_max_tokens,
                model=resolved_model,
            ):
                if chunk:
                    yield _event(ContentEvent(data=chunk))

        except LLMRateLimitError as e:
            logger.error(f"[ChatService] LLM API 사용량 제한: {e}")
            yield _event(ErrorEvent(code=ErrorCode.RATE_LIMIT_EXCEEDED, message=STREAM_ERROR_MESSAGE))

        except Exception as e:
            logger.error(f"[ChatService] 스트리밍 중 오류: {e}", exc_info=True)
            yield _event(ErrorEvent(code=ErrorCode.STREAM_ERROR, message=STREAM_ERROR_MESSAGE))


def get_chat_service(db: AsyncSession = Depends(get_db)) -> ChatService:
    """FastAPI 의존성: 채팅 서비스"""
    return ChatService(db)
