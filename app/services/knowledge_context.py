"""
지식 컨텍스트 조립

사용자 질문과 관련된 지식 항목을 골라 시스템 프롬프트에 넣을 텍스트 블록으로 만듭니다.
관련도 판단은 RelevanceSelector 인터페이스 뒤에 있어 다른 전략(임베딩 검색 등)으로 교체할 수 있습니다.
"""
import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.llm_base import BaseLLMClient
from app.core.prompt_templates import PromptTemplate
from app.schemas.knowledge import KnowledgeItemResponse
from app.services.knowledge_service import KnowledgeService

logger = logging.getLogger(__name__)

# 추론 모델이 답변 앞에 붙이는 <think>...</think> 블록
_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)


def parse_selection(text: str, item_count: int, max_items: int = 3) -> List[int]:
    """
    LLM이 돌려준 "2, 5, 1" 형식 응답을 0-based 인덱스 목록으로 변환

    숫자가 아니거나 범위를 벗어난 토큰은 버리고, 중복 제거 후 최대 max_items개까지.
    """
    cleaned = _THINK_BLOCK.sub("", text or "")
    indices: List[int] = []
    for token in cleaned.split(","):
        match = re.match(r"\s*(\d+)", token)
        if not match:
            continue
        index = int(match.group(1)) - 1
        if 0 <= index < item_count and index not in indices:
            indices.append(index)
        if len(indices) >= max_items:
            break
    return indices


class RelevanceSelector(ABC):
    """질문과 관련된 지식 항목 선택 전략"""

    @abstractmethod
    async def select(self, query: str, items: Sequence[KnowledgeItemResponse]) -> List[int]:
        """관련 항목의 인덱스 목록 (items 기준, 관련도 순)"""


class LLMRelevanceSelector(RelevanceSelector):
    """번호가 매겨진 요약 목록을 LLM에 보여주고 번호를 고르게 하는 방식"""

    def __init__(
        self,
        llm_client: BaseLLMClient,
        model: Optional[str] = None,
        max_items: Optional[int] = None,
    ):
        self.llm_client = llm_client
        self.model = model or settings.knowledge_selector_model
        self.max_items = max_items or settings.knowledge_context_max_selected

    async def select(self, query: str, items: Sequence[KnowledgeItemResponse]) -> List[int]:
        if not items:
            return []

        prompt = PromptTemplate.build_selection_prompt(query, items, max_items=self.max_items)
        text = await self.llm_client.complete_prompt(
            prompt,
            model=self.model,
            temperature=0.0,
            max_tokens=settings.chat_max_tokens,
        )
        indices = parse_selection(text, len(items), self.max_items)
        logger.debug(f"지식 항목 선택 결과: {indices} (raw={text!r})")
        return indices


class KnowledgeContextBuilder:
    """질문 -> 지식 컨텍스트 문자열"""

    def __init__(
        self,
        db: AsyncSession,
        selector: RelevanceSelector,
        item_limit: Optional[int] = None,
    ):
        self.knowledge_service = KnowledgeService(db)
        self.selector = selector
        self.item_limit = item_limit or settings.knowledge_context_item_limit

    @staticmethod
    def format_items(items: Sequence[KnowledgeItemResponse]) -> str:
        return "\n\n".join(
            PromptTemplate.format_knowledge_item(
                title=item.title,
                content=item.content,
                category_name=item.category.name if item.category else None,
                tag_names=[tag.name for tag in item.tags],
            )
            for item in items
        )

    async def build(self, query: str) -> str:
        """
        관련 지식 컨텍스트 생성

        어떤 단계에서 실패하더라도 예외를 던지지 않고 빈 문자열을 반환합니다.
        """
        try:
            listing = await self.knowledge_service.list_items(page=1, limit=self.item_limit)
            if not listing.items:
                return ""

            indices = await self.selector.select(query, listing.items)
            if not indices:
                return ""

            return self.format_items([listing.items[i] for i in indices])
        except Exception as e:
            logger.warning(f"지식 컨텍스트 생성 실패, 컨텍스트 없이 진행: {e}", exc_info=True)
            return ""
