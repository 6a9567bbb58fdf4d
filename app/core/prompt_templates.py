"""
챗봇 프롬프트 템플릿 관리

시스템 프롬프트 조립 순서: 페르소나(또는 기본) -> 언어 지시문 -> 지식 컨텍스트 -> 첨부 파일 내용
"""
from typing import Dict, List, Optional, Sequence

from app.config import settings

# 언어 코드 -> 시스템 프롬프트에 덧붙일 지시문 (빈 문자열이면 추가하지 않음)
LANGUAGE_INSTRUCTIONS: Dict[str, str] = {
    "en": "",
    "vi": "Please respond in Vietnamese.",
}


def resolve_language(language: Optional[str]) -> str:
    """지원하지 않는 언어 코드는 기본 언어로 대체"""
    code = (language or "").strip().lower()
    if code in LANGUAGE_INSTRUCTIONS:
        return code
    return settings.default_language


class PromptTemplate:
    """챗봇 프롬프트 템플릿"""

    KNOWLEDGE_HEADER = "Here is some relevant information that might help you answer the user's question:"
    ATTACHMENT_HEADER = "The user has attached the following file content:"

    SELECTION_PROMPT = (
        "I have a knowledge base with the following items:\n\n"
        "{digest}\n\n"
        "Given the user query: \"{query}\"\n\n"
        "Return the numbers of the most relevant knowledge items (up to {max_items}) "
        "that would help answer this query. Only return the numbers separated by commas, nothing else."
    )

    # 지식 항목 요약에 포함할 본문 길이
    DIGEST_CONTENT_LENGTH = 100

    @staticmethod
    def build_system_prompt(
        base_prompt: Optional[str] = None,
        language: Optional[str] = None,
        knowledge_context: str = "",
        file_contents: str = "",
    ) -> str:
        """시스템 프롬프트 조립"""
        prompt = base_prompt or settings.default_system_prompt

        instruction = LANGUAGE_INSTRUCTIONS[resolve_language(language)]
        if instruction:
            prompt += f"\n\n{instruction}"

        if knowledge_context:
            prompt += f"\n\n{PromptTemplate.KNOWLEDGE_HEADER}\n{knowledge_context}"

        if file_contents:
            prompt += f"\n\n{PromptTemplate.ATTACHMENT_HEADER}\n{file_contents}"

        return prompt

    @staticmethod
    def format_digest(items: Sequence) -> str:
        """지식 항목 번호 목록 (1부터 시작, 본문 앞부분만)"""
        lines = []
        for i, item in enumerate(items, 1):
            snippet = item.content[:PromptTemplate.DIGEST_CONTENT_LENGTH]
            lines.append(f"{i}. {item.title}: {snippet}...")
        return "\n".join(lines)

    @staticmethod
    def build_selection_prompt(query: str, items: Sequence, max_items: int = 3) -> str:
        return PromptTemplate.SELECTION_PROMPT.format(
            digest=PromptTemplate.format_digest(items),
            query=query,
            max_items=max_items,
        )

    @staticmethod
    def format_knowledge_item(
        title: str,
        content: str,
        category_name: Optional[str] = None,
        tag_names: Optional[List[str]] = None,
    ) -> str:
        """컨텍스트 블록 1개"""
        block = f"Title: {title}\nContent: {content}"
        if category_name:
            block += f"\nCategory: {category_name}"
        if tag_names:
            block += f"\nTags: {', '.join(tag_names)}"
        return block
