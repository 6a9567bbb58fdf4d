"""
LLM 클라이언트 베이스 클래스
"""
from abc import ABC, abstractmethod
from typing import List, Dict, AsyncGenerator, Optional


class BaseLLMClient(ABC):
    """
    LLM 클라이언트 추상 베이스 클래스

    messages는 OpenAI 형식의 {"role", "content"} 딕셔너리 목록입니다.
    """

    @abstractmethod
    async def generate(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 4000,
        **kwargs
    ) -> str:
        """LLM 응답 생성 (전체 텍스트)"""

    @abstractmethod
    async def generate_stream(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 4000,
        **kwargs
    ) -> AsyncGenerator[str, None]:
        """스트리밍 응답 생성 (텍스트 조각 단위)"""

    async def complete_prompt(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> str:
        """단일 user 프롬프트로 응답 생성"""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return await self.generate(messages, **kwargs)
