"""
OpenAI 호환 chat/completions 클라이언트

Groq 등 OpenAI 호환 엔드포인트는 base_url만 바꿔 이 클래스를 그대로 사용합니다.
"""
from typing import List, Dict, AsyncGenerator
import logging
from openai import AsyncOpenAI
from openai import APIError, RateLimitError, APITimeoutError

from app.config import settings
from app.core.llm_base import BaseLLMClient
from app.core.llm_registry import register_provider
from app.core.providers.config import OpenAIConfig
from app.core.exceptions import (
    LLMAPIError,
    LLMRateLimitError,
)

logger = logging.getLogger(__name__)

# max_tokens 대신 max_completion_tokens만 받는 모델 접두사
COMPLETION_TOKEN_MODELS = ("gpt-4o", "gpt-4.1", "gpt-5", "o1", "o3")


@register_provider("openai")
class OpenAIClient(BaseLLMClient):
    """OpenAI 호환 API 클라이언트"""

    provider_label = "OpenAI"

    def __init__(self, config: OpenAIConfig):
        self.config = config
        self.client = AsyncOpenAI(
            api_key=config.api_key,
            organization=config.organization,
            base_url=config.base_url,
        )
        self.model = config.default_model
        self.system_prompt = config.system_prompt or settings.default_system_prompt
        logger.info("%s Client 초기화: 모델=%s, endpoint=%s", self.provider_label, self.model, self.client.base_url)

    def _with_system_prompt(self, messages: List[Dict[str, str]]) -> List[Dict[str, str]]:
        """system 메시지가 없을 때만 기본 시스템 프롬프트를 선행 주입"""
        if any(m.get("role") == "system" for m in messages):
            return list(messages)
        return [{"role": "system", "content": self.system_prompt}, *messages]

    @staticmethod
    def _token_param_for_model(model_name: str) -> str:
        normalized = (model_name or "").lower()
        if normalized.startswith(COMPLETION_TOKEN_MODELS):
            return "max_completion_tokens"
        return "max_tokens"

    def _request_kwargs(self, model_name: str, temperature: float, max_tokens: int, extra: Dict) -> Dict:
        request_kwargs = {"temperature": temperature, **extra}
        request_kwargs.setdefault(self._token_param_for_model(model_name), max_tokens)
        return request_kwargs

    def _translate_error(self, error: Exception, model_name: str, stream: bool) -> Exception:
        """openai SDK 예외 -> 애플리케이션 예외"""
        details = {"model": model_name, "stream": stream, "error": str(error)}
        if isinstance(error, RateLimitError):
            logger.error(f"{self.provider_label} API 사용량 제한: {error}")
            return LLMRateLimitError(
                message=f"{self.provider_label} API 사용량 제한에 도달했습니다",
                details=details
            )
        if isinstance(error, APITimeoutError):
            logger.error(f"{self.provider_label} API 타임아웃: {error}")
            return LLMAPIError(
                message=f"{self.provider_label} API 요청 시간이 초과되었습니다",
                details=details
            )
        logger.error(f"{self.provider_label} API 오류: {error}")
        return LLMAPIError(
            message=f"{self.provider_label} API 호출 중 오류가 발생했습니다: {error}",
            details=details
        )

    async def generate(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 4000,
        **kwargs
    ) -> str:
        """비동기 완료 생성"""
        # 런타임 모델 오버라이드 지원
        model_name = kwargs.pop("model", None) or self.model
        try:
            response = await self.client.chat.completions.create(
                model=model_name,
                messages=self._with_system_prompt(messages),
                **self._request_kwargs(model_name, temperature, max_tokens, kwargs)
            )
        except (RateLimitError, APITimeoutError, APIError) as e:
            raise self._translate_error(e, model_name, stream=False)

        if not response.choices:
            logger.error(f"{self.provider_label} API 응답에 choices가 없습니다")
            raise LLMAPIError(
                message=f"{self.provider_label} API 응답이 비어있습니다",
                details={"model": model_name}
            )

        return response.choices[0].message.content or ""

    async def generate_stream(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 4000,
        **kwargs
    ) -> AsyncGenerator[str, None]:
        """스트리밍 응답 (빈 delta는 건너뜀)"""
        model_name = kwargs.pop("model", None) or self.model
        try:
            stream = await self.client.chat.completions.create(
                model=model_name,
                messages=self._with_system_prompt(messages),
                stream=True,
                **self._request_kwargs(model_name, temperature, max_tokens, kwargs)
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta_content = chunk.choices[0].delta.content
                if delta_content:
                    yield delta_content
        except (RateLimitError, APITimeoutError, APIError) as e:
            raise self._translate_error(e, model_name, stream=True)
