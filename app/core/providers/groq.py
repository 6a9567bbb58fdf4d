"""
Groq API 클라이언트 구현

Groq는 OpenAI 호환 chat/completions API를 제공하므로 OpenAIClient를 그대로 재사용합니다.
"""
from app.core.llm_registry import register_provider
from app.core.providers.config import GroqConfig
from app.core.providers.openai import OpenAIClient


@register_provider("groq")
class GroqClient(OpenAIClient):
    """Groq API 클라이언트"""

    provider_label = "Groq"

    def __init__(self, config: GroqConfig):
        super().__init__(config=config)
