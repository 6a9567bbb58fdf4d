"""
LLM Provider 설정 스키마
"""
from typing import Optional
from pydantic import BaseModel, Field


class ProviderConfig(BaseModel):
    """Provider 설정 베이스 클래스"""

    enabled: bool = Field(default=True, description="Provider 활성화 여부")


class OpenAIConfig(ProviderConfig):
    """OpenAI (및 OpenAI 호환 API) Provider 설정"""

    api_key: str = Field(..., description="API Key")
    organization: Optional[str] = Field(
        default=None,
        description="OpenAI 조직 ID"
    )
    base_url: Optional[str] = Field(
        default=None,
        description="OpenAI 호환 엔드포인트 주소 (없으면 OpenAI 기본값)"
    )
    default_model: str = Field(
        default="gpt-4o-mini",
        description="기본 모델 ID"
    )
    system_prompt: Optional[str] = Field(
        default=None,
        description="기본 시스템 프롬프트"
    )


class GroqConfig(OpenAIConfig):
    """Groq Provider 설정 (OpenAI 호환 엔드포인트)"""

    base_url: Optional[str] = Field(
        default="https://api.groq.com/openai/v1",
        description="Groq OpenAI 호환 엔드포인트"
    )
    default_model: str = Field(
        default="deepseek-r1-distill-llama-70b",
        description="기본 모델 ID"
    )
