"""
LLM Provider 구현체 모듈

모듈 import 시 register_provider 데코레이터가 실행되어
LLMProviderRegistry에 자동 등록됩니다.
"""

from app.core.providers import openai as _openai  # noqa: F401
from app.core.providers import groq as _groq  # noqa: F401

__all__ = ["_openai", "_groq"]
