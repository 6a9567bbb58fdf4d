"""
LLM Provider Registry

Provider 이름 -> 클라이언트 클래스 매핑과 생성된 인스턴스 캐시를 관리합니다.
"""
from __future__ import annotations

from typing import Dict, List, Type, TYPE_CHECKING
import threading
import logging

if TYPE_CHECKING:
    from app.core.llm_base import BaseLLMClient
    from app.core.providers.config import ProviderConfig

logger = logging.getLogger(__name__)


class LLMProviderRegistry:
    """LLM Provider 등록/인스턴스 관리"""

    _providers: Dict[str, Type["BaseLLMClient"]] = {}
    _instances: Dict[str, "BaseLLMClient"] = {}
    _lock = threading.Lock()

    @classmethod
    def register(cls, provider_name: str, client_class: Type["BaseLLMClient"]) -> None:
        provider_key = provider_name.lower()
        if provider_key in cls._providers:
            logger.warning("Provider %s already registered, overriding", provider_key)
        cls._providers[provider_key] = client_class
        logger.debug("Registered LLM provider '%s' -> %s", provider_key, client_class.__name__)

    @classmethod
    def get_client(
        cls,
        provider: str,
        *,
        config: "ProviderConfig" = None,
        force_refresh: bool = False
    ) -> "BaseLLMClient":
        """
        Provider 이름으로 Client 인스턴스 반환 (프로세스 단위 캐시)

        Raises:
            ValueError: 미등록 Provider, 설정 누락, 비활성화된 Provider
        """
        provider_key = provider.lower()

        with cls._lock:
            if not force_refresh and provider_key in cls._instances:
                return cls._instances[provider_key]

            if provider_key not in cls._providers:
                raise ValueError(
                    f"지원하지 않는 LLM 제공자: {provider} (등록됨: {', '.join(cls.provider_names())})"
                )
            if config is None:
                raise ValueError(f"{provider} Provider 초기화를 위한 설정이 필요합니다")
            if not config.enabled:
                raise ValueError(f"{provider} Provider가 비활성화되어 있습니다")

            instance = cls._providers[provider_key](config=config)
            cls._instances[provider_key] = instance
            return instance

    @classmethod
    def provider_names(cls) -> List[str]:
        return sorted(cls._providers)

    @classmethod
    def clear_instances(cls) -> None:
        """테스트용: 생성된 인스턴스 캐시 제거"""
        with cls._lock:
            cls._instances.clear()


def register_provider(provider_name: str):
    """Provider 자동 등록 데코레이터"""

    def decorator(cls: Type["BaseLLMClient"]):
        LLMProviderRegistry.register(provider_name, cls)
        return cls

    return decorator
