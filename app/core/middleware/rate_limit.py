"""
Rate Limiting 설정

slowapi Limiter 하나를 앱 전체에서 공유하고, 챗봇 스트리밍 엔드포인트에는
`settings.chat_rate_limit`을 데코레이터로 추가 적용합니다.
"""
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from app.config import settings
import logging

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """로드밸런서 뒤에서는 X-Forwarded-For의 첫 주소를 클라이언트로 간주"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return get_remote_address(request)


def _storage_config():
    """
    카운터 저장소 (storage_uri, storage_options)

    운영 환경은 인스턴스 간 공유를 위해 Redis, 그 외에는 프로세스 메모리
    """
    if not (settings.rate_limit_enabled and settings.is_production):
        return "memory://", {}

    # 운영 Redis는 rediss:// (ElastiCache 인증서 검증 생략)
    options = {"socket_connect_timeout": 5, "socket_timeout": 5, "ssl_cert_reqs": "none"}
    return settings.get_redis_url(), options


_storage_uri, _storage_options = _storage_config()

limiter = Limiter(
    key_func=get_client_ip,
    default_limits=[f"{settings.rate_limit_per_minute} per minute"],
    storage_uri=_storage_uri,
    storage_options=_storage_options,
    enabled=settings.rate_limit_enabled,
)


def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Rate Limit 초과 시 다른 오류와 같은 `{"error": ...}` 형태로 429 응답"""
    logger.warning(
        f"Rate limit exceeded: {get_client_ip(request)} - {request.url.path} ({exc.detail})"
    )
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests, please try again later"}
    )
