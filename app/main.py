"""
Knowledge Chat Backend - 메인 애플리케이션
"""
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi.errors import RateLimitExceeded
from app.config import settings
from app.core.middleware.rate_limit import (
    limiter,
    custom_rate_limit_handler
)
from app.core.middleware.audit_logging import AuditLoggingMiddleware
from app.api.v1.endpoints import (
    categories,
    chat,
    chats,
    files,
    knowledge,
    personas,
    tags,
    upload,
)
from app.core.exceptions import BaseAppException
from app.api.exception_handlers import (
    base_app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    unhandled_exception_handler
)
from app.core.logging_config import setup_logging, get_logger
from app.core.migration_runner import run_db_migrations

# 구조화된 로깅 설정
setup_logging(
    log_level=settings.log_level,
    use_structured=settings.use_structured_logging
)
logger = get_logger(__name__)

# FastAPI 앱 생성
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="지식 베이스 기반 챗봇 백엔드 API",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Rate limiter 등록
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)

# 글로벌 예외 핸들러 등록 (순서 중요: 구체적인 것부터 등록)
app.add_exception_handler(BaseAppException, base_app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# CORS 설정
cors_origins = settings.cors_origins
logger.info(f"CORS 허용 출처: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 감사 로깅 미들웨어
app.add_middleware(AuditLoggingMiddleware)

# API 라우터 등록
app.include_router(categories.router, prefix="/api/categories", tags=["카테고리"])
app.include_router(tags.router, prefix="/api/tags", tags=["태그"])
app.include_router(personas.router, prefix="/api/personas", tags=["페르소나"])
app.include_router(files.router, prefix="/api/files", tags=["파일"])
app.include_router(upload.router, prefix="/api/upload", tags=["파일"])
app.include_router(knowledge.router, prefix="/api/knowledge", tags=["지식 베이스"])
app.include_router(chats.router, prefix="/api/chats", tags=["채팅 기록"])
app.include_router(chat.router, prefix="/api/chat", tags=["챗봇"])


@app.on_event("startup")
async def startup_event():
    """애플리케이션 시작 시 실행"""
    logger.info(f"{settings.app_name} v{settings.app_version} 시작")
    logger.info(f"디버그 모드: {settings.debug}")

    # Redis 연결 (실패해도 기동은 계속, 채팅 기록 API만 실패함)
    try:
        from app.core.redis_client import redis_client
        await redis_client.connect()
    except Exception as e:
        logger.error(f"Redis 연결 실패, 계속 진행: {e}")

    await run_db_migrations()

    if settings.llm_provider == "groq" and not settings.groq_api_key:
        logger.warning("⚠️ GROQ_API_KEY가 설정되지 않았습니다. 챗봇 요청은 실패합니다")
    elif settings.llm_provider == "openai" and not settings.openai_api_key:
        logger.warning("⚠️ OPENAI_API_KEY가 설정되지 않았습니다. 챗봇 요청은 실패합니다")
    logger.info(f"🤖 LLM 제공자: {settings.llm_provider} (기본 모델: {settings.default_chat_model})")


@app.on_event("shutdown")
async def shutdown_event():
    """애플리케이션 종료 시 실행"""
    logger.info(f"{settings.app_name} 종료")

    # Redis 연결 종료
    from app.core.redis_client import redis_client
    await redis_client.close()


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": "Knowledge Chat Backend API",
        "version": settings.app_version,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """헬스 체크 엔드포인트"""
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version
    }


@app.get("/api/health")
async def api_health_check():
    return {
        "status": "healthy",
        "app_version": settings.app_version
    }
