"""
FastAPI 글로벌 예외 핸들러

모든 커스텀 예외를 `{"error": "..."}` 형태의 HTTP 응답으로 변환합니다.
"""
import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import (
    BaseAppException,
    ValidationError,
    ResourceNotFoundError,
    LLMRateLimitError,
)

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal Server Error"

# 예외 타입별 HTTP 상태 코드 매핑 (구체적인 타입부터 검사)
EXCEPTION_STATUS_MAP = (
    (LLMRateLimitError, status.HTTP_429_TOO_MANY_REQUESTS),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ResourceNotFoundError, status.HTTP_404_NOT_FOUND),
)


def get_http_status_code(exception: BaseAppException) -> int:
    """
    예외 객체에 대한 HTTP 상태 코드 반환

    매핑에 없는 경우(UpstreamError 계열 포함) 기본값으로 500 반환
    """
    for exception_type, status_code in EXCEPTION_STATUS_MAP:
        if isinstance(exception, exception_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def base_app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """
    모든 BaseAppException 및 하위 클래스 처리
    """
    status_code = get_http_status_code(exc)

    # 500번대 에러는 상세 에러 정보를 숨김 (보안)
    if status_code >= 500:
        logger.error(
            f"Server error: {exc.message}",
            extra={
                "error_code": exc.error_code,
                "details": exc.details,
                "path": request.url.path,
                "method": request.method
            },
            exc_info=True
        )
        response_body = {"error": GENERIC_SERVER_ERROR}
    else:
        logger.warning(
            f"Client error: {exc.message}",
            extra={
                "error_code": exc.error_code,
                "path": request.url.path,
                "method": request.method
            }
        )
        response_body = {"error": exc.message}

    return JSONResponse(
        status_code=status_code,
        content=response_body
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Pydantic 검증 오류 처리 (400으로 통일)
    """
    logger.warning(
        f"Validation error: {exc.errors()}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )

    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    HTTPException 처리
    """
    logger.info(
        f"HTTP exception: {exc.status_code} - {exc.detail}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail}
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    예상하지 못한 예외 처리 (최후의 방어선)
    """
    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_SERVER_ERROR}
    )
