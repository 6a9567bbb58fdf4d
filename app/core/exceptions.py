"""
커스텀 예외 클래스 정의

애플리케이션 전반에서 사용할 구체적인 예외 타입들을 정의합니다.
"""
from typing import Optional, Dict, Any


class BaseAppException(Exception):
    """애플리케이션 기본 예외 클래스"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# 검증 관련 예외 (400)
# ============================================================================

class ValidationError(BaseAppException):
    """검증 관련 기본 예외"""
    def __init__(self, message: str = "입력값이 올바르지 않습니다", **kwargs):
        kwargs.setdefault("error_code", "VALIDATION_ERROR")
        super().__init__(message, **kwargs)


class InvalidInputError(ValidationError):
    """잘못된 입력값"""
    def __init__(self, message: str = "입력값이 올바르지 않습니다", **kwargs):
        super().__init__(message, error_code="INVALID_INPUT", **kwargs)


class FileSizeExceededError(ValidationError):
    """파일 크기 초과"""
    def __init__(self, message: str = "File size exceeds the upload limit", **kwargs):
        super().__init__(message, error_code="FILE_SIZE_EXCEEDED", **kwargs)


# ============================================================================
# 리소스 조회 관련 예외 (404)
# ============================================================================

class ResourceNotFoundError(BaseAppException):
    """리소스를 찾을 수 없음"""
    def __init__(self, message: str = "요청한 리소스를 찾을 수 없습니다", **kwargs):
        kwargs.setdefault("error_code", "RESOURCE_NOT_FOUND")
        super().__init__(message, **kwargs)


# 서비스 계층에서 부르는 짧은 이름
NotFoundError = ResourceNotFoundError


# ============================================================================
# 외부 의존성 관련 예외 (500)
# ============================================================================

class UpstreamError(BaseAppException):
    """데이터베이스, 블롭 스토리지, KV 스토어, LLM 등 외부 의존성 실패"""
    pass


class DatabaseError(UpstreamError):
    """데이터베이스 관련 기본 예외"""
    pass

class DatabaseTransactionError(DatabaseError):
    """데이터베이스 트랜잭션 실패"""
    def __init__(self, message: str = "데이터베이스 트랜잭션 처리 중 오류가 발생했습니다", **kwargs):
        super().__init__(message, error_code="DB_TRANSACTION_ERROR", **kwargs)

class UnsupportedDialectError(DatabaseError):
    """ON CONFLICT 구문을 만들 수 없는 데이터베이스 방언"""
    def __init__(self, dialect: str):
        super().__init__(
            f"지원하지 않는 데이터베이스 방언: {dialect}",
            error_code="DB_UNSUPPORTED_DIALECT",
            details={"dialect": dialect},
        )

class KeyValueStoreError(UpstreamError):
    """KV 스토어(Redis) 관련 기본 예외"""
    def __init__(self, message: str = "KV 스토어 처리 중 오류가 발생했습니다", **kwargs):
        kwargs.setdefault("error_code", "KV_STORE_ERROR")
        super().__init__(message, **kwargs)


class ChatStoreError(KeyValueStoreError):
    """채팅 기록 저장 실패"""
    def __init__(self, message: str = "채팅 기록 저장 중 오류가 발생했습니다", **kwargs):
        super().__init__(message, error_code="CHAT_STORE_ERROR", **kwargs)


class BlobStorageError(UpstreamError):
    """블롭 스토리지(S3) 작업 실패"""
    def __init__(self, message: str = "파일 저장소 처리 중 오류가 발생했습니다", **kwargs):
        kwargs.setdefault("error_code", "BLOB_STORAGE_ERROR")
        super().__init__(message, **kwargs)


# ============================================================================
# LLM 서비스 관련 예외
# ============================================================================

class LLMServiceError(UpstreamError):
    """LLM 서비스 관련 기본 예외"""
    pass


class LLMAPIError(LLMServiceError):
    """LLM API 호출 실패"""
    def __init__(self, message: str = "LLM API 호출 중 오류가 발생했습니다", **kwargs):
        super().__init__(message, error_code="LLM_API_ERROR", **kwargs)


class LLMRateLimitError(LLMServiceError):
    """LLM API 사용량 제한"""
    def __init__(self, message: str = "API 사용량 제한에 도달했습니다", **kwargs):
        super().__init__(message, error_code="LLM_RATE_LIMIT_ERROR", **kwargs)
