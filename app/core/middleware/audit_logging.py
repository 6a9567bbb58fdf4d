"""
감사 로깅 미들웨어

모든 API 요청/응답을 구조화된 포맷으로 기록하고 처리 시간을 측정합니다.
"""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
import time
import logging
import uuid

logger = logging.getLogger(__name__)

# 간소 로깅 대상 (헬스체크)
QUIET_PATHS = ("/health", "/api/health")


class AuditLoggingMiddleware(BaseHTTPMiddleware):
    """
    감사 로깅 미들웨어

    - 모든 API 요청/응답 로깅
    - 응답 시간 측정 (X-Process-Time)
    - 요청-응답 페어링용 X-Request-ID 부여
    """

    async def dispatch(self, request: Request, call_next):
        # 요청마다 고유 ID 생성 (요청-응답 페어링용)
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        is_quiet = path in QUIET_PATHS

        if not is_quiet:
            logger.info(
                "Request started",
                extra={
                    'log_type': 'request_start',
                    'request_id': request_id,
                    'method': method,
                    'path': path,
                    'client_ip': client_ip,
                }
            )

        try:
            response: Response = await call_next(request)
        except Exception as e:
            logger.error(
                f"[{request_id}] {method} {path} 처리 중 예외 발생 (client={client_ip}): {e}"
            )
            raise

        process_time = time.time() - start_time
        status_code = response.status_code

        if not is_quiet or status_code >= 400:
            logger.log(
                self._get_log_level(status_code),
                "Request completed",
                extra={
                    'log_type': 'request_end',
                    'request_id': request_id,
                    'method': method,
                    'path': path,
                    'client_ip': client_ip,
                    'status_code': status_code,
                    'process_time': process_time,
                }
            )

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        response.headers["X-Request-ID"] = request_id
        return response

    @staticmethod
    def _get_log_level(status_code: int) -> int:
        """상태 코드에 따른 로그 레벨 반환"""
        if status_code >= 500:
            return logging.ERROR
        elif status_code >= 400:
            return logging.WARNING
        return logging.INFO
