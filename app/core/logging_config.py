"""
구조화된 로깅 설정

요청 단위 로그와 일반 로그를 한눈에 구분할 수 있도록 포매터를 제공합니다.
"""
import logging
import sys


class ColoredFormatter(logging.Formatter):
    """
    색상이 적용된 로그 포매터 (터미널 출력용)
    """

    # ANSI 색상 코드
    COLORS = {
        'DEBUG': '\033[36m',      # 청록색
        'INFO': '\033[32m',       # 녹색
        'WARNING': '\033[33m',    # 노란색
        'ERROR': '\033[31m',      # 빨간색
        'CRITICAL': '\033[35m',   # 자홍색
    }
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        logger_name = record.name.replace('app.', '')
        message = record.getMessage()

        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.RESET)
            levelname = f"{color}{self.BOLD}{record.levelname:8s}{self.RESET}"
        else:
            levelname = f"{record.levelname:8s}"

        line = f"{timestamp} | {levelname} | {logger_name:30s} | {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class StructuredFormatter(logging.Formatter):
    """
    구조화된 로그 포매터

    AuditLoggingMiddleware가 남기는 요청/응답 로그(log_type)를 한 줄 요약으로,
    그 외 로그는 레벨 이모지와 함께 표준 포맷으로 출력
    """

    LEVEL_EMOJI = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️',
        'WARNING': '⚠️',
        'ERROR': '❌',
        'CRITICAL': '🚨',
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        log_type = getattr(record, 'log_type', None)

        if log_type == 'request_start':
            line = self._format_request_start(timestamp, record)
        elif log_type == 'request_end':
            line = self._format_request_end(timestamp, record)
        else:
            emoji = self.LEVEL_EMOJI.get(record.levelname, '📝')
            logger_name = record.name.replace('app.', '')
            line = f"{timestamp} | {emoji} {record.levelname:8s} | {logger_name:30s} | {record.getMessage()}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line

    def _format_request_start(self, timestamp: str, record: logging.LogRecord) -> str:
        """요청 시작 로그"""
        request_id = getattr(record, 'request_id', 'N/A')
        method = getattr(record, 'method', 'N/A')
        path = getattr(record, 'path', 'N/A')
        client_ip = getattr(record, 'client_ip', 'N/A')
        return f"{timestamp} | 📨 REQ  | [{request_id}] {method:6s} {path} (client={client_ip})"

    def _format_request_end(self, timestamp: str, record: logging.LogRecord) -> str:
        """요청 종료 로그"""
        request_id = getattr(record, 'request_id', 'N/A')
        method = getattr(record, 'method', 'N/A')
        path = getattr(record, 'path', 'N/A')
        status_code = getattr(record, 'status_code', 0)
        process_time = getattr(record, 'process_time', 0.0)

        # 상태 코드에 따른 이모지
        if status_code < 300:
            emoji = "✅"
        elif status_code < 400:
            emoji = "↪️"
        elif status_code < 500:
            emoji = "⚠️"
        else:
            emoji = "❌"

        return f"{timestamp} | {emoji} RES  | [{request_id}] {method:6s} {path} → {status_code} ({process_time:.3f}s)"


def setup_logging(log_level: str = "INFO", use_structured: bool = True):
    """
    로깅 설정 초기화

    Args:
        log_level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_structured: 구조화된 포매터 사용 여부
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # 기존 핸들러 제거
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(StructuredFormatter() if use_structured else ColoredFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    # uvicorn 로거 레벨 조정 (AuditLoggingMiddleware와 중복 방지)
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)

    # 외부 라이브러리 로거 레벨 조정 (과도한 DEBUG 로그 방지)
    for noisy in ("boto3", "botocore", "s3transfer", "urllib3", "httpx", "httpcore", "openai", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    로거 인스턴스 가져오기

    Args:
        name: 로거 이름 (보통 __name__ 사용)
    """
    return logging.getLogger(name)
