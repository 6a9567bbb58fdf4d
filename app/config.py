"""
애플리케이션 설정 관리
"""
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List, Optional, Dict
import os


class Settings(BaseSettings):
    """애플리케이션 설정 클래스"""

    # 애플리케이션
    app_name: str = "Knowledge Chat Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "info"
    use_structured_logging: bool = True  # 구조화된 로깅 사용 여부 (가독성 향상)
    environment: str = "development"  # development, staging, production
    auto_run_migrations: bool = False  # 앱 기동 시 alembic upgrade 실행 여부

    # 서버
    host: str = "0.0.0.0"
    port: int = 8000

    # AWS S3 (업로드 파일 저장소)
    aws_region: str = "ap-northeast-2"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    s3_bucket_name: str = ""
    # 공개 URL 베이스 (CloudFront 등). 비어 있으면 S3 기본 도메인 사용
    s3_public_base_url: str = ""

    # Database
    database_url: str = ""
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "knowledgechat"
    database_user: str = "postgres"
    database_password: str = ""

    # Redis (채팅 기록 저장소)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0
    redis_url: str = ""
    redis_use_ssl: bool = False

    def get_database_url(self) -> str:
        """
        환경에 맞는 Database URL 반환
        - 로컬: SSL 없음
        - 프로덕션: SSL 필수
        """
        # database_url이 명시되어 있으면 우선 사용
        if self.database_url:
            base_url = self.database_url
            if self.is_production and base_url.startswith("postgresql") and "ssl=" not in base_url:
                separator = "&" if "?" in base_url else "?"
                return f"{base_url}{separator}ssl=require"
            return base_url

        # database_url이 없으면 개별 설정으로 구성
        base_url = (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

        if self.is_production:
            return f"{base_url}?ssl=require"
        return base_url

    def get_database_url_sync(self) -> str:
        """
        Alembic 등 동기 드라이버에서 사용할 수 있는 Database URL
        (asyncpg 접두사가 있으면 제거)
        """
        url = self.get_database_url()
        if "+asyncpg" in url:
            return url.replace("+asyncpg", "")
        return url

    def get_redis_url(self) -> str:
        """
        환경에 맞는 Redis URL 반환
        - 로컬: redis:// (비암호화)
        - 프로덕션: rediss:// (TLS)
        """
        if self.redis_url:
            return self.redis_url

        protocol = "rediss" if (self.is_production or self.redis_use_ssl) else "redis"
        port = self.redis_port or 6379

        if self.redis_password:
            return f"{protocol}://:{self.redis_password}@{self.redis_host}:{port}/{self.redis_db}"
        return f"{protocol}://{self.redis_host}:{port}/{self.redis_db}"

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_per_minute: int = 100
    chat_rate_limit: str = "20/minute"  # LLM 비용 고려

    # 업로드
    max_upload_size: int = 10485760  # 10MB
    file_fetch_timeout: float = 30.0  # 첨부 파일 내용 추출 시 HTTP 타임아웃 (초)

    # LLM 설정
    # groq: OpenAI 호환 엔드포인트 사용
    llm_provider: str = "groq"

    # Groq - api key는 환경 변수로 관리
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_organization: Optional[str] = None

    # 채팅 기본 모델 (요청에 model이 없을 때)
    default_chat_model: str = "deepseek-r1-distill-llama-70b"
    # 지식 항목 관련도 선택에 사용하는 모델
    knowledge_selector_model: str = "deepseek-r1-distill-llama-70b"

    # 챗봇 설정
    chat_temperature: float = 0.7
    chat_max_tokens: int = 4000
    default_language: str = "en"
    default_system_prompt: str = "You are a helpful AI assistant powered by the Groq API."
    # 관련도 선택 시 LLM에 보여줄 최대 지식 항목 수
    knowledge_context_item_limit: int = 100
    # 컨텍스트에 포함할 최대 지식 항목 수
    knowledge_context_max_selected: int = 3

    # 프론트엔드 (환경 변수에서 로드)
    # 여러 URL을 쉼표로 구분 가능: "https://chat.example.com,http://localhost:3000"
    frontend_url: str = ""

    def get_frontend_urls(self) -> List[str]:
        """프론트엔드 URL 리스트 반환 (쉼표로 구분된 경우)"""
        if not self.frontend_url:
            return []
        return [url.strip() for url in self.frontend_url.split(",")]

    @property
    def is_production(self) -> bool:
        """프로덕션 환경 여부"""
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        """환경에 따른 CORS 허용 출처 반환"""
        frontend_urls = self.get_frontend_urls()
        if self.is_production:
            return frontend_urls
        dev_origins = ["http://localhost:3000", "http://localhost:5173"]
        return list(set(frontend_urls + dev_origins)) if frontend_urls else ["*"]

    @property
    def redis_ssl_config(self) -> Dict:
        """Redis SSL 설정 (redis-py용)"""
        if self.is_production or self.redis_use_ssl:
            import ssl
            return {
                "ssl_cert_reqs": ssl.CERT_NONE,
            }
        return {}

    model_config = ConfigDict(
        # 로컬: .env.local (기본값)
        # 서버: ENV_FILE=.env.production 환경 변수 설정
        env_file=os.getenv("ENV_FILE", ".env.local"),
        env_file_encoding='utf-8',
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
