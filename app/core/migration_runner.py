"""
앱 기동 시 스키마 마이그레이션(alembic upgrade head) 실행
"""
from pathlib import Path
from typing import Final

from alembic import command
from alembic.config import Config
from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.core.logging_config import get_logger

logger = get_logger(__name__)

# 프로젝트 루트 (alembic.ini 위치)
PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parents[2]
ALEMBIC_INI_PATH: Final[Path] = PROJECT_ROOT / "alembic.ini"
ALEMBIC_SCRIPT_LOCATION: Final[Path] = PROJECT_ROOT / "alembic"


def build_alembic_config() -> Config:
    """alembic.ini가 없는 배포 환경에서도 동작하도록 스크립트 위치를 직접 지정"""
    config = Config(str(ALEMBIC_INI_PATH)) if ALEMBIC_INI_PATH.exists() else Config()
    config.set_main_option("script_location", str(ALEMBIC_SCRIPT_LOCATION))
    # env.py는 비동기 드라이버 URL을 그대로 사용
    config.set_main_option("sqlalchemy.url", settings.get_database_url())
    # 앱 로깅 설정을 alembic.ini 로거 설정으로 덮어쓰지 않음
    config.attributes["configure_logger"] = False
    return config


async def run_db_migrations() -> None:
    """
    AUTO_RUN_MIGRATIONS=true일 때만 upgrade head 실행

    env.py가 asyncio.run()을 호출하므로 이벤트 루프 밖(스레드풀)에서 실행해야 함
    """
    if not settings.auto_run_migrations:
        logger.info("⏭️ 자동 마이그레이션 비활성화 (AUTO_RUN_MIGRATIONS=false)")
        return

    config = build_alembic_config()

    def _upgrade():
        logger.info("🔁 스키마 마이그레이션 시작")
        command.upgrade(config, "head")
        logger.info("✅ 스키마 마이그레이션 완료")

    try:
        await run_in_threadpool(_upgrade)
    except Exception as exc:
        logger.exception("❌ 스키마 마이그레이션 실패: %s", exc)
        raise
