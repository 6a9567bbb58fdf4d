"""Alembic 마이그레이션 환경 설정"""
from logging.config import fileConfig
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context
import asyncio

from app.config import settings
from app.core.database import Base
# 모든 모델 import (autogenerate가 테이블을 감지하도록)
import app.models  # noqa: F401

# Alembic Config 객체
config = context.config

# 런타임 실행(migration_runner)에서 넘긴 URL이 없으면 환경 설정 사용
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", settings.get_database_url())

# 로깅 설정 (alembic CLI로 실행할 때만)
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# 모델의 MetaData (테이블 정의)
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """오프라인 모드 (SQL 파일만 생성)"""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """비동기 드라이버(asyncpg)로 연결하여 마이그레이션"""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """온라인 모드 (실제 DB에 적용)"""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
