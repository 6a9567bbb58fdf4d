"""
데이터베이스 연결 및 세션 관리
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.exc import SQLAlchemyError
from app.config import settings
from app.core.exceptions import DatabaseTransactionError

# SQLAlchemy Base 클래스
Base = declarative_base()

# 비동기 엔진 생성 (실제 연결은 첫 쿼리 시점에 맺어짐)
engine = create_async_engine(
    settings.get_database_url(),
    echo=settings.debug,
    pool_pre_ping=True,
)

# 비동기 세션 팩토리
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    데이터베이스 세션 의존성
    FastAPI 엔드포인트에서 사용

    요청이 정상 종료되면 커밋하고, 예외가 발생하면 롤백합니다.

    Raises:
        DatabaseTransactionError: SQLAlchemy 오류 발생 시 (500으로 변환됨)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseTransactionError(
                message=f"데이터베이스 트랜잭션 처리 중 오류가 발생했습니다: {str(e)}",
                details={"error_type": type(e).__name__, "error": str(e)}
            )
        except Exception:
            # 커스텀 예외, HTTPException 등은 롤백 후 그대로 전파
            await session.rollback()
            raise
