"""
pytest 공통 픽스처 및 설정
"""
import os

# app.config.Settings는 import 시점에 환경 변수를 읽으므로 app import 전에 설정
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("LLM_PROVIDER", "groq")
os.environ.setdefault("S3_BUCKET_NAME", "test-bucket")
os.environ.setdefault("AWS_REGION", "ap-northeast-2")
os.environ.setdefault("AUTO_RUN_MIGRATIONS", "false")

import copy
import json
from typing import Any, AsyncGenerator, Dict, List, Optional
from unittest.mock import Mock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  (Base.metadata에 테이블 등록)
from app.core.aws_clients import S3Client, get_s3_client
from app.core.database import Base, get_db
from app.core.llm_base import BaseLLMClient
from app.core.middleware.rate_limit import limiter
from app.core.redis_client import RedisClient
from app.main import app
from app.services.chat_service import ChatService, get_chat_service
from app.services.chat_store import ChatStore, get_chat_store


class InMemoryRedisClient(RedisClient):
    """
    RedisClient와 같은 인터페이스의 메모리 구현

    값은 실제 Redis처럼 JSON 문자열로 저장해 직렬화 경로를 그대로 탑니다.
    """

    def __init__(self):
        super().__init__()
        self.values: Dict[str, str] = {}
        self.sets: Dict[str, set] = {}

    async def connect(self):
        return None

    async def close(self):
        return None

    async def get(self, key: str) -> Optional[Any]:
        raw = self.values.get(key)
        return json.loads(raw) if raw is not None else None

    async def mget(self, keys: List[str]) -> List[Optional[Any]]:
        return [await self.get(key) for key in keys]

    async def smembers(self, key: str) -> List[str]:
        return list(self.sets.get(key, set()))

    async def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        self.values[key] = json.dumps(value)
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.values.pop(key, None) is not None)

    async def sadd(self, key: str, *members: str) -> int:
        bucket = self.sets.setdefault(key, set())
        before = len(bucket)
        bucket.update(members)
        return len(bucket) - before

    async def srem(self, key: str, *members: str) -> int:
        bucket = self.sets.get(key, set())
        removed = sum(1 for member in members if member in bucket)
        bucket.difference_update(members)
        return removed

    async def update_json(self, key, mutate, max_retries: int = 5):
        current = await self.get(key)
        if current is None:
            return None
        updated = mutate(copy.deepcopy(current))
        if updated is None:
            return None
        await self.set(key, updated)
        return updated


class FakeLLMClient(BaseLLMClient):
    """미리 정한 응답을 돌려주는 LLM 클라이언트"""

    def __init__(self, chunks: Optional[List[str]] = None, completion: str = "", error: Optional[Exception] = None):
        self.chunks = chunks or []
        self.completion = completion
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, messages, temperature: float = 0.7, max_tokens: int = 4000, **kwargs) -> str:
        self.calls.append({"messages": messages, **kwargs})
        return self.completion

    async def generate_stream(self, messages, temperature: float = 0.7, max_tokens: int = 4000, **kwargs):
        self.calls.append({"messages": messages, "stream": True, **kwargs})
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error


# 테스트 세션 전체 설정
@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Rate limit은 테스트에서 비활성화"""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest_asyncio.fixture
async def db_engine():
    """테스트마다 새로 만드는 인메모리 SQLite 엔진"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_redis():
    return InMemoryRedisClient()


@pytest.fixture
def mock_boto_client():
    """boto3 S3 클라이언트 mock (put_object/delete_object 호출 기록)"""
    return Mock()


@pytest.fixture
def s3_client(mock_boto_client):
    return S3Client(client=mock_boto_client)


@pytest.fixture
def fake_llm():
    return FakeLLMClient(chunks=["Hello", ", ", "world"], completion="1")


@pytest.fixture
def make_llm():
    """응답을 지정해 만드는 가짜 LLM 클라이언트 팩토리"""
    return FakeLLMClient


@pytest.fixture
def sample_messages():
    """테스트용 샘플 메시지"""
    return [
        {"role": "system", "content": "You are a helpful assistant."},
        {"role": "user", "content": "Hello!"}
    ]


@pytest_asyncio.fixture
async def async_client(session_factory, fake_redis, s3_client, fake_llm):
    """
    FastAPI AsyncClient 픽스처

    DB는 인메모리 SQLite, 채팅 기록은 메모리 Redis, S3/LLM은 mock으로 대체합니다.
    """
    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def _override_chat_service():
        async with session_factory() as session:
            yield ChatService(session, llm_client=fake_llm, selector=None)

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_chat_store] = lambda: ChatStore(fake_redis)
    app.dependency_overrides[get_s3_client] = lambda: s3_client
    app.dependency_overrides[get_chat_service] = _override_chat_service

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
