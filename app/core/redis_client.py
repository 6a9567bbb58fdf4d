"""
Redis 클라이언트 모듈

채팅 기록(KV 스토어)과 Rate Limiting 저장소를 위한 Redis 연결 관리
"""
from redis import asyncio as aioredis
from redis.exceptions import RedisError, WatchError
from typing import Optional, Any, Callable, List
import json
import logging
from app.config import settings
from app.core.exceptions import KeyValueStoreError

logger = logging.getLogger(__name__)


def _encode(value: Any) -> Any:
    # dict/list는 JSON으로 변환
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _decode(value: Optional[str]) -> Optional[Any]:
    if value is None:
        return None
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return value


class RedisClient:
    """
    비동기 Redis 클라이언트

    읽기 연산은 실패 시 로그를 남기고 빈 값을 반환하고,
    쓰기 연산은 KeyValueStoreError로 변환해 전파합니다.
    """

    def __init__(self):
        self.redis: Optional[aioredis.Redis] = None
        self._url = settings.get_redis_url()

    async def connect(self):
        """Redis 연결 초기화 (환경별 TLS/SSL 설정)"""
        try:
            client_kwargs = {
                "encoding": "utf-8",
                "decode_responses": True,
                "socket_connect_timeout": 5,
                "socket_keepalive": True,
            }
            # 프로덕션 환경: SSL/TLS 설정 추가
            client_kwargs.update(settings.redis_ssl_config)

            self.redis = aioredis.from_url(self._url, **client_kwargs)

            # 연결 테스트
            await self.redis.ping()
            logger.info(f"Redis 연결 성공: {self._url.split('@')[-1].split('?')[0]}")  # 비밀번호 숨김
        except Exception as e:
            logger.error(f"Redis 연결 실패: {e}")
            raise

    async def close(self):
        """Redis 연결 종료"""
        if self.redis:
            await self.redis.aclose()
            logger.info("Redis 연결 종료")

    async def get(self, key: str) -> Optional[Any]:
        """키로 값 조회 (JSON 자동 디코딩)"""
        try:
            return _decode(await self.redis.get(key))
        except RedisError as e:
            logger.error(f"Redis GET 실패 [{key}]: {e}")
            return None

    async def mget(self, keys: List[str]) -> List[Optional[Any]]:
        """여러 키 일괄 조회 (없는 키는 None)"""
        if not keys:
            return []
        try:
            values = await self.redis.mget(keys)
            return [_decode(value) for value in values]
        except RedisError as e:
            logger.error(f"Redis MGET 실패 [{len(keys)} keys]: {e}")
            return []

    async def smembers(self, key: str) -> List[str]:
        """집합 멤버 조회"""
        try:
            return list(await self.redis.smembers(key))
        except RedisError as e:
            logger.error(f"Redis SMEMBERS 실패 [{key}]: {e}")
            return []

    async def set(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        """
        키에 값 저장 (JSON 자동 인코딩)

        Args:
            key: 저장할 키
            value: 저장할 값 (dict/list는 JSON으로 변환)
            expire: 만료 시간 (초)
        """
        try:
            return bool(await self.redis.set(key, _encode(value), ex=expire))
        except RedisError as e:
            logger.error(f"Redis SET 실패 [{key}]: {e}")
            raise KeyValueStoreError(message=f"Redis SET 실패: {e}", details={"key": key})

    async def delete(self, *keys: str) -> int:
        """키 삭제 (여러 키 동시 삭제 가능)"""
        try:
            return await self.redis.delete(*keys)
        except RedisError as e:
            logger.error(f"Redis DELETE 실패 [{keys}]: {e}")
            raise KeyValueStoreError(message=f"Redis DELETE 실패: {e}", details={"keys": list(keys)})

    async def sadd(self, key: str, *members: str) -> int:
        """집합에 멤버 추가"""
        try:
            return await self.redis.sadd(key, *members)
        except RedisError as e:
            logger.error(f"Redis SADD 실패 [{key}]: {e}")
            raise KeyValueStoreError(message=f"Redis SADD 실패: {e}", details={"key": key})

    async def srem(self, key: str, *members: str) -> int:
        """집합에서 멤버 제거"""
        try:
            return await self.redis.srem(key, *members)
        except RedisError as e:
            logger.error(f"Redis SREM 실패 [{key}]: {e}")
            raise KeyValueStoreError(message=f"Redis SREM 실패: {e}", details={"key": key})

    async def update_json(
        self,
        key: str,
        mutate: Callable[[Any], Optional[Any]],
        max_retries: int = 5,
    ) -> Optional[Any]:
        """
        WATCH/MULTI/EXEC 기반 낙관적 동시성 갱신 (compare-and-swap)

        mutate는 현재 값(JSON 디코딩)을 받아 새 값을 반환합니다.
        키가 없으면 mutate를 호출하지 않고 None을 반환하고,
        mutate가 None을 반환하면 쓰지 않고 None을 반환합니다.
        다른 클라이언트가 중간에 키를 수정하면 처음부터 다시 시도합니다.

        Raises:
            KeyValueStoreError: 재시도 횟수 초과 또는 Redis 오류
        """
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                for attempt in range(1, max_retries + 1):
                    try:
                        await pipe.watch(key)
                        current = _decode(await pipe.get(key))
                        if current is None:
                            await pipe.unwatch()
                            return None

                        updated = mutate(current)
                        if updated is None:
                            await pipe.unwatch()
                            return None

                        pipe.multi()
                        pipe.set(key, _encode(updated))
                        await pipe.execute()
                        return updated
                    except WatchError:
                        logger.warning(f"Redis CAS 충돌 [{key}] (attempt {attempt}/{max_retries})")
                        continue
        except RedisError as e:
            logger.error(f"Redis CAS 갱신 실패 [{key}]: {e}")
            raise KeyValueStoreError(message=f"Redis 갱신 실패: {e}", details={"key": key})

        raise KeyValueStoreError(
            message=f"동시 수정 충돌로 갱신에 실패했습니다 [{key}]",
            details={"key": key, "retries": max_retries}
        )


# 싱글톤 인스턴스
redis_client = RedisClient()
