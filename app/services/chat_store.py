"""
채팅 기록 저장소 (Redis)

채팅 1개 = JSON 레코드 1개 (`chat:<id>`), 전체 채팅 ID는 `chat_index` 집합에 보관합니다.
레코드 수정은 모두 WATCH/MULTI 기반 compare-and-swap으로 처리되어
동시에 메시지를 추가해도 서로 덮어쓰지 않습니다.
"""
import logging
import time
import uuid
from typing import Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ChatStoreError, KeyValueStoreError
from app.core.redis_client import RedisClient, redis_client
from app.schemas.chat import ChatMessage, ChatRecord

logger = logging.getLogger(__name__)

CHAT_KEY_PREFIX = "chat:"
CHAT_INDEX_KEY = "chat_index"
DEFAULT_CHAT_TITLE = "New Chat"


def _chat_key(chat_id: str) -> str:
    return f"{CHAT_KEY_PREFIX}{chat_id}"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _dump(record: ChatRecord) -> dict:
    return record.model_dump(by_alias=True)


class ChatStore:
    """Redis 기반 채팅 기록 저장소"""

    def __init__(self, client: RedisClient = redis_client, max_retries: int = 5):
        self.client = client
        self.max_retries = max_retries

    @staticmethod
    def _parse(raw) -> Optional[ChatRecord]:
        if not isinstance(raw, dict):
            return None
        try:
            return ChatRecord.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning(f"손상된 채팅 레코드 무시: {e}")
            return None

    async def _mutate(self, chat_id: str, apply) -> Optional[ChatRecord]:
        """
        레코드 CAS 갱신

        apply(record)는 레코드를 제자리에서 수정합니다. 채팅이 없으면 None.
        """
        def mutate(raw):
            record = self._parse(raw)
            if record is None:
                return None
            apply(record)
            record.updated_at = _now_ms()
            return _dump(record)

        try:
            updated = await self.client.update_json(_chat_key(chat_id), mutate, max_retries=self.max_retries)
        except KeyValueStoreError as e:
            raise ChatStoreError(message=f"채팅 갱신 실패 [{chat_id}]: {e.message}", details=e.details)
        return self._parse(updated) if updated is not None else None

    async def create_chat(self, title: str = DEFAULT_CHAT_TITLE) -> ChatRecord:
        timestamp = _now_ms()
        record = ChatRecord(
            id=str(uuid.uuid4()),
            title=title or DEFAULT_CHAT_TITLE,
            messages=[],
            file_ids=[],
            created_at=timestamp,
            updated_at=timestamp,
        )
        try:
            await self.client.set(_chat_key(record.id), _dump(record))
            await self.client.sadd(CHAT_INDEX_KEY, record.id)
        except KeyValueStoreError as e:
            raise ChatStoreError(message=f"채팅 생성 실패: {e.message}", details=e.details)
        logger.info(f"채팅 생성: id={record.id}")
        return record

    async def list_chats(self) -> List[ChatRecord]:
        """전체 채팅 (최근 수정 순, 레코드가 없는 ID는 제외)"""
        ids = await self.client.smembers(CHAT_INDEX_KEY)
        if not ids:
            return []

        raws = await self.client.mget([_chat_key(chat_id) for chat_id in ids])
        chats = [chat for chat in (self._parse(raw) for raw in raws) if chat is not None]
        chats.sort(key=lambda chat: chat.updated_at, reverse=True)
        return chats

    async def get_chat(self, chat_id: str) -> Optional[ChatRecord]:
        return self._parse(await self.client.get(_chat_key(chat_id)))

    async def add_message(self, chat_id: str, role: str, content: str) -> Optional[ChatMessage]:
        """메시지 추가. 채팅이 없으면 None"""
        message = ChatMessage(
            id=str(uuid.uuid4()),
            role=role,
            content=content,
            created_at=_now_ms(),
        )

        updated = await self._mutate(chat_id, lambda record: record.messages.append(message))
        if updated is None:
            return None
        return message

    async def update_title(self, chat_id: str, title: str) -> bool:
        def apply(record: ChatRecord):
            record.title = title

        return await self._mutate(chat_id, apply) is not None

    async def associate_files(self, chat_id: str, file_ids: Iterable[str]) -> bool:
        """파일 ID 병합 (중복 제거, 기존 순서 유지)"""
        new_ids = list(file_ids)

        def apply(record: ChatRecord):
            record.file_ids = list(dict.fromkeys([*record.file_ids, *new_ids]))

        return await self._mutate(chat_id, apply) is not None

    async def delete_chat(self, chat_id: str) -> bool:
        """채팅 삭제. 레코드가 없었으면 False"""
        try:
            await self.client.srem(CHAT_INDEX_KEY, chat_id)
            deleted = await self.client.delete(_chat_key(chat_id))
        except KeyValueStoreError as e:
            raise ChatStoreError(message=f"채팅 삭제 실패 [{chat_id}]: {e.message}", details=e.details)
        return deleted > 0


def get_chat_store() -> ChatStore:
    """FastAPI 의존성: 채팅 저장소"""
    return ChatStore(redis_client)
