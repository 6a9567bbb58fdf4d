"""
ChatStore 단위 테스트 (메모리 Redis)
"""
import pytest

from app.core.exceptions import ChatStoreError, KeyValueStoreError
from app.services.chat_store import CHAT_INDEX_KEY, DEFAULT_CHAT_TITLE, ChatStore


@pytest.fixture
def store(fake_redis):
    return ChatStore(fake_redis)


@pytest.fixture
def ticking_clock(monkeypatch):
    """호출마다 1ms씩 증가하는 시계"""
    ticks = iter(range(1_700_000_000_000, 1_800_000_000_000))
    monkeypatch.setattr("app.services.chat_store._now_ms", lambda: next(ticks))


class TestChatStore:

    @pytest.mark.asyncio
    async def test_create_and_get(self, store, fake_redis):
        chat = await store.create_chat()

        assert chat.title == DEFAULT_CHAT_TITLE
        assert chat.messages == []
        assert chat.created_at == chat.updated_at
        assert chat.id in fake_redis.sets[CHAT_INDEX_KEY]

        loaded = await store.get_chat(chat.id)
        assert loaded == chat

    @pytest.mark.asyncio
    async def test_record_is_stored_with_camel_case_keys(self, store, fake_redis):
        chat = await store.create_chat("Support")

        raw = await fake_redis.get(f"chat:{chat.id}")
        assert set(raw) >= {"id", "title", "messages", "fileIds", "createdAt", "updatedAt"}

    @pytest.mark.asyncio
    async def test_add_message_preserves_order(self, store, ticking_clock):
        chat = await store.create_chat()

        first = await store.add_message(chat.id, "user", "hi")
        second = await store.add_message(chat.id, "assistant", "hello")

        loaded = await store.get_chat(chat.id)
        assert [m.id for m in loaded.messages] == [first.id, second.id]
        assert loaded.messages[1].content == "hello"
        assert loaded.updated_at > chat.updated_at

    @pytest.mark.asyncio
    async def test_mutations_on_missing_chat(self, store):
        assert await store.add_message("missing", "user", "hi") is None
        assert await store.update_title("missing", "x") is False
        assert await store.associate_files("missing", ["f1"]) is False
        assert await store.get_chat("missing") is None

    @pytest.mark.asyncio
    async def test_associate_files_deduplicates(self, store):
        chat = await store.create_chat()

        await store.associate_files(chat.id, ["f1", "f2"])
        await store.associate_files(chat.id, ["f2", "f3", "f3"])

        assert (await store.get_chat(chat.id)).file_ids == ["f1", "f2", "f3"]

    @pytest.mark.asyncio
    async def test_list_sorted_by_updated_at(self, store, ticking_clock):
        older = await store.create_chat("older")
        newer = await store.create_chat("newer")
        await store.update_title(older.id, "older, renamed")

        chats = await store.list_chats()
        assert [c.id for c in chats] == [older.id, newer.id]

    @pytest.mark.asyncio
    async def test_list_skips_dangling_ids(self, store, fake_redis):
        chat = await store.create_chat()
        fake_redis.sets[CHAT_INDEX_KEY].add("ghost")

        assert [c.id for c in await store.list_chats()] == [chat.id]

    @pytest.mark.asyncio
    async def test_delete(self, store):
        chat = await store.create_chat()

        assert await store.delete_chat(chat.id)
        assert await store.get_chat(chat.id) is None
        assert await store.list_chats() == []
        assert await store.delete_chat(chat.id) is False

    @pytest.mark.asyncio
    async def test_store_errors_are_wrapped(self, store, fake_redis, monkeypatch):
        async def failing_update(*args, **kwargs):
            raise KeyValueStoreError(message="boom")

        chat = await store.create_chat()
        monkeypatch.setattr(fake_redis, "update_json", failing_update)

        with pytest.raises(ChatStoreError):
            await store.add_message(chat.id, "user", "hi")
