"""
TagService 단위 테스트
"""
from unittest.mock import AsyncMock, Mock

import pytest

from app.core.exceptions import DatabaseError, InvalidInputError, UnsupportedDialectError
from app.schemas.knowledge import KnowledgeItemCreate
from app.services.knowledge_service import KnowledgeService
from app.services.tag_service import TagService


class TestTagUpsert:
    """이름 기준 find-or-create"""

    @pytest.mark.asyncio
    async def test_create_tag_is_idempotent(self, db_session):
        service = TagService(db_session)

        first = await service.create_tag("billing")
        second = await service.create_tag("billing")

        assert first == second
        assert [tag.name for tag in await service.list_tags()] == ["billing"]

    @pytest.mark.asyncio
    async def test_get_or_create_trims_and_keeps_order(self, db_session):
        service = TagService(db_session)

        ids = await service.get_or_create_tags(["x", "x", " x ", "", "   ", "y"])

        assert len(ids) == 4
        assert len(set(ids[:3])) == 1
        assert ids[3] != ids[0]
        assert sorted(tag.name for tag in await service.list_tags()) == ["x", "y"]

    @pytest.mark.asyncio
    async def test_get_or_create_empty(self, db_session):
        assert await TagService(db_session).get_or_create_tags([]) == []

    @pytest.mark.asyncio
    async def test_unknown_dialect_is_database_error(self):
        db = Mock()
        db.get_bind.return_value.dialect.name = "mysql"
        db.execute = AsyncMock()

        with pytest.raises(UnsupportedDialectError) as exc_info:
            await TagService(db).create_tag("billing")

        assert isinstance(exc_info.value, DatabaseError)
        assert exc_info.value.details == {"dialect": "mysql"}
        db.execute.assert_not_called()


class TestTagUpdateDelete:

    @pytest.mark.asyncio
    async def test_rename(self, db_session):
        service = TagService(db_session)
        tag_id = await service.create_tag("old")

        assert await service.update_tag(tag_id, "new")
        assert (await service.get_tag(tag_id)).name == "new"

    @pytest.mark.asyncio
    async def test_rename_to_existing_name_rejected(self, db_session):
        service = TagService(db_session)
        tag_id = await service.create_tag("a")
        await service.create_tag("b")

        with pytest.raises(InvalidInputError):
            await service.update_tag(tag_id, "b")

    @pytest.mark.asyncio
    async def test_rename_missing_tag(self, db_session):
        assert await TagService(db_session).update_tag("missing", "name") is False

    @pytest.mark.asyncio
    async def test_delete_removes_links(self, db_session):
        knowledge = KnowledgeService(db_session)
        item_id = await knowledge.create_item(
            KnowledgeItemCreate(title="t", content="c", tag_names=["a", "b"])
        )
        service = TagService(db_session)
        tag_a = (await service.get_or_create_tags(["a"]))[0]

        assert await service.delete_tag(tag_a)
        assert [tag.name for tag in await service.get_tags_for_item(item_id)] == ["b"]
        assert await service.delete_tag(tag_a) is False


class TestItemLinks:

    @pytest.mark.asyncio
    async def test_add_is_idempotent_and_remove(self, db_session):
        knowledge = KnowledgeService(db_session)
        item_id = await knowledge.create_item(KnowledgeItemCreate(title="t", content="c"))
        service = TagService(db_session)
        tag_id = await service.create_tag("faq")

        await service.add_tag_to_item(item_id, tag_id)
        await service.add_tag_to_item(item_id, tag_id)
        assert [tag.id for tag in await service.get_tags_for_item(item_id)] == [tag_id]

        assert await service.remove_tag_from_item(item_id, tag_id)
        assert await service.get_tags_for_item(item_id) == []
        assert await service.remove_tag_from_item(item_id, tag_id) is False
