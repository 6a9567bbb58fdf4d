"""
KnowledgeService 단위 테스트 (인메모리 SQLite)
"""
import pytest

from app.core.exceptions import NotFoundError
from app.schemas.knowledge import KnowledgeItemCreate, KnowledgeItemUpdate
from app.services.category_service import CategoryService
from app.services.knowledge_service import KnowledgeService
from app.services.tag_service import TagService


async def _create(service: KnowledgeService, **fields) -> str:
    data = {"title": "Refund policy", "content": "Refunds within 30 days."}
    data.update(fields)
    item_id = await service.create_item(KnowledgeItemCreate(**data))
    await service.db.commit()
    return item_id


class TestKnowledgeCreate:
    """지식 항목 생성"""

    @pytest.mark.asyncio
    async def test_create_starts_at_version_one_with_snapshot(self, db_session):
        service = KnowledgeService(db_session)
        item_id = await _create(service, files=["https://cdn.test/a.txt"])

        item = await service.get_item(item_id)
        assert item.version == 1
        assert item.is_pinned is False
        assert item.files == ["https://cdn.test/a.txt"]

        versions = await service.list_versions(item_id)
        assert [v.version for v in versions] == [1]
        assert versions[0].title == "Refund policy"

    @pytest.mark.asyncio
    async def test_create_links_tags_by_name(self, db_session):
        service = KnowledgeService(db_session)
        item_id = await _create(service, tag_names=["billing", " billing ", "faq"])

        item = await service.get_item(item_id)
        assert sorted(tag.name for tag in item.tags) == ["billing", "faq"]

    @pytest.mark.asyncio
    async def test_create_with_unknown_category_raises(self, db_session):
        service = KnowledgeService(db_session)

        with pytest.raises(NotFoundError):
            await service.create_item(KnowledgeItemCreate(title="t", content="c", category_id="missing"))

    @pytest.mark.asyncio
    async def test_get_missing_item_returns_none(self, db_session):
        assert await KnowledgeService(db_session).get_item("missing") is None


class TestKnowledgeVersions:
    """버전 증가, 스냅샷, 복원"""

    @pytest.mark.asyncio
    async def test_each_update_adds_one_version(self, db_session):
        service = KnowledgeService(db_session)
        item_id = await _create(service)

        for n in range(3):
            assert await service.update_item(item_id, KnowledgeItemUpdate(content=f"revision {n}"))
        await db_session.commit()

        item = await service.get_item(item_id)
        assert item.version == 4
        assert item.content == "revision 2"

        versions = await service.list_versions(item_id)
        assert [v.version for v in versions] == [4, 3, 2, 1]
        assert versions[0].content == "revision 2"
        assert versions[-1].content == "Refunds within 30 days."

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db_session):
        service = KnowledgeService(db_session)
        item_id = await _create(service, files=["https://cdn.test/a.txt"])

        await service.update_item(item_id, KnowledgeItemUpdate(title="Returns"))
        await db_session.commit()

        item = await service.get_item(item_id)
        assert item.title == "Returns"
        assert item.content == "Refunds within 30 days."
        assert item.files == ["https://cdn.test/a.txt"]

    @pytest.mark.asyncio
    async def test_update_missing_item_returns_false(self, db_session):
        service = KnowledgeService(db_session)
        assert await service.update_item("missing", KnowledgeItemUpdate(title="x")) is False

    @pytest.mark.asyncio
    async def test_update_replaces_tags_only_when_given(self, db_session):
        service = KnowledgeService(db_session)
        item_id = await _create(service, tag_names=["a", "b"])

        await service.update_item(item_id, KnowledgeItemUpdate(title="no tag change"))
        await db_session.commit()
        assert sorted(t.name for t in (await service.get_item(item_id)).tags) == ["a", "b"]

        await service.update_item(item_id, KnowledgeItemUpdate(tag_names=["c"]))
        await db_session.commit()
        assert [t.name for t in (await service.get_item(item_id)).tags] == ["c"]

        await service.update_item(item_id, KnowledgeItemUpdate(tag_names=[]))
        await db_session.commit()
        assert (await service.get_item(item_id)).tags == []

    @pytest.mark.asyncio
    async def test_restore_creates_new_version(self, db_session):
        service = KnowledgeService(db_session)
        item_id = await _create(service)
        await service.update_item(item_id, KnowledgeItemUpdate(title="Changed", content="Changed body"))
        await db_session.commit()

        first = [v for v in await service.list_versions(item_id) if v.version == 1][0]
        assert await service.restore_version(item_id, first.id)
        await db_session.commit()

        item = await service.get_item(item_id)
        assert item.version == 3
        assert item.title == "Refund policy"
        assert item.content == "Refunds within 30 days."

        versions = await service.list_versions(item_id)
        assert [v.version for v in versions] == [3, 2, 1]
        assert versions[0].content == "Refunds within 30 days."

    @pytest.mark.asyncio
    async def test_restore_rejects_version_of_other_item(self, db_session):
        service = KnowledgeService(db_session)
        first_id = await _create(service)
        second_id = await _create(service, title="Shipping")

        foreign = (await service.list_versions(second_id))[0]
        assert await service.restore_version(first_id, foreign.id) is False
        assert await service.restore_version(first_id, "missing") is False

    @pytest.mark.asyncio
    async def test_toggle_pin_does_not_create_version(self, db_session):
        service = KnowledgeService(db_session)
        item_id = await _create(service)

        assert await service.toggle_pin(item_id)
        await db_session.commit()
        item = await service.get_item(item_id)
        assert item.is_pinned is True
        assert item.version == 1
        assert len(await service.list_versions(item_id)) == 1

        assert await service.toggle_pin(item_id)
        await db_session.commit()
        assert (await service.get_item(item_id)).is_pinned is False

    @pytest.mark.asyncio
    async def test_toggle_pin_missing_item(self, db_session):
        assert await KnowledgeService(db_session).toggle_pin("missing") is False

    @pytest.mark.asyncio
    async def test_delete_removes_versions(self, db_session):
        service = KnowledgeService(db_session)
        item_id = await _create(service, tag_names=["a"])

        assert await service.delete_item(item_id)
        await db_session.commit()

        assert await service.list_versions(item_id) == []
        assert await TagService(db_session).get_tags_for_item(item_id) == []
        assert await service.delete_item(item_id) is False


class TestKnowledgeSearch:
    """검색/필터/정렬/페이지네이션"""

    @pytest.mark.asyncio
    async def test_tag_filter_requires_all_tags(self, db_session):
        service = KnowledgeService(db_session)
        both = await _create(service, title="both", tag_names=["a", "b"])
        await _create(service, title="only a", tag_names=["a"])
        await _create(service, title="none")

        tag_ids = await TagService(db_session).get_or_create_tags(["a", "b"])
        listing = await service.list_items(tag_ids=tag_ids)

        assert listing.total == 1
        assert [item.id for item in listing.items] == [both]

        # 중복 태그 ID는 한 번으로 취급
        listing = await service.list_items(tag_ids=[tag_ids[0], tag_ids[0]])
        assert listing.total == 2

    @pytest.mark.asyncio
    async def test_query_matches_title_or_content_case_insensitive(self, db_session):
        service = KnowledgeService(db_session)
        await _create(service, title="Refund policy", content="...")
        await _create(service, title="Other", content="ask about REFUNDS here")
        await _create(service, title="Shipping", content="3-5 days")

        listing = await service.list_items(query="refund")
        assert listing.total == 2

    @pytest.mark.asyncio
    async def test_query_treats_like_wildcards_literally(self, db_session):
        service = KnowledgeService(db_session)
        await _create(service, title="Refund policy", content="30 days")
        await _create(service, title="Shipping", content="3-5 days")
        discount = await _create(service, title="Discount", content="10% off with PROMO_CODE")

        assert (await service.list_items(query="_")).total == 1
        percent = await service.list_items(query="%")
        assert [item.id for item in percent.items] == [discount]
        assert (await service.list_items(query="3_5")).total == 0

    @pytest.mark.asyncio
    async def test_pinned_items_come_first(self, db_session):
        service = KnowledgeService(db_session)
        pinned = await _create(service, title="old pinned", is_pinned=True)
        newer = await _create(service, title="newer")

        listing = await service.list_items()
        assert [item.id for item in listing.items] == [pinned, newer]

        only_pinned = await service.list_items(is_pinned=True)
        assert [item.id for item in only_pinned.items] == [pinned]

    @pytest.mark.asyncio
    async def test_recently_updated_first(self, db_session):
        service = KnowledgeService(db_session)
        first = await _create(service, title="first")
        second = await _create(service, title="second")

        await service.update_item(first, KnowledgeItemUpdate(content="touched"))
        await db_session.commit()

        listing = await service.list_items()
        assert [item.id for item in listing.items] == [first, second]

    @pytest.mark.asyncio
    async def test_pagination(self, db_session):
        service = KnowledgeService(db_session)
        for n in range(5):
            await _create(service, title=f"item {n}")

        listing = await service.list_items(page=2, limit=2)
        assert listing.total == 5
        assert listing.total_pages == 3
        assert listing.page == 2
        assert len(listing.items) == 2

        empty = await service.list_items(query="nothing matches")
        assert empty.total == 0
        assert empty.total_pages == 0
        assert empty.items == []

    @pytest.mark.asyncio
    async def test_category_filter_and_enrichment(self, db_session):
        category_id = await CategoryService(db_session).create_category("Billing")
        service = KnowledgeService(db_session)
        item_id = await _create(service, category_id=category_id)
        await _create(service, title="uncategorized")

        listing = await service.list_items(category_id=category_id)
        assert [item.id for item in listing.items] == [item_id]
        assert listing.items[0].category.name == "Billing"


class TestCategoryDeletion:
    """카테고리 삭제 시 지식 항목 참조 해제"""

    @pytest.mark.asyncio
    async def test_delete_category_nulls_reference_without_new_version(self, db_session):
        category_service = CategoryService(db_session)
        category_id = await category_service.create_category("Billing")
        service = KnowledgeService(db_session)
        item_id = await _create(service, category_id=category_id)

        assert await category_service.delete_category(category_id)
        await db_session.commit()

        item = await service.get_item(item_id)
        assert item.category_id is None
        assert item.category is None
        assert item.version == 1

    @pytest.mark.asyncio
    async def test_update_can_clear_category(self, db_session):
        category_id = await CategoryService(db_session).create_category("Billing")
        service = KnowledgeService(db_session)
        item_id = await _create(service, category_id=category_id)

        await service.update_item(item_id, KnowledgeItemUpdate.model_validate({"categoryId": None}))
        await db_session.commit()

        assert (await service.get_item(item_id)).category_id is None

    @pytest.mark.asyncio
    async def test_update_with_blank_category_clears_it(self, db_session):
        category_id = await CategoryService(db_session).create_category("Billing")
        service = KnowledgeService(db_session)
        item_id = await _create(service, category_id=category_id)

        assert await service.update_item(item_id, KnowledgeItemUpdate.model_validate({"categoryId": ""}))
        await db_session.commit()

        item = await service.get_item(item_id)
        assert item.category_id is None
        assert item.version == 2
