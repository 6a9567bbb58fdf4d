"""
태그 관리 서비스

태그 이름은 유일하며, 생성은 이름 기준 upsert(find-or-create)로 동작합니다.
"""
import logging
from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidInputError, UnsupportedDialectError
from app.models.tag import Tag, knowledge_item_tags
from app.services.common import new_id, utc_now

logger = logging.getLogger(__name__)

# 방언별 INSERT (ON CONFLICT 지원)
_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class TagService:
    """태그 CRUD 및 지식 항목 연결 관리"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _insert(self, table):
        dialect = self.db.get_bind().dialect.name
        try:
            return _DIALECT_INSERTS[dialect](table)
        except KeyError:
            raise UnsupportedDialectError(dialect)

    async def list_tags(self) -> List[Tag]:
        result = await self.db.execute(select(Tag).order_by(Tag.name.asc()))
        return list(result.scalars().all())

    async def get_tag(self, tag_id: str) -> Optional[Tag]:
        return await self.db.get(Tag, tag_id, populate_existing=True)

    async def get_tags_for_item(self, knowledge_item_id: str) -> List[Tag]:
        result = await self.db.execute(
            select(Tag)
            .join(knowledge_item_tags, knowledge_item_tags.c.tag_id == Tag.id)
            .where(knowledge_item_tags.c.knowledge_item_id == knowledge_item_id)
            .order_by(Tag.name.asc())
        )
        return list(result.scalars().all())

    async def create_tag(self, name: str) -> str:
        """
        이름으로 태그 생성 (이미 있으면 기존 ID 반환)

        ON CONFLICT(name) DO UPDATE로 자기 자신을 갱신해 RETURNING이 항상 행을 돌려주게 합니다.
        """
        stmt = self._insert(Tag).values(id=new_id(), name=name, created_at=utc_now())
        stmt = stmt.on_conflict_do_update(
            index_elements=["name"],
            set_={"name": stmt.excluded.name},
        ).returning(Tag.id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def get_or_create_tags(self, names: List[str]) -> List[str]:
        """
        이름 목록을 태그 ID 목록으로 변환

        - 앞뒤 공백 제거, 빈 이름은 건너뜀
        - 입력 순서 유지 (같은 이름은 같은 ID)
        """
        tag_ids = []
        for raw in names:
            name = (raw or "").strip()
            if not name:
                continue
            tag_ids.append(await self.create_tag(name))
        return tag_ids

    async def update_tag(self, tag_id: str, name: str) -> bool:
        """
        태그 이름 변경

        Raises:
            InvalidInputError: 다른 태그가 이미 같은 이름을 사용 중인 경우
        """
        duplicate = await self.db.execute(
            select(Tag.id).where(Tag.name == name, Tag.id != tag_id)
        )
        if duplicate.scalar_one_or_none() is not None:
            raise InvalidInputError(f"Tag name already exists: {name}")

        try:
            result = await self.db.execute(
                update(Tag).where(Tag.id == tag_id).values(name=name)
            )
        except IntegrityError:
            # 동시 요청으로 같은 이름이 먼저 생성된 경우
            raise InvalidInputError(f"Tag name already exists: {name}")
        return result.rowcount > 0

    async def delete_tag(self, tag_id: str) -> bool:
        """태그 삭제 (지식 항목 연결도 함께 제거)"""
        await self.db.execute(
            delete(knowledge_item_tags).where(knowledge_item_tags.c.tag_id == tag_id)
        )
        result = await self.db.execute(delete(Tag).where(Tag.id == tag_id))
        return result.rowcount > 0

    async def add_tag_to_item(self, knowledge_item_id: str, tag_id: str) -> None:
        """지식 항목에 태그 연결 (이미 연결되어 있으면 무시)"""
        stmt = self._insert(knowledge_item_tags).values(
            knowledge_item_id=knowledge_item_id,
            tag_id=tag_id,
        ).on_conflict_do_nothing()
        await self.db.execute(stmt)

    async def remove_tag_from_item(self, knowledge_item_id: str, tag_id: str) -> bool:
        result = await self.db.execute(
            delete(knowledge_item_tags).where(
                knowledge_item_tags.c.knowledge_item_id == knowledge_item_id,
                knowledge_item_tags.c.tag_id == tag_id,
            )
        )
        return result.rowcount > 0

    async def replace_item_tags(self, knowledge_item_id: str, names: List[str]) -> List[str]:
        """지식 항목의 태그 집합 전체 교체 (삭제 후 삽입)"""
        await self.db.execute(
            delete(knowledge_item_tags).where(
                knowledge_item_tags.c.knowledge_item_id == knowledge_item_id
            )
        )
        tag_ids = await self.get_or_create_tags(names)
        for tag_id in dict.fromkeys(tag_ids):
            await self.add_tag_to_item(knowledge_item_id, tag_id)
        return tag_ids
