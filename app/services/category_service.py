"""
카테고리 관리 서비스
"""
import logging
from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.category import Category
from app.models.knowledge import KnowledgeItem
from app.services.common import new_id, utc_now

logger = logging.getLogger(__name__)


class CategoryService:
    """카테고리 CRUD"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self) -> List[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name.asc()))
        return list(result.scalars().all())

    async def get_category(self, category_id: str) -> Optional[Category]:
        return await self.db.get(Category, category_id, populate_existing=True)

    async def exists(self, category_id: str) -> bool:
        result = await self.db.execute(select(Category.id).where(Category.id == category_id))
        return result.scalar_one_or_none() is not None

    async def create_category(self, name: str, description: Optional[str] = None) -> str:
        category = Category(
            id=new_id(),
            name=name,
            description=description,
            created_at=utc_now(),
        )
        self.db.add(category)
        await self.db.flush()
        logger.info(f"카테고리 생성: id={category.id}, name={name}")
        return category.id

    async def update_category(
        self,
        category_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> bool:
        """
        부분 수정 (전달된 필드만 반영)

        Returns:
            수정 대상이 존재했는지 여부
        """
        values = {}
        if name is not None:
            values["name"] = name
        if description is not None:
            values["description"] = description

        if not values:
            return await self.exists(category_id)

        result = await self.db.execute(
            update(Category).where(Category.id == category_id).values(**values)
        )
        return result.rowcount > 0

    async def delete_category(self, category_id: str) -> bool:
        """
        카테고리 삭제

        참조 중인 지식 항목의 category_id는 NULL로 변경됩니다 (항목은 유지, 버전 증가 없음).
        """
        if not await self.exists(category_id):
            return False

        detached = await self.db.execute(
            update(KnowledgeItem)
            .where(KnowledgeItem.category_id == category_id)
            .values(category_id=None)
        )
        await self.db.execute(delete(Category).where(Category.id == category_id))
        logger.info(f"카테고리 삭제: id={category_id}, 연결 해제된 지식 항목={detached.rowcount}")
        return True
