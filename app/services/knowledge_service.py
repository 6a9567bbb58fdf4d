"""
지식 항목 관리 서비스

버전 관리 규칙:
- 생성 시 version=1 스냅샷을 함께 저장
- 내용 수정/버전 복원마다 version을 SQL에서 1 증가시키고 RETURNING 행으로 스냅샷 저장
- 고정(pin) 토글은 버전을 만들지 않음
"""
import logging
import math
from typing import List, Optional, Sequence

from sqlalchemy import select, update, delete, func, not_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.category import Category
from app.models.knowledge import KnowledgeItem, KnowledgeItemVersion
from app.models.tag import knowledge_item_tags
from app.schemas.category import CategoryResponse
from app.schemas.knowledge import (
    KnowledgeItemCreate,
    KnowledgeItemListResponse,
    KnowledgeItemResponse,
    KnowledgeItemUpdate,
)
from app.schemas.tag import TagResponse
from app.services.common import new_id, utc_now
from app.services.tag_service import TagService

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class KnowledgeService:
    """지식 항목 CRUD, 검색, 고정, 버전 이력/복원"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tags = TagService(db)

    # ------------------------------------------------------------------
    # 내부 헬퍼
    # ------------------------------------------------------------------

    async def _ensure_category(self, category_id: str) -> None:
        result = await self.db.execute(select(Category.id).where(Category.id == category_id))
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Category not found", details={"category_id": category_id})

    def _snapshot(self, item_id: str, title: str, content: str, files, version: int) -> None:
        self.db.add(KnowledgeItemVersion(
            id=new_id(),
            knowledge_item_id=item_id,
            title=title,
            content=content,
            files=files,
            version=version,
            created_at=utc_now(),
        ))

    async def _enrich(self, item: KnowledgeItem) -> KnowledgeItemResponse:
        """카테고리 객체와 태그 목록을 붙인 응답 모델 (항목마다 조회)"""
        category = await self.db.get(Category, item.category_id) if item.category_id else None
        tags = await self.tags.get_tags_for_item(item.id)

        response = KnowledgeItemResponse.model_validate(item)
        response.category = CategoryResponse.model_validate(category) if category else None
        response.tags = [TagResponse.model_validate(tag) for tag in tags]
        return response

    @staticmethod
    def _tag_match_subquery(tag_ids: Sequence[str]):
        """모든 태그를 가진 항목 ID (HAVING COUNT = N)"""
        return (
            select(knowledge_item_tags.c.knowledge_item_id)
            .where(knowledge_item_tags.c.tag_id.in_(tag_ids))
            .group_by(knowledge_item_tags.c.knowledge_item_id)
            .having(func.count() == len(tag_ids))
        )

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    async def list_items(
        self,
        query: Optional[str] = None,
        category_id: Optional[str] = None,
        tag_ids: Optional[Sequence[str]] = None,
        is_pinned: Optional[bool] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> KnowledgeItemListResponse:
        """
        검색/필터/페이지네이션 목록

        Args:
            query: 제목/본문 대소문자 무시 부분 일치
            category_id: 카테고리 일치
            tag_ids: 나열된 태그를 모두 가진 항목만
            is_pinned: 고정 여부 일치
            page: 1부터 시작
            limit: 페이지 크기
        """
        page = max(page, 1)
        limit = max(limit, 1)

        conditions = []
        if query:
            # % 와 _ 는 와일드카드가 아닌 문자 그대로 매칭
            conditions.append(or_(
                KnowledgeItem.title.icontains(query, autoescape=True),
                KnowledgeItem.content.icontains(query, autoescape=True),
            ))
        if category_id:
            conditions.append(KnowledgeItem.category_id == category_id)
        if is_pinned is not None:
            conditions.append(KnowledgeItem.is_pinned == is_pinned)

        unique_tag_ids = list(dict.fromkeys(tag_ids or []))
        if unique_tag_ids:
            conditions.append(KnowledgeItem.id.in_(self._tag_match_subquery(unique_tag_ids)))

        total_result = await self.db.execute(
            select(func.count()).select_from(KnowledgeItem).where(*conditions)
        )
        total = total_result.scalar_one()

        result = await self.db.execute(
            select(KnowledgeItem)
            .where(*conditions)
            .order_by(KnowledgeItem.is_pinned.desc(), KnowledgeItem.updated_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        items = [await self._enrich(item) for item in result.scalars().all()]

        return KnowledgeItemListResponse(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )

    async def get_item(self, item_id: str) -> Optional[KnowledgeItemResponse]:
        item = await self.db.get(KnowledgeItem, item_id, populate_existing=True)
        if item is None:
            return None
        return await self._enrich(item)

    # ------------------------------------------------------------------
    # 생성/수정/삭제
    # ------------------------------------------------------------------

    async def create_item(self, data: KnowledgeItemCreate) -> str:
        """
        지식 항목 생성 (version 1 + 스냅샷 + 태그 연결)

        Raises:
            NotFoundError: categoryId가 존재하지 않는 경우
        """
        if data.category_id:
            await self._ensure_category(data.category_id)

        now = utc_now()
        item = KnowledgeItem(
            id=new_id(),
            title=data.title,
            content=data.content,
            files=list(data.files or []),
            category_id=data.category_id or None,
            version=1,
            is_pinned=data.is_pinned,
            created_at=now,
            updated_at=now,
        )
        self.db.add(item)
        await self.db.flush()
        self._snapshot(item.id, item.title, item.content, item.files, 1)

        if data.tag_names:
            for tag_id in dict.fromkeys(await self.tags.get_or_create_tags(data.tag_names)):
                await self.tags.add_tag_to_item(item.id, tag_id)

        await self.db.flush()
        logger.info(f"지식 항목 생성: id={item.id}, title={item.title}")
        return item.id

    async def update_item(self, item_id: str, data: KnowledgeItemUpdate) -> bool:
        """
        부분 수정 후 버전 증가 + 스냅샷

        Returns:
            대상 항목이 존재했는지 여부

        Raises:
            NotFoundError: 변경하려는 categoryId가 존재하지 않는 경우
        """
        current = await self.db.get(KnowledgeItem, item_id)
        if current is None:
            return False

        values = data.column_values()
        if values.get("category_id"):
            await self._ensure_category(values["category_id"])

        result = await self.db.execute(
            update(KnowledgeItem)
            .where(KnowledgeItem.id == item_id)
            .values(**values, updated_at=utc_now(), version=KnowledgeItem.version + 1)
            .returning(
                KnowledgeItem.title,
                KnowledgeItem.content,
                KnowledgeItem.files,
                KnowledgeItem.version,
            )
            .execution_options(synchronize_session=False)
        )
        row = result.one_or_none()
        if row is None:
            return False
        self._snapshot(item_id, row.title, row.content, row.files, row.version)

        if data.replaces_tags:
            await self.tags.replace_item_tags(item_id, data.tag_names)

        await self.db.flush()
        # 세션에 남은 이전 상태 제거
        await self.db.refresh(current)
        logger.info(f"지식 항목 수정: id={item_id}, version={row.version}")
        return True

    async def delete_item(self, item_id: str) -> bool:
        """항목 삭제 (태그 연결과 버전 스냅샷도 같은 트랜잭션에서 삭제)"""
        await self.db.execute(
            delete(knowledge_item_tags).where(knowledge_item_tags.c.knowledge_item_id == item_id)
        )
        await self.db.execute(
            delete(KnowledgeItemVersion).where(KnowledgeItemVersion.knowledge_item_id == item_id)
        )
        result = await self.db.execute(delete(KnowledgeItem).where(KnowledgeItem.id == item_id))
        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"지식 항목 삭제: id={item_id}")
        return deleted

    async def toggle_pin(self, item_id: str) -> bool:
        """고정 상태 반전 (버전 증가 없음)"""
        result = await self.db.execute(
            update(KnowledgeItem)
            .where(KnowledgeItem.id == item_id)
            .values(is_pinned=not_(KnowledgeItem.is_pinned), updated_at=utc_now())
            .returning(KnowledgeItem.is_pinned)
            .execution_options(synchronize_session=False)
        )
        pinned = result.scalar_one_or_none()
        if pinned is None:
            return False

        item = await self.db.get(KnowledgeItem, item_id)
        await self.db.refresh(item)
        logger.info(f"지식 항목 고정 상태 변경: id={item_id}, is_pinned={pinned}")
        return True

    # ------------------------------------------------------------------
    # 버전
    # ------------------------------------------------------------------

    async def list_versions(self, item_id: str) -> List[KnowledgeItemVersion]:
        """버전 스냅샷 목록 (최신 버전 먼저)"""
        result = await self.db.execute(
            select(KnowledgeItemVersion)
            .where(KnowledgeItemVersion.knowledge_item_id == item_id)
            .order_by(KnowledgeItemVersion.version.desc())
        )
        return list(result.scalars().all())

    async def get_version(self, version_id: str) -> Optional[KnowledgeItemVersion]:
        return await self.db.get(KnowledgeItemVersion, version_id)

    async def restore_version(self, item_id: str, version_id: str) -> bool:
        """
        과거 버전 내용으로 복원

        되돌리기가 아니라 새 버전 생성입니다 (version + 1, 새 스냅샷).
        다른 항목의 버전 ID이거나 버전/항목이 없으면 False.
        """
        version = await self.get_version(version_id)
        if version is None or version.knowledge_item_id != item_id:
            return False

        result = await self.db.execute(
            update(KnowledgeItem)
            .where(KnowledgeItem.id == item_id)
            .values(
                title=version.title,
                content=version.content,
                files=version.files,
                version=KnowledgeItem.version + 1,
                updated_at=utc_now(),
            )
            .returning(KnowledgeItem.version)
            .execution_options(synchronize_session=False)
        )
        new_version = result.scalar_one_or_none()
        if new_version is None:
            return False

        self._snapshot(item_id, version.title, version.content, version.files, new_version)
        await self.db.flush()

        item = await self.db.get(KnowledgeItem, item_id)
        await self.db.refresh(item)
        logger.info(f"지식 항목 버전 복원: id={item_id}, from={version.version}, new={new_version}")
        return True

