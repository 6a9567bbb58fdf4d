"""지식 항목 API 엔드포인트"""
import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.base import CreatedResponse, SuccessResponse
from app.schemas.knowledge import (
    KnowledgeItemCreate,
    KnowledgeItemDetailResponse,
    KnowledgeItemListResponse,
    KnowledgeItemPutRequest,
    KnowledgeItemVersionResponse,
    KnowledgeVersionDetailResponse,
    KnowledgeVersionListResponse,
)
from app.services.knowledge_service import DEFAULT_LIMIT, DEFAULT_PAGE, KnowledgeService

logger = logging.getLogger(__name__)

router = APIRouter()

KnowledgeGetResponse = Union[
    KnowledgeVersionListResponse,
    KnowledgeVersionDetailResponse,
    KnowledgeItemDetailResponse,
    KnowledgeItemListResponse,
]


@router.get("", response_model=KnowledgeGetResponse)
async def get_knowledge(
    id: Optional[str] = Query(None, description="지식 항목 ID"),
    versions: Optional[str] = Query(None, description="'true'이면 id의 버전 목록 조회"),
    versionId: Optional[str] = Query(None, description="버전 스냅샷 ID"),
    query: Optional[str] = Query(None, description="제목/본문 검색어"),
    categoryId: Optional[str] = Query(None, description="카테고리 필터"),
    tagIds: Optional[str] = Query(None, description="쉼표로 구분된 태그 ID (모두 포함)"),
    isPinned: Optional[str] = Query(None, description="'true'이면 고정 항목만"),
    page: int = Query(DEFAULT_PAGE, ge=1, description="페이지 번호"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, description="페이지 크기"),
    db: AsyncSession = Depends(get_db),
):
    """
    지식 항목 조회

    우선순위: `id`+`versions=true` (버전 목록) > `versionId` (버전 단건) > `id` (항목 단건) > 목록 검색
    """
    service = KnowledgeService(db)

    if id and versions == "true":
        snapshots = await service.list_versions(id)
        return KnowledgeVersionListResponse(
            versions=[KnowledgeItemVersionResponse.model_validate(v) for v in snapshots]
        )

    if versionId:
        snapshot = await service.get_version(versionId)
        if snapshot is None:
            raise NotFoundError("Version not found")
        return KnowledgeVersionDetailResponse(
            version=KnowledgeItemVersionResponse.model_validate(snapshot)
        )

    if id:
        item = await service.get_item(id)
        if item is None:
            raise NotFoundError("Knowledge item not found")
        return KnowledgeItemDetailResponse(item=item)

    tag_ids = [tag_id.strip() for tag_id in tagIds.split(",") if tag_id.strip()] if tagIds else None
    return await service.list_items(
        query=query or None,
        category_id=categoryId or None,
        tag_ids=tag_ids,
        is_pinned=True if isPinned == "true" else None,
        page=page,
        limit=limit,
    )


@router.post("", response_model=CreatedResponse)
async def create_knowledge_item(
    body: KnowledgeItemCreate,
    db: AsyncSession = Depends(get_db),
):
    if not body.title or not body.content:
        raise ValidationError("Title and content are required")

    item_id = await KnowledgeService(db).create_item(body)
    return CreatedResponse(id=item_id)


@router.put("", response_model=SuccessResponse)
async def update_knowledge_item(
    body: KnowledgeItemPutRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    지식 항목 수정

    - `action: "togglePin"`: 고정 상태 반전 (버전 증가 없음)
    - `action: "restoreVersion"` + `versionId`: 과거 버전으로 복원 (새 버전 생성)
    - 그 외: 전달된 필드만 부분 수정
    """
    if not body.id:
        raise ValidationError("Knowledge item ID is required")

    service = KnowledgeService(db)

    if body.action == "togglePin":
        if not await service.toggle_pin(body.id):
            raise NotFoundError("Knowledge item not found")
        return SuccessResponse()

    if body.action == "restoreVersion" and body.version_id:
        if not await service.restore_version(body.id, body.version_id):
            raise NotFoundError("Failed to restore version")
        return SuccessResponse()

    if not await service.update_item(body.id, body.to_update()):
        raise NotFoundError("Knowledge item not found")
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
async def delete_knowledge_item(
    id: Optional[str] = Query(None, description="지식 항목 ID"),
    db: AsyncSession = Depends(get_db),
):
    if not id:
        raise ValidationError("Knowledge item ID is required")

    if not await KnowledgeService(db).delete_item(id):
        raise NotFoundError("Knowledge item not found")
    return SuccessResponse()
