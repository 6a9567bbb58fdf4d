"""태그 API 엔드포인트"""
import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import NotFoundError, ValidationError
from app.models.knowledge import KnowledgeItem
from app.schemas.base import CreatedResponse, SuccessResponse
from app.schemas.tag import (
    TagCreate,
    TagDetailResponse,
    TagIdsResponse,
    TagListResponse,
    TagResponse,
    TagUpdate,
)
from app.services.tag_service import TagService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _ensure_knowledge_item(db: AsyncSession, knowledge_item_id: str) -> None:
    if await db.get(KnowledgeItem, knowledge_item_id) is None:
        raise NotFoundError("Knowledge item not found")


@router.get("", response_model=Union[TagDetailResponse, TagListResponse])
async def get_tags(
    id: Optional[str] = Query(None, description="태그 ID (지정 시 단건 조회)"),
    knowledgeItemId: Optional[str] = Query(None, description="지식 항목에 연결된 태그만 조회"),
    db: AsyncSession = Depends(get_db),
):
    service = TagService(db)

    if id:
        tag = await service.get_tag(id)
        if tag is None:
            raise NotFoundError("Tag not found")
        return TagDetailResponse(tag=TagResponse.model_validate(tag))

    if knowledgeItemId:
        tags = await service.get_tags_for_item(knowledgeItemId)
    else:
        tags = await service.list_tags()
    return TagListResponse(tags=[TagResponse.model_validate(tag) for tag in tags])


@router.post("", response_model=Union[TagIdsResponse, CreatedResponse])
async def create_tag(
    body: TagCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    태그 생성

    - `names` 배열: 여러 이름을 find-or-create 후 `{tagIds, success}` 반환
    - `name` (+ `knowledgeItemId`): 단건 생성 후 지식 항목에 연결
    """
    service = TagService(db)

    if body.names is not None:
        return TagIdsResponse(tag_ids=await service.get_or_create_tags(body.names))

    name = (body.name or "").strip()
    if not name:
        raise ValidationError("Tag name is required")

    if body.knowledge_item_id:
        await _ensure_knowledge_item(db, body.knowledge_item_id)

    tag_id = await service.create_tag(name)
    if body.knowledge_item_id:
        await service.add_tag_to_item(body.knowledge_item_id, tag_id)
    return CreatedResponse(id=tag_id)


@router.put("", response_model=SuccessResponse)
async def update_tag(
    body: TagUpdate,
    db: AsyncSession = Depends(get_db),
):
    name = (body.name or "").strip()
    if not body.id or not name:
        raise ValidationError("Tag ID and name are required")

    if not await TagService(db).update_tag(body.id, name):
        raise NotFoundError("Tag not found")
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
async def delete_tag(
    id: Optional[str] = Query(None, description="태그 ID"),
    knowledgeItemId: Optional[str] = Query(None, description="지정 시 연결만 해제"),
    db: AsyncSession = Depends(get_db),
):
    if not id:
        raise ValidationError("Tag ID is required")

    service = TagService(db)

    # 지식 항목과의 연결만 해제 (태그는 유지)
    if knowledgeItemId:
        await service.remove_tag_from_item(knowledgeItemId, id)
        return SuccessResponse()

    if not await service.delete_tag(id):
        raise NotFoundError("Tag not found")
    return SuccessResponse()
