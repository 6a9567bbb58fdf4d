"""카테고리 API 엔드포인트"""
import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.base import CreatedResponse, SuccessResponse
from app.schemas.category import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)
from app.services.category_service import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Union[CategoryDetailResponse, CategoryListResponse])
async def get_categories(
    id: Optional[str] = Query(None, description="카테고리 ID (지정 시 단건 조회)"),
    db: AsyncSession = Depends(get_db),
):
    service = CategoryService(db)

    if id:
        category = await service.get_category(id)
        if category is None:
            raise NotFoundError("Category not found")
        return CategoryDetailResponse(category=CategoryResponse.model_validate(category))

    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in await service.list_categories()]
    )


@router.post("", response_model=CreatedResponse)
async def create_category(
    body: CategoryCreate,
    db: AsyncSession = Depends(get_db),
):
    if not body.name:
        raise ValidationError("Name is required")

    category_id = await CategoryService(db).create_category(body.name, body.description)
    return CreatedResponse(id=category_id)


@router.put("", response_model=SuccessResponse)
async def update_category(
    body: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    if not body.id:
        raise ValidationError("Category ID is required")

    updated = await CategoryService(db).update_category(body.id, body.name, body.description)
    if not updated:
        raise NotFoundError("Category not found")
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
async def delete_category(
    id: Optional[str] = Query(None, description="카테고리 ID"),
    db: AsyncSession = Depends(get_db),
):
    if not id:
        raise ValidationError("Category ID is required")

    if not await CategoryService(db).delete_category(id):
        raise NotFoundError("Category not found")
    return SuccessResponse()
