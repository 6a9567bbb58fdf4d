"""카테고리 스키마"""
from typing import List, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class CategoryCreate(CamelModel):
    # 필수 여부는 엔드포인트에서 검사 (400 메시지 통일)
    name: Optional[str] = Field(None, description="카테고리 이름")
    description: Optional[str] = Field(None, description="카테고리 설명")


class CategoryUpdate(CamelModel):
    id: Optional[str] = Field(None, description="카테고리 ID")
    name: Optional[str] = None
    description: Optional[str] = None


class CategoryResponse(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime


class CategoryListResponse(CamelModel):
    categories: List[CategoryResponse]


class CategoryDetailResponse(CamelModel):
    category: CategoryResponse
