"""태그 스키마"""
from typing import List, Optional
from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class TagCreate(CamelModel):
    """
    태그 생성 요청

    - names: 여러 이름을 한 번에 find-or-create
    - name + knowledgeItemId: 생성 후 지식 항목에 연결
    """
    name: Optional[str] = None
    names: Optional[List[str]] = None
    knowledge_item_id: Optional[str] = None


class TagUpdate(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None


class TagResponse(CamelModel):
    id: str
    name: str
    created_at: datetime


class TagListResponse(CamelModel):
    tags: List[TagResponse]


class TagDetailResponse(CamelModel):
    tag: TagResponse


class TagIdsResponse(CamelModel):
    tag_ids: List[str] = Field(..., description="입력 순서대로 해석된 태그 ID")
    success: bool = True
