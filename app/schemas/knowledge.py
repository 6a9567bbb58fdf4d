"""지식 항목 스키마"""
from typing import Any, ClassVar, Dict, List, Literal, Optional
from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.base import CamelModel
from app.schemas.category import CategoryResponse
from app.schemas.tag import TagResponse


class KnowledgeItemCreate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    files: List[str] = Field(default_factory=list, description="첨부 파일 URL 목록")
    category_id: Optional[str] = None
    tag_names: Optional[List[str]] = None
    is_pinned: bool = False


class KnowledgeItemUpdate(CamelModel):
    """
    지식 항목 부분 수정

    요청에 실제로 포함된 필드만 반영됩니다 (`model_fields_set` 기준).
    categoryId를 명시적으로 null로 보내면 카테고리 연결이 해제됩니다.
    tagNames는 빈 배열이라도 포함되면 태그 집합 전체를 교체합니다.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    files: Optional[List[str]] = None
    category_id: Optional[str] = None
    tag_names: Optional[List[str]] = None
    is_pinned: Optional[bool] = None

    # 필드 -> 컬럼 매핑 (tag_names는 조인 테이블에서 별도 처리)
    COLUMN_FIELDS: ClassVar[tuple] = ("title", "content", "files", "category_id", "is_pinned")

    def column_values(self) -> Dict[str, Any]:
        """요청에 포함된 컬럼 필드만 {컬럼명: 값} 으로 반환"""
        values = {}
        for field in self.COLUMN_FIELDS:
            if field not in self.model_fields_set:
                continue
            value = getattr(self, field)
            # category_id 외에는 null로 지울 수 없음
            if value is None and field != "category_id":
                continue
            # 빈 문자열 categoryId는 연결 해제로 취급
            if field == "category_id" and not value:
                value = None
            values[field] = value
        return values

    @property
    def replaces_tags(self) -> bool:
        return "tag_names" in self.model_fields_set and self.tag_names is not None


class KnowledgeItemPutRequest(KnowledgeItemUpdate):
    """PUT /api/knowledge 본문: 일반 수정 또는 action 실행"""
    id: Optional[str] = None
    action: Optional[Literal["togglePin", "restoreVersion"]] = None
    version_id: Optional[str] = None

    def to_update(self) -> KnowledgeItemUpdate:
        fields = self.model_fields_set & set(KnowledgeItemUpdate.model_fields)
        return KnowledgeItemUpdate.model_validate(
            {name: getattr(self, name) for name in fields}
        )


class KnowledgeItemResponse(CamelModel):
    id: str
    title: str
    content: str
    files: List[str] = Field(default_factory=list)
    category_id: Optional[str] = None
    version: int
    is_pinned: bool
    created_at: datetime
    updated_at: datetime
    category: Optional[CategoryResponse] = None
    tags: List[TagResponse] = Field(default_factory=list)

    @field_validator("files", mode="before")
    @classmethod
    def _files_default(cls, value):
        return value or []


class KnowledgeItemListResponse(CamelModel):
    items: List[KnowledgeItemResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class KnowledgeItemDetailResponse(CamelModel):
    item: KnowledgeItemResponse


class KnowledgeItemVersionResponse(CamelModel):
    id: str
    knowledge_item_id: str
    title: str
    content: str
    files: List[str] = Field(default_factory=list)
    version: int
    created_at: datetime

    @field_validator("files", mode="before")
    @classmethod
    def _files_default(cls, value):
        return value or []


class KnowledgeVersionListResponse(CamelModel):
    versions: List[KnowledgeItemVersionResponse]


class KnowledgeVersionDetailResponse(CamelModel):
    version: KnowledgeItemVersionResponse
