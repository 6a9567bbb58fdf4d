"""
태그 및 지식 항목-태그 연결 테이블 모델
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Table
from sqlalchemy.sql import func

from app.core.database import Base


# 지식 항목 <-> 태그 다대다 연결 테이블
knowledge_item_tags = Table(
    "knowledge_item_tags",
    Base.metadata,
    Column(
        "knowledge_item_id",
        String(36),
        ForeignKey("knowledge_items.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        String(36),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Tag(Base):
    """태그 (이름 유일)"""
    __tablename__ = "tags"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Tag(id={self.id}, name={self.name})>"
