"""
지식 항목 및 버전 스냅샷 데이터베이스 모델
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func

from app.core.database import Base


class KnowledgeItem(Base):
    """
    버전 관리되는 지식 문서

    - version: 1부터 시작, 내용 수정/복원마다 1씩 증가
    - files: 첨부 파일 URL 목록 (JSON 직렬화)
    - category/tags는 조회 시점에 조인으로 채워짐
    """
    __tablename__ = "knowledge_items"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    files = Column(JSON, nullable=True)
    category_id = Column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    version = Column(Integer, nullable=False, default=1)
    is_pinned = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<KnowledgeItem(id={self.id}, title={self.title}, version={self.version})>"


class KnowledgeItemVersion(Base):
    """지식 항목의 특정 버전 불변 스냅샷"""
    __tablename__ = "knowledge_item_versions"

    id = Column(String(36), primary_key=True, index=True)
    knowledge_item_id = Column(
        String(36),
        ForeignKey("knowledge_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    files = Column(JSON, nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<KnowledgeItemVersion(item={self.knowledge_item_id}, version={self.version})>"
