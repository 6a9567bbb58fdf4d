"""
카테고리 데이터베이스 모델
"""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


class Category(Base):
    """지식 항목 분류용 카테고리 (이름 중복은 허용)"""
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"
