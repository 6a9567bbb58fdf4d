"""
업로드 파일 메타데이터 데이터베이스 모델
"""
from sqlalchemy import Column, String, Text, Integer, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


class FileMetadata(Base):
    """
    S3에 업로드된 파일의 메타데이터

    지식 항목/채팅에서는 url 또는 id로 느슨하게 참조함 (외래 키 없음)
    """
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    url = Column(Text, nullable=False, index=True)
    content_type = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)  # bytes
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<FileMetadata(id={self.id}, name={self.name}, size={self.size})>"
