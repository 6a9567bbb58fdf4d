"""
페르소나(시스템 프롬프트 프리셋) 데이터베이스 모델
"""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from app.core.database import Base


class Persona(Base):
    """
    채팅 요청마다 선택 가능한 시스템 프롬프트 프리셋

    채팅 요청에서 id로만 참조하며 외래 키로 저장되지 않음
    """
    __tablename__ = "personas"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    system_prompt = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<Persona(id={self.id}, name={self.name})>"
