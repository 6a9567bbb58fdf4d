"""
데이터베이스 모델 패키지
"""
from app.models.category import Category
from app.models.tag import Tag, knowledge_item_tags
from app.models.persona import Persona
from app.models.file import FileMetadata
from app.models.knowledge import KnowledgeItem, KnowledgeItemVersion

__all__ = [
    "Category",
    "Tag",
    "knowledge_item_tags",
    "Persona",
    "FileMetadata",
    "KnowledgeItem",
    "KnowledgeItemVersion",
]
