"""파일 메타데이터/업로드 스키마"""
from typing import List, Optional
from datetime import datetime

from app.schemas.base import CamelModel


class FileMetadataUpdate(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    content_type: Optional[str] = None


class FileMetadataResponse(CamelModel):
    id: str
    name: str
    url: str
    content_type: str
    size: int
    created_at: datetime


class FileListResponse(CamelModel):
    files: List[FileMetadataResponse]


class FileDetailResponse(CamelModel):
    file: FileMetadataResponse


class UploadResponse(CamelModel):
    """업로드 결과: 메타데이터 + success"""
    id: str
    name: str
    url: str
    content_type: str
    size: int
    success: bool = True
