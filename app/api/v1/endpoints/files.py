"""파일 메타데이터 API 엔드포인트"""
import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.aws_clients import S3Client, get_s3_client
from app.core.database import get_db
from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.base import SuccessResponse
from app.schemas.file import (
    FileDetailResponse,
    FileListResponse,
    FileMetadataResponse,
    FileMetadataUpdate,
)
from app.services.file_service import FileService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_file_service(
    db: AsyncSession = Depends(get_db),
    s3_client: S3Client = Depends(get_s3_client),
) -> FileService:
    """FastAPI 의존성: 파일 서비스"""
    return FileService(db, s3_client)


@router.get("", response_model=Union[FileDetailResponse, FileListResponse])
async def get_files(
    id: Optional[str] = Query(None, description="파일 ID (지정 시 단건 조회)"),
    service: FileService = Depends(get_file_service),
):
    if id:
        metadata = await service.get_file(id)
        if metadata is None:
            raise NotFoundError("File not found")
        return FileDetailResponse(file=FileMetadataResponse.model_validate(metadata))

    files = await service.list_files()
    return FileListResponse(files=[FileMetadataResponse.model_validate(f) for f in files])


@router.put("", response_model=SuccessResponse)
async def update_file(
    body: FileMetadataUpdate,
    service: FileService = Depends(get_file_service),
):
    if not body.id:
        raise ValidationError("File ID is required")

    if not await service.update_file_metadata(body.id, name=body.name, content_type=body.content_type):
        raise NotFoundError("File not found")
    return SuccessResponse()


@router.delete("", response_model=SuccessResponse)
async def delete_file(
    id: Optional[str] = Query(None, description="파일 ID"),
    service: FileService = Depends(get_file_service),
):
    if not id:
        raise ValidationError("File ID is required")

    if not await service.delete_file(id):
        raise NotFoundError("File not found")
    return SuccessResponse()
