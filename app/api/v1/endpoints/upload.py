"""파일 업로드 API 엔드포인트"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from app.core.exceptions import NotFoundError, ValidationError
from app.schemas.base import SuccessResponse
from app.schemas.file import UploadResponse
from app.services.file_service import FileService
from app.api.v1.endpoints.files import get_file_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = File(None, description="업로드할 파일"),
    service: FileService = Depends(get_file_service),
):
    """
    단일 파일 업로드 (multipart/form-data, 필드명 `file`)

    - 최대 크기: MAX_UPLOAD_SIZE (기본 10MB)
    - 저장 이름: `<epoch-ms>-<원본 파일명>`
    """
    if file is None or not file.filename:
        raise ValidationError("No file provided")

    content = await file.read()
    logger.info(f"파일 업로드 요청: {file.filename} ({len(content)} bytes, {file.content_type})")

    metadata = await service.upload_file(
        filename=file.filename,
        content=content,
        content_type=file.content_type,
    )
    return UploadResponse(
        id=metadata.id,
        name=metadata.name,
        url=metadata.url,
        content_type=metadata.content_type,
        size=metadata.size,
    )


@router.delete("", response_model=SuccessResponse)
async def delete_uploaded_file(
    url: Optional[str] = Query(None, description="삭제할 파일 URL"),
    service: FileService = Depends(get_file_service),
):
    if not url:
        raise ValidationError("File URL is required")

    if not await service.delete_file_by_url(url):
        raise NotFoundError("File not found")
    return SuccessResponse()
