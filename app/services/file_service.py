"""
파일 업로드/메타데이터 관리 서비스

바이너리는 S3에, 메타데이터는 files 테이블에 저장합니다.
"""
import logging
import time
from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.aws_clients import S3Client
from app.core.exceptions import FileSizeExceededError, InvalidInputError
from app.models.file import FileMetadata
from app.services.common import new_id, utc_now

logger = logging.getLogger(__name__)


class FileService:
    """파일 메타데이터 CRUD + S3 업로드/삭제"""

    def __init__(self, db: AsyncSession, s3_client: S3Client):
        self.db = db
        self.s3 = s3_client

    @staticmethod
    def build_blob_key(filename: str) -> str:
        """타임스탬프(ms) 접두사로 고유한 저장 이름 생성"""
        return f"{int(time.time() * 1000)}-{filename}"

    async def upload_file(self, filename: str, content: bytes, content_type: str) -> FileMetadata:
        """
        S3 업로드 후 메타데이터 저장

        Raises:
            InvalidInputError: 빈 파일
            FileSizeExceededError: MAX_UPLOAD_SIZE 초과
        """
        size = len(content)
        if size == 0:
            raise InvalidInputError("Uploaded file is empty")
        if size > settings.max_upload_size:
            raise FileSizeExceededError(
                f"File size exceeds the upload limit ({settings.max_upload_size} bytes)",
                details={"size": size, "limit": settings.max_upload_size}
            )

        content_type = content_type or "application/octet-stream"
        url = await self.s3.upload_file(content, self.build_blob_key(filename), content_type)

        metadata = FileMetadata(
            id=new_id(),
            name=filename,
            url=url,
            content_type=content_type,
            size=size,
            created_at=utc_now(),
        )
        self.db.add(metadata)
        await self.db.flush()
        logger.info(f"파일 업로드 완료: id={metadata.id}, name={filename}, size={size}")
        return metadata

    async def list_files(self) -> List[FileMetadata]:
        result = await self.db.execute(select(FileMetadata).order_by(FileMetadata.created_at.desc()))
        return list(result.scalars().all())

    async def get_file(self, file_id: str) -> Optional[FileMetadata]:
        return await self.db.get(FileMetadata, file_id, populate_existing=True)

    async def get_file_by_url(self, url: str) -> Optional[FileMetadata]:
        result = await self.db.execute(select(FileMetadata).where(FileMetadata.url == url).limit(1))
        return result.scalar_one_or_none()

    async def update_file_metadata(
        self,
        file_id: str,
        name: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> bool:
        """변경할 필드가 없거나 대상이 없으면 False"""
        values = {}
        if name is not None:
            values["name"] = name
        if content_type is not None:
            values["content_type"] = content_type
        if not values:
            return False

        result = await self.db.execute(
            update(FileMetadata).where(FileMetadata.id == file_id).values(**values)
        )
        return result.rowcount > 0

    async def _delete(self, metadata: FileMetadata) -> None:
        """
        메타데이터 행을 먼저 삭제(flush)한 뒤 블롭 삭제

        블롭 삭제가 실패하면 예외가 전파되어 요청 트랜잭션 전체가 롤백됩니다.
        """
        await self.db.execute(delete(FileMetadata).where(FileMetadata.id == metadata.id))
        await self.db.flush()
        await self.s3.delete_by_url(metadata.url)
        logger.info(f"파일 삭제 완료: id={metadata.id}, url={metadata.url}")

    async def delete_file(self, file_id: str) -> bool:
        metadata = await self.get_file(file_id)
        if metadata is None:
            return False
        await self._delete(metadata)
        return True

    async def delete_file_by_url(self, url: str) -> bool:
        metadata = await self.get_file_by_url(url)
        if metadata is None:
            return False
        await self._delete(metadata)
        return True
