"""
AWS S3 클라이언트 유틸리티 (업로드 파일 저장소)
"""
import asyncio
from typing import Optional
from urllib.parse import quote, unquote, urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.core.exceptions import BlobStorageError
from app.core.logging_config import get_logger

logger = get_logger(__name__)


class S3Client:
    """AWS S3 클라이언트"""

    def __init__(self, client=None):
        if client is None:
            # ECS Task Role 사용 시 자격증명 파라미터 생략
            client_config = {'region_name': settings.aws_region}

            # 로컬 개발 환경에서만 명시적 자격증명 사용
            if settings.aws_access_key_id and settings.aws_secret_access_key:
                client_config['aws_access_key_id'] = settings.aws_access_key_id
                client_config['aws_secret_access_key'] = settings.aws_secret_access_key

            client = boto3.client('s3', **client_config)

        self.client = client
        self.bucket_name = settings.s3_bucket_name
        self.public_base_url = (
            settings.s3_public_base_url.rstrip("/")
            or f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com"
        )

    def public_url(self, key: str) -> str:
        """S3 키에 대한 공개 URL"""
        return f"{self.public_base_url}/{quote(key)}"

    def key_from_url(self, url: str) -> str:
        """
        공개 URL에서 S3 키 추출

        public_base_url 접두사가 있으면 제거하고, 아니면 URL 경로를 키로 간주
        """
        prefix = f"{self.public_base_url}/"
        if url.startswith(prefix):
            return unquote(url[len(prefix):])
        return unquote(urlparse(url).path.lstrip("/"))

    async def upload_file(
        self,
        file_content: bytes,
        key: str,
        content_type: str = "application/octet-stream"
    ) -> str:
        """
        S3에 파일 업로드

        Args:
            file_content: 파일 바이너리 데이터
            key: S3 키 (경로)
            content_type: MIME 타입

        Returns:
            공개 URL
        """
        try:
            # boto3는 동기 API이므로 스레드에서 실행
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 업로드 실패 [{key}]: {e}")
            raise BlobStorageError(
                message=f"S3 업로드 실패: {e}",
                details={"key": key}
            )

        url = self.public_url(key)
        logger.info(f"S3 업로드 성공: s3://{self.bucket_name}/{key}")
        return url

    async def delete_file(self, key: str) -> None:
        """
        S3에서 파일 삭제

        Args:
            key: S3 키 (경로)
        """
        try:
            await asyncio.to_thread(
                self.client.delete_object,
                Bucket=self.bucket_name,
                Key=key
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 삭제 실패 [{key}]: {e}")
            raise BlobStorageError(
                message=f"S3 삭제 실패: {e}",
                details={"key": key}
            )
        logger.info(f"S3 삭제 성공: s3://{self.bucket_name}/{key}")

    async def delete_by_url(self, url: str) -> None:
        """공개 URL로 파일 삭제"""
        await self.delete_file(self.key_from_url(url))


# 싱글톤 인스턴스
_s3_client: Optional[S3Client] = None


def get_s3_client() -> S3Client:
    """S3 클라이언트 싱글톤"""
    global _s3_client
    if _s3_client is None:
        _s3_client = S3Client()
    return _s3_client
