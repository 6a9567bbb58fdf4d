"""
FileService / S3Client 단위 테스트 (boto3 클라이언트는 mock)
"""
import pytest
from botocore.exceptions import ClientError

from app.config import settings
from app.core.exceptions import BlobStorageError, FileSizeExceededError, InvalidInputError
from app.services.file_service import FileService


class TestS3Client:

    def test_public_url_round_trip(self, s3_client):
        url = s3_client.public_url("1700000000000-my report.txt")

        assert url.startswith(s3_client.public_base_url + "/")
        assert " " not in url
        assert s3_client.key_from_url(url) == "1700000000000-my report.txt"

    @pytest.mark.asyncio
    async def test_upload_error_is_wrapped(self, s3_client, mock_boto_client):
        mock_boto_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )

        with pytest.raises(BlobStorageError):
            await s3_client.upload_file(b"data", "key.txt", "text/plain")


class TestFileService:

    @pytest.mark.asyncio
    async def test_upload_stores_blob_and_metadata(self, db_session, s3_client, mock_boto_client):
        service = FileService(db_session, s3_client)

        metadata = await service.upload_file("notes.txt", b"hello", "text/plain")

        mock_boto_client.put_object.assert_called_once()
        kwargs = mock_boto_client.put_object.call_args.kwargs
        assert kwargs["Key"].endswith("-notes.txt")
        assert kwargs["Body"] == b"hello"
        assert kwargs["ContentType"] == "text/plain"

        assert metadata.size == 5
        assert metadata.url == s3_client.public_url(kwargs["Key"])
        assert (await service.get_file_by_url(metadata.url)).id == metadata.id

    @pytest.mark.asyncio
    async def test_upload_rejects_empty_file(self, db_session, s3_client, mock_boto_client):
        service = FileService(db_session, s3_client)

        with pytest.raises(InvalidInputError):
            await service.upload_file("empty.txt", b"", "text/plain")
        mock_boto_client.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_rejects_oversized_file(self, db_session, s3_client, mock_boto_client, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_size", 4)
        service = FileService(db_session, s3_client)

        with pytest.raises(FileSizeExceededError):
            await service.upload_file("big.txt", b"12345", "text/plain")
        mock_boto_client.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_by_url_removes_blob_and_row(self, db_session, s3_client, mock_boto_client):
        service = FileService(db_session, s3_client)
        metadata = await service.upload_file("notes.txt", b"hello", "text/plain")
        key = mock_boto_client.put_object.call_args.kwargs["Key"]

        assert await service.delete_file_by_url(metadata.url)

        mock_boto_client.delete_object.assert_called_once_with(Bucket=s3_client.bucket_name, Key=key)
        assert await service.get_file_by_url(metadata.url) is None
        assert await service.delete_file_by_url(metadata.url) is False

    @pytest.mark.asyncio
    async def test_update_metadata(self, db_session, s3_client):
        service = FileService(db_session, s3_client)
        metadata = await service.upload_file("notes.txt", b"hello", "text/plain")

        assert await service.update_file_metadata(metadata.id) is False
        assert await service.update_file_metadata(metadata.id, name="renamed.txt")
        assert (await service.get_file(metadata.id)).name == "renamed.txt"
