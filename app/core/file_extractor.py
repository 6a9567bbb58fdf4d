"""
첨부 파일 텍스트 추출

URL에서 파일을 내려받아 Content-Type별로 프롬프트에 넣을 텍스트를 만듭니다.
실패해도 예외를 던지지 않고 오류 설명 문자열을 반환합니다.
"""
import json
import logging
from typing import Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

PDF_PLACEHOLDER = "PDF content extraction is not implemented in this demo."
MEDIA_PREFIXES = ("image/", "audio/", "video/")


class FileContentExtractor:
    """Content-Type 기반 텍스트 추출기"""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: Optional[float] = None):
        self._client = client
        self.timeout = timeout if timeout is not None else settings.file_fetch_timeout

    async def extract(self, url: str) -> str:
        try:
            if self._client is not None:
                response = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url)
            response.raise_for_status()
            return self._render(url, response)
        except Exception as e:
            logger.warning(f"파일 내용 추출 실패 [{url}]: {e}")
            return f"[Error extracting file content: {e}]"

    @staticmethod
    def _render(url: str, response: httpx.Response) -> str:
        content_type = response.headers.get("content-type", "")
        # "text/plain; charset=utf-8" -> "text/plain"
        mime = content_type.split(";")[0].strip().lower()

        if mime.startswith("text/"):
            return response.text
        if mime == "application/pdf":
            return PDF_PLACEHOLDER
        if mime == "application/json":
            return json.dumps(response.json(), indent=2, ensure_ascii=False)
        if mime.startswith(MEDIA_PREFIXES):
            return f"[This is a {content_type} file available at {url}]"
        return f"[Unsupported file type: {content_type}]"


_extractor: Optional[FileContentExtractor] = None


def get_file_extractor() -> FileContentExtractor:
    """파일 추출기 싱글톤"""
    global _extractor
    if _extractor is None:
        _extractor = FileContentExtractor()
    return _extractor
