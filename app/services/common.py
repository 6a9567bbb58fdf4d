"""
서비스 공통 유틸리티
"""
import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """엔티티 ID (UUID4 문자열)"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
