"""
공통 스키마 베이스

ORM/내부 필드는 snake_case, API 입출력은 camelCase 키를 사용합니다.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 별칭을 자동 생성하는 베이스 모델 (snake_case 입력도 허용)"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(CamelModel):
    success: bool = True


class CreatedResponse(CamelModel):
    """생성 응답: {id, success}"""
    id: str
    success: bool = True
