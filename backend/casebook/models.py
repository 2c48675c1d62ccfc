from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

class CustomModel(BaseModel):
    """
    프로젝트의 모든 Pydantic 스키마가 상속받는 공통 기본 모델.
    API 데이터 정책(camelCase 키, ORM 변환, UTC 시간 포맷)을 중앙에서 관리합니다.
    """
    model_config = ConfigDict(
        # 프론트엔드는 camelCase 키를 사용합니다. snake_case 이름으로도 값 할당 가능.
        alias_generator=to_camel,
        populate_by_name=True,

        # SQLAlchemy 모델 객체를 Pydantic 스키마로 변환 가능하게 합니다.
        from_attributes=True,

        # 정의되지 않은 필드가 들어오면 검증 실패
        extra="forbid",
    )

    @field_serializer('*', check_fields=False)
    def serialize_datetime(self, value, _info):
        """datetime 객체를 UTC 기준 ISO-8601 문자열로 변환합니다."""
        if isinstance(value, datetime):
            # SQLite는 naive datetime을 돌려주므로 UTC로 간주합니다.
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            else:
                value = value.astimezone(timezone.utc)
            return value.isoformat().replace("+00:00", "Z")
        return value


class MessageResponse(CustomModel):
    message: str
