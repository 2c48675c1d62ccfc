import json
from typing import Annotated, List

from fastapi import Depends
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file="../.env", env_file_encoding="utf-8", extra="ignore")

    # 애플리케이션 설정
    ENVIRONMENT: str = "development"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # 데이터베이스 설정
    DATABASE_URL: str = "postgresql+asyncpg://user:postgres@db:5432/casebook_db"
    POSTGRES_SSLMODE: str = "disable"

    # JWT 인증 설정
    JWT_SECRET_KEY: str = "your-secret-key"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    RESET_TOKEN_EXPIRE_MINUTES: int = 60

    # bcrypt cost (테스트에서는 낮춰서 사용)
    BCRYPT_ROUNDS: int = 12

    # CORS 설정
    CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # 가입/로그인 시 author 역할을 부여받는 이메일 목록
    AUTHOR_EMAILS: Annotated[List[str], NoDecode] = []

    @field_validator("CORS_ORIGINS", "AUTHOR_EMAILS", mode="before")
    @classmethod
    def _normalise_list(cls, value):
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            raw = value.strip()
            if raw.startswith("[") and raw.endswith("]"):
                try:
                    parsed = json.loads(raw)
                    if isinstance(parsed, list):
                        return parsed
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in raw.split(",") if item.strip()]
        raise ValueError("value must be a string or list of strings")

    @field_validator("AUTHOR_EMAILS")
    @classmethod
    def _lowercase_emails(cls, value: List[str]) -> List[str]:
        return [email.lower() for email in value]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


settings = Config()


def get_settings() -> Config:
    return settings


# 라우터/서비스에서 `config: SettingsDep` 로 설정 객체를 주입받습니다.
SettingsDep = Annotated[Config, Depends(get_settings)]
