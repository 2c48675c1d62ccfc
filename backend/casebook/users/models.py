# backend/casebook/users/models.py
from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, JSON, Index
from sqlalchemy.sql import func
from ..database import Base

class UserRole(str, PyEnum):
    USER = "user"
    ADMIN = "admin"
    AUTHOR = "author"

class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)  # 항상 소문자로 저장
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    avatar = Column(String(500), nullable=False, default="")

    # 프로필
    bio = Column(Text)
    company = Column(String(100))
    position = Column(String(100))
    website = Column(String(500))
    social_links = Column(JSON, nullable=False, default=dict)   # {"linkedin": ..., "twitter": ..., "github": ...}
    preferences = Column(JSON, nullable=False, default=dict)    # {"categories": [...], "newsletter": bool}

    # 통계
    articles_read = Column(Integer, nullable=False, default=0)
    case_studies_read = Column(Integer, nullable=False, default=0)
    bookmarks = Column(Integer, nullable=False, default=0)
    last_active = Column(DateTime(timezone=True))

    is_verified = Column(Boolean, nullable=False, default=False)
    reset_password_token = Column(String(512))
    reset_password_expires = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"User(id={self.id}, name={self.name!r}, email={self.email!r}, role={self.role!r})"
    def __str__(self) -> str:
        return f"{self.name} ({self.email})"
