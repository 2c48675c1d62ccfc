# backend/casebook/content/models.py
from enum import Enum as PyEnum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, Boolean, JSON,
    Enum as SQLEnum, Index
)
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func
from ..database import Base
from . import rules

class ContentStatus(str, PyEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

class ContentType(str, PyEnum):
    BLOG = "blog"
    CASE_STUDY = "case_study"

class InteractionKind(str, PyEnum):
    VIEW = "view"
    LIKE = "like"
    BOOKMARK = "bookmark"
    SHARE = "share"
    DOWNLOAD = "download"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class ArticleMixin:
    """Blog 와 CaseStudy 가 공유하는 컬럼과 파생 필드 규칙"""

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(String(500), nullable=False)
    content = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    image = Column(String(500), nullable=False, default="")
    author_name = Column(String(50), nullable=False)  # 생성 시점의 작성자 이름 (조인 없이 표시)
    status = Column(
        SQLEnum(ContentStatus, name="content_status", values_callable=_enum_values),
        nullable=False,
        default=ContentStatus.PUBLISHED,
        index=True,
    )
    featured = Column(Boolean, nullable=False, default=False)

    # 참여 카운터 (사용자별 중복 제거 없음)
    views = Column(Integer, nullable=False, default=0)
    likes = Column(Integer, nullable=False, default=0)
    shares = Column(Integer, nullable=False, default=0)
    bookmarks = Column(Integer, nullable=False, default=0)

    read_time = Column(Integer, nullable=False, default=1)
    published_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @declared_attr
    def author_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    def apply_derivations(self, key, value):
        # 각 모델의 @validates 에서 호출
        if key == "title":
            self.slug = rules.slugify(value)
        elif key == "content":
            self.read_time = rules.read_time(value)
        elif key == "status":
            self.published_at = rules.publish_timestamp(value, self.published_at)
        return value


class ContentInteraction(Base):
    """
    사용자별 참여 기록 (append-only).
    북마크 목록과 읽은 기록 조회에 사용되며, 유니크 제약이 없으므로
    같은 사용자의 반복 호출도 그대로 쌓입니다.
    """
    __tablename__ = "content_interactions"
    __table_args__ = (
        Index("ix_interactions_user_kind_created", "user_id", "kind", "created_at"),
        Index("ix_interactions_content", "content_type", "content_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content_type = Column(SQLEnum(ContentType, name="content_type", values_callable=_enum_values), nullable=False)
    content_id = Column(Integer, nullable=False)
    kind = Column(SQLEnum(InteractionKind, name="interaction_kind", values_callable=_enum_values), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"ContentInteraction(user_id={self.user_id}, {self.content_type}:{self.content_id}, kind={self.kind})"
