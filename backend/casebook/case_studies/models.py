# backend/casebook/case_studies/models.py
from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, Index
from sqlalchemy.orm import validates
from ..database import Base
from ..content.models import ArticleMixin

class CaseStudyCategory(str, PyEnum):
    WEB_APPS = "web-apps"
    MOBILE_APPS = "mobile-apps"
    WINDOWS_APPS = "windows-apps"
    DIGITAL_MARKETING = "digital-marketing"
    AD_SHOOT = "ad-shoot"

class Difficulty(str, PyEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class CaseStudy(ArticleMixin, Base):
    __tablename__ = "case_studies"
    __table_args__ = (
        Index("ix_case_studies_category_status", "category", "status"),
    )

    # enum 값 검증은 스키마에서 수행, DB 에는 문자열로 저장
    category = Column(String(50), nullable=False, default=CaseStudyCategory.WEB_APPS.value)
    industry = Column(String(100), index=True)
    difficulty = Column(String(20))
    downloads = Column(Integer, nullable=False, default=0)

    @validates("title", "content", "status")
    def _derive(self, key, value):
        return self.apply_derivations(key, value)

    def __repr__(self) -> str:
        return f"CaseStudy(id={self.id}, slug={self.slug!r}, category={self.category!r})"
    def __str__(self) -> str:
        return self.title
