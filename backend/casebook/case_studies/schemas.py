# backend/casebook/case_studies/schemas.py
from typing import Optional

from pydantic import Field

from ..models import CustomModel
from ..content.schemas import ArticleCreateBase, ArticleOutBase, ArticleUpdateBase
from .models import CaseStudyCategory, Difficulty


class CaseStudyCreate(ArticleCreateBase):
    category: CaseStudyCategory = CaseStudyCategory.WEB_APPS
    industry: Optional[str] = Field(None, max_length=100)
    difficulty: Optional[Difficulty] = None


class CaseStudyUpdate(ArticleUpdateBase):
    category: Optional[CaseStudyCategory] = None
    industry: Optional[str] = Field(None, max_length=100)
    difficulty: Optional[Difficulty] = None


class CaseStudyOut(ArticleOutBase):
    category: str
    industry: Optional[str] = None
    difficulty: Optional[str] = None
    downloads: int


class CaseStudyEnvelope(CustomModel):
    message: str
    case_study: CaseStudyOut
