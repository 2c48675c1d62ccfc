# backend/casebook/blogs/schemas.py
from typing import Optional

from pydantic import Field

from ..models import CustomModel
from ..content.schemas import ArticleCreateBase, ArticleOutBase, ArticleUpdateBase


class BlogCreate(ArticleCreateBase):
    category: Optional[str] = Field(None, max_length=50)


class BlogUpdate(ArticleUpdateBase):
    category: Optional[str] = Field(None, max_length=50)


class BlogOut(ArticleOutBase):
    category: Optional[str] = None


class BlogEnvelope(CustomModel):
    message: str
    blog: BlogOut
