# backend/casebook/content/schemas.py
from datetime import datetime
from enum import Enum as PyEnum
from typing import List, Optional

from pydantic import Field, field_validator

from ..models import CustomModel
from .models import ContentStatus
from .rules import MAX_TAG_LENGTH, normalize_tags


class SortOrder(str, PyEnum):
    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"
    FEATURED = "featured"


def _validate_tags(v):
    if v is None:
        return v
    for tag in v:
        if len(tag.strip()) > MAX_TAG_LENGTH:
            raise ValueError(f"Tag cannot be more than {MAX_TAG_LENGTH} characters")
    return normalize_tags(v)


class ArticleCreateBase(CustomModel):
    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=10, max_length=500)
    content: str = Field(..., min_length=50)
    tags: List[str] = Field(default_factory=list)
    image: str = Field("", max_length=500)
    status: ContentStatus = ContentStatus.PUBLISHED
    featured: bool = False

    @field_validator("title", "description", "content", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def _tags(cls, v):
        return _validate_tags(v)


class ArticleUpdateBase(CustomModel):
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    description: Optional[str] = Field(None, min_length=10, max_length=500)
    content: Optional[str] = Field(None, min_length=50)
    tags: Optional[List[str]] = None
    image: Optional[str] = Field(None, max_length=500)
    status: Optional[ContentStatus] = None
    featured: Optional[bool] = None

    @field_validator("title", "description", "content", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def _tags(cls, v):
        return _validate_tags(v)


class ArticleOutBase(CustomModel):
    id: int
    title: str
    slug: str
    description: str
    content: str
    tags: List[str] = Field(default_factory=list)
    image: str = ""
    author_id: int
    author_name: str
    status: ContentStatus
    featured: bool
    views: int
    likes: int
    shares: int
    bookmarks: int
    read_time: int
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CounterResponse(CustomModel):
    id: int
    counter: str
    value: int
