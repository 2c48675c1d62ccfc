import re
from pydantic import EmailStr, Field, field_validator, model_validator
from typing import Literal, Optional, List
from datetime import datetime
from enum import Enum as PyEnum

from ..models import CustomModel
from ..blogs.schemas import BlogOut
from ..case_studies.schemas import CaseStudyOut
from .models import UserRole

URL_PATTERN = re.compile(r"^https?://\S+$")

PREFERENCE_CATEGORIES = Literal[
    "Technology", "Marketing", "Business", "Design", "Startups", "Finance", "Healthcare", "Education"
]


def _check_url(value: Optional[str], label: str = "URL") -> Optional[str]:
    if value is None or value == "":
        return value
    value = value.strip()
    if not URL_PATTERN.match(value):
        raise ValueError(f"{label} must be a valid URL")
    return value


class UserRegister(CustomModel):
    name: str = Field(..., min_length=2, max_length=50, json_schema_extra={"example": "Jane Doe"})
    email: EmailStr = Field(..., json_schema_extra={"example": "jane@example.com"})
    password: str = Field(..., min_length=6, json_schema_extra={"example": "secret1"})
    confirm_password: str

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Password confirmation does not match password")
        return self


class UserLogin(CustomModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenRefreshRequest(CustomModel):
    refresh_token: str


class PasswordChange(CustomModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Password confirmation does not match new password")
        return self


class ForgotPasswordRequest(CustomModel):
    email: EmailStr


class ResetPasswordRequest(CustomModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def _passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Password confirmation does not match new password")
        return self


class SocialLinks(CustomModel):
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    github: Optional[str] = None

    @field_validator("linkedin", "twitter", "github")
    @classmethod
    def _validate_links(cls, v, info):
        return _check_url(v, label=info.field_name.capitalize())


class Preferences(CustomModel):
    categories: List[PREFERENCE_CATEGORIES] = Field(default_factory=list)
    newsletter: bool = True


class ProfileUpdate(CustomModel):
    """수정 가능한 프로필 필드 목록 (그 외 필드는 거부)"""
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    company: Optional[str] = Field(None, max_length=100)
    position: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = None
    social_links: Optional[SocialLinks] = None
    preferences: Optional[Preferences] = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("website")
    @classmethod
    def _validate_website(cls, v):
        return _check_url(v, label="Website")


class AvatarUpdate(CustomModel):
    avatar: str

    @field_validator("avatar")
    @classmethod
    def _validate_avatar(cls, v):
        v = _check_url(v, label="Avatar")
        if not v:
            raise ValueError("Avatar must be a valid URL")
        return v


class RoleUpdate(CustomModel):
    role: UserRole


class UserPublic(CustomModel):
    id: int
    name: str
    email: str
    role: UserRole
    avatar: str = ""
    bio: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    website: Optional[str] = None
    social_links: dict = Field(default_factory=dict)
    preferences: dict = Field(default_factory=dict)
    articles_read: int = 0
    case_studies_read: int = 0
    bookmarks: int = 0
    last_active: Optional[datetime] = None
    is_verified: bool = False
    created_at: datetime
    updated_at: datetime


class AuthResponse(CustomModel):
    message: str
    token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserPublic


class AccessTokenResponse(CustomModel):
    token: str
    token_type: str = "bearer"


class UserEnvelope(CustomModel):
    message: Optional[str] = None
    user: UserPublic


class ContentCounts(CustomModel):
    blogs: int
    case_studies: int
    total: int


class ReadingStats(CustomModel):
    articles_read: int
    case_studies_read: int
    bookmarks: int
    last_active: Optional[datetime] = None


class EngagementStats(CustomModel):
    total_views: int
    total_likes: int
    total_bookmarks: int


class UserStats(CustomModel):
    content: ContentCounts
    reading: ReadingStats
    engagement: EngagementStats


class UserStatsResponse(CustomModel):
    stats: UserStats


class ContentScope(str, PyEnum):
    BLOGS = "blogs"
    CASE_STUDIES = "case-studies"
    ALL = "all"


class UserContentPage(CustomModel):
    """blogs / case studies 를 타입별로 따로 페이지네이션한 결과를 합친 응답"""
    blogs: List[BlogOut] = Field(default_factory=list)
    case_studies: List[CaseStudyOut] = Field(default_factory=list)
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool
