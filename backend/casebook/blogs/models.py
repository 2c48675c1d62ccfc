# backend/casebook/blogs/models.py
from sqlalchemy import Column, String, Index
from sqlalchemy.orm import validates
from ..database import Base
from ..content.models import ArticleMixin

class Blog(ArticleMixin, Base):
    __tablename__ = "blogs"
    __table_args__ = (
        Index("ix_blogs_status_created", "status", "created_at"),
    )

    category = Column(String(50), index=True)

    @validates("title", "content", "status")
    def _derive(self, key, value):
        return self.apply_derivations(key, value)

    def __repr__(self) -> str:
        return f"Blog(id={self.id}, slug={self.slug!r}, status={self.status!r})"
    def __str__(self) -> str:
        return self.title
