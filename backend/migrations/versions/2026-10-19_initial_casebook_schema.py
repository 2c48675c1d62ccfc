"""Initial casebook schema: users, blogs, case_studies, content_interactions

Revision ID: 3f1c9a7d2b60
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b60"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CONTENT_STATUS = ("draft", "published", "archived")


def _article_columns() -> list:
    """blogs / case_studies 공통 컬럼"""
    return [
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("image", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("author_name", sa.String(length=50), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(*CONTENT_STATUS, name="content_status", create_type=False),
            nullable=False,
            server_default="published",
        ),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shares", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bookmarks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("read_time", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["author_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    ]


def _article_indexes(table: str) -> None:
    op.create_index(op.f(f"ix_{table}_id"), table, ["id"], unique=False)
    op.create_index(op.f(f"ix_{table}_slug"), table, ["slug"], unique=True)
    op.create_index(op.f(f"ix_{table}_status"), table, ["status"], unique=False)
    op.create_index(op.f(f"ix_{table}_author_id"), table, ["author_id"], unique=False)


def upgrade() -> None:
    # blogs, case_studies 가 같은 enum 타입을 공유하므로 먼저 한 번만 생성
    postgresql.ENUM(*CONTENT_STATUS, name="content_status").create(op.get_bind(), checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("avatar", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("company", sa.String(length=100), nullable=True),
        sa.Column("position", sa.String(length=100), nullable=True),
        sa.Column("website", sa.String(length=500), nullable=True),
        sa.Column("social_links", sa.JSON(), nullable=False),
        sa.Column("preferences", sa.JSON(), nullable=False),
        sa.Column("articles_read", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("case_studies_read", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bookmarks", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("reset_password_token", sa.String(length=512), nullable=True),
        sa.Column("reset_password_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_name"), "users", ["name"], unique=False)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "blogs",
        *_article_columns(),
        sa.Column("category", sa.String(length=50), nullable=True),
    )
    _article_indexes("blogs")
    op.create_index(op.f("ix_blogs_category"), "blogs", ["category"], unique=False)
    op.create_index("ix_blogs_status_created", "blogs", ["status", "created_at"], unique=False)

    op.create_table(
        "case_studies",
        *_article_columns(),
        sa.Column("category", sa.String(length=50), nullable=False, server_default="web-apps"),
        sa.Column("industry", sa.String(length=100), nullable=True),
        sa.Column("difficulty", sa.String(length=20), nullable=True),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default="0"),
    )
    _article_indexes("case_studies")
    op.create_index(op.f("ix_case_studies_industry"), "case_studies", ["industry"], unique=False)
    op.create_index("ix_case_studies_category_status", "case_studies", ["category", "status"], unique=False)

    op.create_table(
        "content_interactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("content_type", sa.Enum("blog", "case_study", name="content_type"), nullable=False),
        sa.Column("content_id", sa.Integer(), nullable=False),
        sa.Column(
            "kind",
            sa.Enum("view", "like", "bookmark", "share", "download", name="interaction_kind"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_content_interactions_id"), "content_interactions", ["id"], unique=False)
    op.create_index(
        "ix_interactions_user_kind_created", "content_interactions", ["user_id", "kind", "created_at"], unique=False
    )
    op.create_index("ix_interactions_content", "content_interactions", ["content_type", "content_id"], unique=False)


def downgrade() -> None:
    op.drop_table("content_interactions")
    op.drop_table("case_studies")
    op.drop_table("blogs")
    op.drop_table("users")
    # enum 타입은 테이블 삭제 후 제거
    for enum_name in ("interaction_kind", "content_type", "content_status"):
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
