# backend/casebook/content/repository.py
"""
Blog / CaseStudy 공용 영속성 계층.

모델 클래스를 인자로 받아 두 콘텐츠 타입을 같은 코드로 다룹니다.
권한 검사는 라우터에서 auth.policy 로 수행한 뒤 이 계층을 호출합니다.
"""
import json
import logging
from typing import Any, Optional, Sequence, Type

from sqlalchemy import String, and_, cast, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..users.models import User
from .models import ContentInteraction, ContentStatus, ContentType, InteractionKind
from .pagination import offset_for
from .schemas import SortOrder

logger = logging.getLogger(__name__)

COUNTERS = {"views", "likes", "shares", "bookmarks", "downloads"}


def _label(model) -> str:
    return "Case study" if model.__tablename__ == "case_studies" else "Blog post"


def content_type_of(model) -> ContentType:
    return ContentType.CASE_STUDY if model.__tablename__ == "case_studies" else ContentType.BLOG


def escape_like(term: str) -> str:
    """LIKE 와일드카드(%, _)와 escape 문자를 리터럴로 취급하도록 이스케이프"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(term: str) -> str:
    return f"%{escape_like(term)}%"


def _search_condition(model, q: str):
    like = contains(q.strip())
    return or_(
        model.title.ilike(like, escape="\\"),
        model.description.ilike(like, escape="\\"),
        model.content.ilike(like, escape="\\"),
        cast(model.tags, String).ilike(like, escape="\\"),
    )


def _tag_condition(model, tag: str):
    # JSON 배열 직렬화 문자열에서 "tag" 토큰을 찾습니다 (대소문자 무시)
    return cast(model.tags, String).ilike(contains(json.dumps(tag.strip())), escape="\\")


def _order_by(model, sort: SortOrder):
    if sort == SortOrder.OLDEST:
        return [model.created_at.asc(), model.id.asc()]
    if sort == SortOrder.POPULAR:
        return [model.views.desc(), model.id.desc()]
    if sort == SortOrder.FEATURED:
        return [model.featured.desc(), model.created_at.desc(), model.id.desc()]
    return [model.created_at.desc(), model.id.desc()]


async def get_by_id(db: AsyncSession, model, content_id: int):
    result = await db.execute(select(model).where(model.id == content_id))
    obj = result.scalar_one_or_none()
    if obj is None:
        raise NotFoundError(f"{_label(model)} not found")
    return obj


async def find_by_slug(
    db: AsyncSession, model, slug: str, *, status: Optional[ContentStatus] = ContentStatus.PUBLISHED
):
    stmt = select(model).where(model.slug == slug)
    if status is not None:
        stmt = stmt.where(model.status == status)
    result = await db.execute(stmt)
    obj = result.scalar_one_or_none()
    if obj is None:
        raise NotFoundError(f"{_label(model)} not found")
    return obj


async def list_content(
    db: AsyncSession,
    model,
    *,
    status: Optional[ContentStatus] = ContentStatus.PUBLISHED,
    filters: Optional[dict[str, Any]] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    sort: SortOrder = SortOrder.NEWEST,
    page: int = 1,
    limit: int = 10,
) -> tuple[Sequence[Any], int]:
    """(현재 페이지 항목, 전체 개수) 를 돌려줍니다."""
    conditions = []
    if status is not None:
        conditions.append(model.status == status)
    for field, value in (filters or {}).items():
        if value is not None:
            conditions.append(getattr(model, field) == value)
    if tag:
        conditions.append(_tag_condition(model, tag))
    if search and search.strip():
        conditions.append(_search_condition(model, search))

    where = and_(*conditions) if conditions else True
    total = (await db.execute(select(func.count()).select_from(model).where(where))).scalar_one()
    stmt = (
        select(model)
        .where(where)
        .order_by(*_order_by(model, sort))
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    result = await db.execute(stmt)
    return result.scalars().all(), total


async def _commit_or_conflict(db: AsyncSession, model, obj) -> None:
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(f"Slug conflict on {model.__tablename__}: {obj.slug!r}")
        raise ConflictError(
            f"A {_label(model).lower()} with this title already exists",
            error="Duplicate slug",
        )
    await db.refresh(obj)


async def create(db: AsyncSession, model, data: dict[str, Any], author: User):
    obj = model(**data, author_id=author.id, author_name=author.name)
    if not obj.slug:
        raise ValidationError(
            "Validation failed",
            errors=[{"field": "title", "message": "Title must contain at least one letter or digit"}],
        )
    db.add(obj)
    await _commit_or_conflict(db, model, obj)
    logger.info(f"Created {model.__tablename__} id={obj.id} slug={obj.slug!r} by user_id={author.id}")
    return obj


async def update_content(db: AsyncSession, model, obj, patch: dict[str, Any]):
    for field, value in patch.items():
        setattr(obj, field, value)
    if not obj.slug:
        raise ValidationError(
            "Validation failed",
            errors=[{"field": "title", "message": "Title must contain at least one letter or digit"}],
        )
    await _commit_or_conflict(db, model, obj)
    return obj


async def delete_content(db: AsyncSession, model, obj) -> None:
    # 참여 기록도 같은 트랜잭션에서 정리
    await db.execute(
        delete(ContentInteraction).where(
            ContentInteraction.content_type == content_type_of(model),
            ContentInteraction.content_id == obj.id,
        )
    )
    await db.delete(obj)
    await db.commit()
    logger.info(f"Deleted {model.__tablename__} id={obj.id}")


async def increment_counter(db: AsyncSession, model, content_id: int, counter: str) -> int:
    """단일 UPDATE ... SET n = n + 1 로 원자적으로 증가시키고 새 값을 돌려줍니다."""
    if counter not in COUNTERS or not hasattr(model, counter):
        raise ValueError(f"Unknown counter: {counter}")
    column = getattr(model, counter)
    result = await db.execute(
        update(model)
        .where(model.id == content_id)
        .values({counter: column + 1})
        .returning(column)
    )
    value = result.scalar_one_or_none()
    if value is None:
        await db.rollback()
        raise NotFoundError(f"{_label(model)} not found")
    await db.commit()
    return value


async def record_interaction(
    db: AsyncSession, user: Optional[User], model, content_id: int, kind: InteractionKind
) -> None:
    if user is None:
        return
    db.add(ContentInteraction(
        user_id=user.id,
        content_type=content_type_of(model),
        content_id=content_id,
        kind=kind,
    ))
    await db.commit()


async def list_by_author(
    db: AsyncSession,
    model,
    author_id: int,
    *,
    status: Optional[ContentStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[Sequence[Any], int]:
    conditions = [model.author_id == author_id]
    if status is not None:
        conditions.append(model.status == status)
    total = (await db.execute(select(func.count()).select_from(model).where(*conditions))).scalar_one()
    result = await db.execute(
        select(model)
        .where(*conditions)
        .order_by(model.updated_at.desc(), model.id.desc())
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    return result.scalars().all(), total


async def count_by_author(db: AsyncSession, model, author_id: int) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(model.author_id == author_id))
    return result.scalar_one()


async def engagement_totals(db: AsyncSession, model, author_id: int) -> dict[str, int]:
    row = (await db.execute(
        select(
            func.coalesce(func.sum(model.views), 0),
            func.coalesce(func.sum(model.likes), 0),
            func.coalesce(func.sum(model.bookmarks), 0),
        ).where(model.author_id == author_id)
    )).one()
    return {"views": row[0], "likes": row[1], "bookmarks": row[2]}


async def list_interacted(
    db: AsyncSession,
    model,
    user_id: int,
    kind: InteractionKind,
    *,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[tuple[Any, int]], int]:
    """
    사용자가 kind 로 상호작용한 콘텐츠를 최근 순으로 (콘텐츠 단위로 중복 제거) 조회.
    (콘텐츠, 마지막 상호작용 id) 쌍을 돌려주며, id 는 타입을 합쳐 정렬할 때 사용합니다.
    """
    latest = (
        select(
            ContentInteraction.content_id.label("content_id"),
            func.max(ContentInteraction.id).label("last_id"),
        )
        .where(
            ContentInteraction.user_id == user_id,
            ContentInteraction.kind == kind,
            ContentInteraction.content_type == content_type_of(model),
        )
        .group_by(ContentInteraction.content_id)
        .subquery()
    )
    # 삭제된 콘텐츠는 조인에서 제외됩니다
    base = select(model, latest.c.last_id).join(latest, latest.c.content_id == model.id)
    total = (await db.execute(select(func.count()).select_from(base.subquery()))).scalar_one()
    result = await db.execute(
        base.order_by(latest.c.last_id.desc()).offset(offset_for(page, limit)).limit(limit)
    )
    return [(obj, last_id) for obj, last_id in result.all()], total


async def delete_by_author(db: AsyncSession, author_id: int, models: Sequence[Type]) -> None:
    # commit 은 호출자가 수행
    for model in models:
        authored_ids = select(model.id).where(model.author_id == author_id)
        await db.execute(
            delete(ContentInteraction).where(
                ContentInteraction.content_type == content_type_of(model),
                ContentInteraction.content_id.in_(authored_ids),
            ).execution_options(synchronize_session=False)
        )
        await db.execute(delete(model).where(model.author_id == author_id))
