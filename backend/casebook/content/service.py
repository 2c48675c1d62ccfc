# backend/casebook/content/service.py
import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.policy import Operation, ensure_allowed
from ..users.models import User
from . import repository
from .models import InteractionKind
from .schemas import ArticleCreateBase, ArticleUpdateBase

logger = logging.getLogger(__name__)

# 콘텐츠 타입별로 증가시킬 사용자 읽기 통계 컬럼
_READ_STAT = {"blogs": "articles_read", "case_studies": "case_studies_read"}


async def _bump_user_stat(db: AsyncSession, user_id: int, column: str) -> None:
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values({column: getattr(User, column) + 1})
    )
    await db.commit()


async def create_content(db: AsyncSession, model, body: ArticleCreateBase, author: User):
    data = body.model_dump(mode="json")
    return await repository.create(db, model, data, author)


async def update_content(db: AsyncSession, model, content_id: int, body: ArticleUpdateBase, user: User):
    obj = await repository.get_by_id(db, model, content_id)
    ensure_allowed(user.role, user.id, obj.author_id, Operation.UPDATE_CONTENT)
    patch = body.model_dump(mode="json", exclude_unset=True)
    # NOT NULL 컬럼에 null 이 들어오지 않도록 제거
    columns = model.__table__.c
    patch = {field: value for field, value in patch.items() if value is not None or columns[field].nullable}
    return await repository.update_content(db, model, obj, patch)


async def delete_content(db: AsyncSession, model, content_id: int, user: User) -> None:
    obj = await repository.get_by_id(db, model, content_id)
    ensure_allowed(user.role, user.id, obj.author_id, Operation.DELETE_CONTENT)
    await repository.delete_content(db, model, obj)


async def read_published(db: AsyncSession, model, slug: str, reader: Optional[User]):
    """공개 상세 조회: 조회수 증가, 로그인 사용자는 읽은 기록/통계 반영"""
    obj = await repository.find_by_slug(db, model, slug)
    await repository.increment_counter(db, model, obj.id, "views")
    if reader is not None:
        await repository.record_interaction(db, reader, model, obj.id, InteractionKind.VIEW)
        await _bump_user_stat(db, reader.id, _READ_STAT[model.__tablename__])
    await db.refresh(obj)
    return obj


async def engage(
    db: AsyncSession, model, content_id: int, counter: str, kind: InteractionKind, user: Optional[User]
) -> int:
    value = await repository.increment_counter(db, model, content_id, counter)
    await repository.record_interaction(db, user, model, content_id, kind)
    if user is not None and kind == InteractionKind.BOOKMARK:
        await _bump_user_stat(db, user.id, "bookmarks")
    logger.debug(f"{model.__tablename__} id={content_id} {counter} -> {value}")
    return value
