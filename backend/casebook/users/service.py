import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, delete
from sqlalchemy.exc import IntegrityError
from typing import Awaitable, Callable, List, Optional, Tuple

from passlib.context import CryptContext

from ..config import settings
from ..exceptions import ConflictError, NotFoundError, ValidationError
from ..blogs.models import Blog
from ..case_studies.models import CaseStudy
from ..content import repository as content_repo
from ..content.models import ContentInteraction, ContentStatus, InteractionKind
from ..content.pagination import offset_for, page_meta
from .models import User as UserModel, UserRole
from .schema import ContentScope, ProfileUpdate

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)

async def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def normalize_email(email: str) -> str:
    return email.strip().lower()


async def create_user(
    db: AsyncSession, *, name: str, email: str, password: str, role: str = UserRole.USER.value
) -> UserModel:
    email = normalize_email(email)
    existing_user = await get_user_by_email(email, db)
    if existing_user:
        raise ConflictError("User already exists with this email")

    db_user = UserModel(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=role,
        social_links={},
        preferences={"categories": [], "newsletter": True},
        last_active=datetime.now(timezone.utc),
    )
    db.add(db_user)
    try:
        await db.commit()
    except IntegrityError:
        # 동시 가입으로 사전 검사를 통과한 경우 unique 인덱스에서 걸림
        await db.rollback()
        raise ConflictError("User already exists with this email")
    await db.refresh(db_user)
    logger.info(f"Created user id={db_user.id} email={db_user.email} role={db_user.role}")
    return db_user


async def get_user_by_id(user_id: int, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[UserModel]:
    result = await db.execute(select(UserModel).where(UserModel.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def touch_last_active(user: UserModel, db: AsyncSession) -> None:
    user.last_active = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(user)


async def update_profile(db: AsyncSession, user_id: int, patch: ProfileUpdate) -> UserModel:
    """허용 목록 필드만 수정합니다. 명시적으로 전달된 필드만 반영."""
    update_data = patch.model_dump(exclude_unset=True)
    # name 은 비울 수 없음
    if update_data.get("name", "") is None:
        update_data.pop("name")
    if not update_data:
        raise ValidationError("No valid fields to update", error="All provided fields were filtered out")

    db_user = await get_user_by_id(user_id, db)
    if db_user is None:
        raise NotFoundError("User not found")

    # 중첩 객체는 기존 값과 병합
    if "social_links" in update_data:
        update_data["social_links"] = {**(db_user.social_links or {}), **(update_data["social_links"] or {})}
    if "preferences" in update_data:
        update_data["preferences"] = {**(db_user.preferences or {}), **(update_data["preferences"] or {})}

    for field, value in update_data.items():
        setattr(db_user, field, value)

    await db.commit()
    await db.refresh(db_user)
    logger.info(f"Updated profile user_id={user_id} fields={sorted(update_data)}")
    return db_user


async def update_avatar(db: AsyncSession, user: UserModel, avatar: str) -> UserModel:
    user.avatar = avatar
    await db.commit()
    await db.refresh(user)
    return user


async def change_password(db: AsyncSession, user: UserModel, current_password: str, new_password: str) -> None:
    if not await verify_password(current_password, user.hashed_password):
        raise ValidationError("Current password is incorrect")
    user.hashed_password = hash_password(new_password)
    await db.commit()


async def set_role(db: AsyncSession, user_id: int, role: str) -> UserModel:
    db_user = await get_user_by_id(user_id, db)
    if db_user is None:
        raise NotFoundError("User not found")
    db_user.role = role
    await db.commit()
    await db.refresh(db_user)
    logger.info(f"Role of user_id={user_id} set to {role}")
    return db_user


async def get_users(
    db: AsyncSession,
    *,
    role: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[UserModel], int]:
    """관리자용 사용자 목록 (역할 필터, 이름/이메일/회사 검색)"""
    conditions = []
    if role:
        conditions.append(UserModel.role == role)
    if search:
        like = content_repo.contains(search.strip())
        conditions.append(or_(
            UserModel.name.ilike(like, escape="\\"),
            UserModel.email.ilike(like, escape="\\"),
            UserModel.company.ilike(like, escape="\\"),
        ))
    total = (await db.execute(select(func.count()).select_from(UserModel).where(*conditions))).scalar_one()
    result = await db.execute(
        select(UserModel)
        .where(*conditions)
        .order_by(UserModel.created_at.desc(), UserModel.id.desc())
        .offset(offset_for(page, limit))
        .limit(limit)
    )
    return result.scalars().all(), total


async def delete_user_by_id(db: AsyncSession, user_id: int) -> None:
    """사용자와 그 사용자가 작성한 콘텐츠, 참여 기록을 함께 삭제합니다."""
    user_to_delete = await get_user_by_id(user_id, db)
    if not user_to_delete:
        raise NotFoundError("User not found")
    await content_repo.delete_by_author(db, user_id, [Blog, CaseStudy])
    await db.execute(delete(ContentInteraction).where(ContentInteraction.user_id == user_id))
    await db.delete(user_to_delete)
    await db.commit()
    logger.info(f"Deleted user_id={user_id} with authored content")


async def get_stats(db: AsyncSession, user: UserModel) -> dict:
    blog_count = await content_repo.count_by_author(db, Blog, user.id)
    case_study_count = await content_repo.count_by_author(db, CaseStudy, user.id)
    blogs = await content_repo.engagement_totals(db, Blog, user.id)
    case_studies = await content_repo.engagement_totals(db, CaseStudy, user.id)
    return {
        "content": {
            "blogs": blog_count,
            "case_studies": case_study_count,
            "total": blog_count + case_study_count,
        },
        "reading": {
            "articles_read": user.articles_read,
            "case_studies_read": user.case_studies_read,
            "bookmarks": user.bookmarks,
            "last_active": user.last_active,
        },
        "engagement": {
            "total_views": blogs["views"] + case_studies["views"],
            "total_likes": blogs["likes"] + case_studies["likes"],
            "total_bookmarks": blogs["bookmarks"] + case_studies["bookmarks"],
        },
    }


# 목록 타입별 조회 대상 모델
_SCOPE_MODELS = {
    ContentScope.BLOGS: (Blog,),
    ContentScope.CASE_STUDIES: (CaseStudy,),
    ContentScope.ALL: (Blog, CaseStudy),
}

KeyedPage = Tuple[List[Tuple[tuple, object]], int]


async def _collect(
    scope: ContentScope, page: int, limit: int, fetch: Callable[[type, int, int], Awaitable[KeyedPage]]
) -> dict:
    """
    fetch(model, page, limit) 는 ([(정렬 키, 항목)], 전체 개수) 를 돌려줍니다.

    타입이 하나면 DB 에서 바로 페이지네이션합니다.
    all 이면 타입별로 앞쪽 page*limit 개를 가져와 정렬 키 내림차순으로 합친 뒤
    현재 페이지만 잘라내므로, 한 페이지에는 최대 limit 개가 담깁니다.
    """
    models = _SCOPE_MODELS[scope]
    if len(models) == 1:
        keyed, total_items = await fetch(models[0], page, limit)
    else:
        merged = []
        total_items = 0
        for model in models:
            rows, total = await fetch(model, 1, page * limit)
            merged.extend(rows)
            total_items += total
        merged.sort(key=lambda row: row[0], reverse=True)
        start = offset_for(page, limit)
        keyed = merged[start:start + limit]

    collected = {"blogs": [], "case_studies": []}
    for _, item in keyed:
        collected["blogs" if isinstance(item, Blog) else "case_studies"].append(item)
    return {**collected, **page_meta(total_items, page, limit).model_dump()}


async def get_user_content(
    db: AsyncSession,
    user_id: int,
    *,
    scope: ContentScope = ContentScope.ALL,
    status: Optional[ContentStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> dict:
    """작성한 콘텐츠, 최근 수정 순"""
    async def fetch(model, page, limit):
        items, total = await content_repo.list_by_author(db, model, user_id, status=status, page=page, limit=limit)
        # updated_at 이 같으면 타입, id 순
        return [((obj.updated_at, model.__tablename__, obj.id), obj) for obj in items], total

    return await _collect(scope, page, limit, fetch)


async def get_interactions(
    db: AsyncSession,
    user_id: int,
    kind: InteractionKind,
    *,
    scope: ContentScope = ContentScope.ALL,
    page: int = 1,
    limit: int = 10,
) -> dict:
    """북마크(kind=bookmark) 또는 읽은 기록(kind=view) 목록, 최근 상호작용 순"""
    async def fetch(model, page, limit):
        rows, total = await content_repo.list_interacted(db, model, user_id, kind, page=page, limit=limit)
        return [((last_id,), obj) for obj, last_id in rows], total

    return await _collect(scope, page, limit, fetch)
