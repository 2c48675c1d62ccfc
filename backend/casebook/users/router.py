from fastapi import APIRouter, Depends, Query
from typing import Optional

from ..database import SessionDep
from ..models import MessageResponse
from ..users.models import User as UserModel, UserRole
from ..content.models import ContentStatus, InteractionKind
from ..content.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Paginated, paginated

from .schema import (
    AvatarUpdate,
    ContentScope,
    ProfileUpdate,
    RoleUpdate,
    UserContentPage,
    UserEnvelope,
    UserPublic,
    UserStatsResponse,
)
from . import service as user_service
from ..auth.dependencies import CurrentUser, require_admin
from ..auth.policy import Operation, ensure_allowed

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/profile", response_model=UserEnvelope)
async def read_profile(current_user: UserModel = CurrentUser):
    return UserEnvelope(user=UserPublic.model_validate(current_user))

@router.put("/profile", response_model=UserEnvelope)
async def update_profile(body: ProfileUpdate, db: SessionDep, current_user: UserModel = CurrentUser):
    user = await user_service.update_profile(db, current_user.id, body)
    return UserEnvelope(message="Profile updated successfully", user=UserPublic.model_validate(user))

@router.put("/avatar", response_model=UserEnvelope)
async def update_avatar(body: AvatarUpdate, db: SessionDep, current_user: UserModel = CurrentUser):
    user = await user_service.update_avatar(db, current_user, body.avatar)
    return UserEnvelope(message="Avatar updated successfully", user=UserPublic.model_validate(user))

@router.get("/stats", response_model=UserStatsResponse)
async def read_stats(db: SessionDep, current_user: UserModel = CurrentUser):
    return {"stats": await user_service.get_stats(db, current_user)}

@router.get("/content", response_model=UserContentPage)
async def read_my_content(
    db: SessionDep,
    current_user: UserModel = CurrentUser,
    type: ContentScope = ContentScope.ALL,
    status: Optional[ContentStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    """내가 작성한 콘텐츠 (draft / archived 포함)"""
    return await user_service.get_user_content(
        db, current_user.id, scope=type, status=status, page=page, limit=limit
    )

@router.get("/bookmarks", response_model=UserContentPage)
async def read_bookmarks(
    db: SessionDep,
    current_user: UserModel = CurrentUser,
    type: ContentScope = ContentScope.ALL,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    return await user_service.get_interactions(
        db, current_user.id, InteractionKind.BOOKMARK, scope=type, page=page, limit=limit
    )

@router.get("/reading-history", response_model=UserContentPage)
async def read_reading_history(
    db: SessionDep,
    current_user: UserModel = CurrentUser,
    type: ContentScope = ContentScope.ALL,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
):
    return await user_service.get_interactions(
        db, current_user.id, InteractionKind.VIEW, scope=type, page=page, limit=limit
    )

@router.delete("/account", response_model=MessageResponse)
async def delete_account(db: SessionDep, current_user: UserModel = CurrentUser):
    await user_service.delete_user_by_id(db, current_user.id)
    return MessageResponse(message="Account deleted successfully")


# --- 관리자 전용 ---

@router.get("/admin/all", response_model=Paginated[UserPublic], dependencies=[Depends(require_admin)])
async def list_users(
    db: SessionDep,
    role: Optional[UserRole] = None,
    search: Optional[str] = Query(None, min_length=2),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    users, total = await user_service.get_users(
        db, role=role.value if role else None, search=search, page=page, limit=limit
    )
    return paginated(users, total, page, limit)

@router.put("/admin/{user_id}/role", response_model=UserEnvelope)
async def change_user_role(
    user_id: int,
    body: RoleUpdate,
    db: SessionDep,
    current_user: UserModel = CurrentUser,
):
    ensure_allowed(current_user.role, current_user.id, user_id, Operation.CHANGE_ROLE)
    user = await user_service.set_role(db, user_id, body.role.value)
    return UserEnvelope(message="User role updated successfully", user=UserPublic.model_validate(user))

@router.delete("/admin/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, db: SessionDep, current_user: UserModel = CurrentUser):
    ensure_allowed(current_user.role, current_user.id, user_id, Operation.DELETE_USER)
    await user_service.delete_user_by_id(db, user_id)
    return MessageResponse(message="User deleted successfully")
