from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from ..config import SettingsDep
from ..database import SessionDep
from ..exceptions import AuthenticationError, AuthorizationError

from ..users.models import User, UserRole
from ..auth import service as auth_service
from .policy import Operation, ensure_allowed

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

async def get_current_user_from_access_token(
    db: SessionDep,
    config: SettingsDep,
    token: Optional[str] = Depends(oauth2_scheme),
) -> User:
    if not token:
        raise AuthenticationError("Access denied. No token provided.")
    return await auth_service.verify_access_token(token, db, config)

CurrentUser = Depends(get_current_user_from_access_token)

async def get_optional_user(
    db: SessionDep,
    config: SettingsDep,
    token: Optional[str] = Depends(oauth2_scheme),
) -> Optional[User]:
    """공개 엔드포인트용: 유효한 토큰이면 사용자, 아니면 익명(None)"""
    if not token:
        return None
    try:
        return await auth_service.verify_access_token(token, db, config)
    except AuthenticationError:
        return None

OptionalUser = Depends(get_optional_user)

def require_admin(
    current_user: User = CurrentUser
) -> User:
    """
    현재 사용자가 'admin' 역할을 가지고 있는지 확인하는 의존성.
    관리자가 아닐 경우 403 을 발생시킵니다.
    """
    if current_user.role != UserRole.ADMIN.value:
        raise AuthorizationError("Access denied. Admin role required.")
    return current_user

def require_author(
    current_user: User = CurrentUser
) -> User:
    """콘텐츠 생성 권한(author/admin) 확인"""
    ensure_allowed(current_user.role, current_user.id, None, Operation.CREATE_CONTENT)
    return current_user
