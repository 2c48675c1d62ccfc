import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict

from sqlalchemy.ext.asyncio import AsyncSession
from jose import jwt, JWTError

from ..config import Config
from ..exceptions import AuthenticationError
from ..users import service as user_service
from ..users.models import User, UserRole

logger = logging.getLogger(__name__)

RESET_MESSAGE = "If an account with that email exists, a password reset link has been sent"


def _as_utc(value: datetime) -> datetime:
    # SQLite 는 tz 정보 없이 돌려줌
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _encode(payload: Dict, config: Config, expires_in: timedelta) -> str:
    to_encode = {**payload, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(to_encode, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


async def create_access_token(user: User, config: Config) -> str:
    """
    사용자 객체를 기반으로 Access Token을 생성합니다.
    토큰에 역할(role)과 타입(type) 정보를 추가합니다.
    """
    return _encode(
        {"sub": str(user.id), "role": user.role, "type": "access"},
        config,
        timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
    )

async def create_refresh_token(user: User, config: Config) -> str:
    return _encode(
        {"sub": str(user.id), "type": "refresh"},
        config,
        timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS),
    )

async def create_reset_token(user: User, config: Config) -> str:
    return _encode(
        {"sub": str(user.id), "type": "reset"},
        config,
        timedelta(minutes=config.RESET_TOKEN_EXPIRE_MINUTES),
    )

async def _decode_token(token: str, config: Config) -> Optional[Dict]:
    """
    토큰을 디코딩하고 서명/만료를 검사하는 내부 헬퍼 함수.
    실패 시 None 반환.
    """
    try:
        return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None


async def _resolve_user(token: str, expected_type: str, db: AsyncSession, config: Config) -> User:
    payload = await _decode_token(token, config)
    if payload is None:
        raise AuthenticationError("Invalid token.", error="JWT verification failed")
    if payload.get("type") != expected_type:
        raise AuthenticationError("Invalid token.", error="Invalid token type")

    sub = payload.get("sub")
    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token.", error="Token does not contain user ID")

    user = await user_service.get_user_by_id(user_id, db)
    if user is None:
        raise AuthenticationError("Invalid token.", error="User not found in database")
    return user


async def verify_access_token(token: str, db: AsyncSession, config: Config) -> User:
    """Access Token을 검증하고 해당 사용자를 반환합니다."""
    return await _resolve_user(token, "access", db, config)


async def get_user_from_refresh_token(token: str, db: AsyncSession, config: Config) -> User:
    """Refresh Token을 검증하고 해당 사용자를 반환합니다. (/auth/refresh 전용)"""
    return await _resolve_user(token, "refresh", db, config)


def _role_for(email: str, current: str, config: Config) -> str:
    # 허용 목록의 이메일은 author 로 (admin 은 강등하지 않음)
    if email in config.AUTHOR_EMAILS and current == UserRole.USER.value:
        return UserRole.AUTHOR.value
    return current


async def register_user(db: AsyncSession, *, name: str, email: str, password: str, config: Config) -> User:
    email = user_service.normalize_email(email)
    role = _role_for(email, UserRole.USER.value, config)
    if role != UserRole.USER.value:
        logger.info(f"Assigning {role} role to allow-listed email {email}")
    return await user_service.create_user(db, name=name, email=email, password=password, role=role)


async def authenticate_user(db: AsyncSession, email: str, password: str, config: Config) -> User:
    """
    이메일과 비밀번호로 인증합니다.
    계정 존재 여부를 노출하지 않도록 두 실패 경우 모두 같은 에러를 냅니다.
    """
    user = await user_service.get_user_by_email(email, db)
    if not user or not await user_service.verify_password(password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")

    promoted = _role_for(user.email, user.role, config)
    if promoted != user.role:
        logger.info(f"Updated user role to {promoted} for {user.email}")
        user.role = promoted

    await user_service.touch_last_active(user, db)
    return user


async def request_password_reset(db: AsyncSession, email: str, config: Config) -> str:
    user = await user_service.get_user_by_email(email, db)
    if user is None:
        return RESET_MESSAGE

    token = await create_reset_token(user, config)
    user.reset_password_token = token
    user.reset_password_expires = datetime.now(timezone.utc) + timedelta(minutes=config.RESET_TOKEN_EXPIRE_MINUTES)
    await db.commit()
    # 메일 발송은 외부 연동. 토큰 값은 DEBUG 로그에만 남김
    logger.info(f"Password reset token issued for user_id={user.id}")
    logger.debug(f"Reset token for user_id={user.id}: {token}")
    return RESET_MESSAGE


async def reset_password(db: AsyncSession, token: str, new_password: str, config: Config) -> None:
    payload = await _decode_token(token, config)
    if payload is None or payload.get("type") != "reset":
        raise AuthenticationError("Invalid or expired reset token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid or expired reset token")

    user = await user_service.get_user_by_id(user_id, db)
    if (
        user is None
        or user.reset_password_token != token
        or user.reset_password_expires is None
        or _as_utc(user.reset_password_expires) <= datetime.now(timezone.utc)
    ):
        raise AuthenticationError("Invalid or expired reset token")

    user.hashed_password = user_service.hash_password(new_password)
    user.reset_password_token = None
    user.reset_password_expires = None
    await db.commit()
    logger.info(f"Password reset completed for user_id={user.id}")
