from fastapi import APIRouter, status

from ..config import SettingsDep
from ..database import SessionDep
from ..models import MessageResponse
from ..users import service as user_service
from ..users.models import User
from ..users.schema import (
    AccessTokenResponse,
    AuthResponse,
    ForgotPasswordRequest,
    PasswordChange,
    ProfileUpdate,
    ResetPasswordRequest,
    TokenRefreshRequest,
    UserEnvelope,
    UserLogin,
    UserPublic,
    UserRegister,
)
from . import service as auth_service
from .dependencies import CurrentUser

router = APIRouter(prefix="/auth", tags=["auth"])


async def _issue_tokens(user: User, config, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=await auth_service.create_access_token(user, config),
        refresh_token=await auth_service.create_refresh_token(user, config),
        user=UserPublic.model_validate(user),
    )

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(body: UserRegister, db: SessionDep, config: SettingsDep):
    user = await auth_service.register_user(
        db, name=body.name, email=body.email, password=body.password, config=config
    )
    return await _issue_tokens(user, config, "User registered successfully")

@router.post("/login", response_model=AuthResponse)
async def login(body: UserLogin, db: SessionDep, config: SettingsDep):
    user = await auth_service.authenticate_user(db, body.email, body.password, config)
    return await _issue_tokens(user, config, "Login successful")

@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh_access_token(body: TokenRefreshRequest, db: SessionDep, config: SettingsDep):
    user = await auth_service.get_user_from_refresh_token(body.refresh_token, db, config)
    # 토큰 리프레시 시점에도 마지막 접속 시간 갱신
    await user_service.touch_last_active(user, db)
    return AccessTokenResponse(token=await auth_service.create_access_token(user, config))

@router.get("/me", response_model=UserEnvelope)
async def read_me(current_user: User = CurrentUser):
    return UserEnvelope(user=UserPublic.model_validate(current_user))

@router.put("/profile", response_model=UserEnvelope)
async def update_profile(body: ProfileUpdate, db: SessionDep, current_user: User = CurrentUser):
    user = await user_service.update_profile(db, current_user.id, body)
    return UserEnvelope(message="Profile updated successfully", user=UserPublic.model_validate(user))

@router.put("/password", response_model=MessageResponse)
async def change_password(body: PasswordChange, db: SessionDep, current_user: User = CurrentUser):
    await user_service.change_password(db, current_user, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")

@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(body: ForgotPasswordRequest, db: SessionDep, config: SettingsDep):
    message = await auth_service.request_password_reset(db, body.email, config)
    return MessageResponse(message=message)

@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(body: ResetPasswordRequest, db: SessionDep, config: SettingsDep):
    await auth_service.reset_password(db, body.token, body.new_password, config)
    return MessageResponse(message="Password reset successful")
