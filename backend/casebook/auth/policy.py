# backend/casebook/auth/policy.py
"""
권한 정책: (역할, 호출자 id, 리소스 소유자 id, 작업) -> Allow | Deny

부수효과 없는 순수 함수로 유지하고, HTTP 변환은 ensure_allowed 에서만 합니다.
"""
from enum import Enum as PyEnum
from typing import Optional

from ..exceptions import AuthorizationError
from ..users.models import UserRole


class Operation(str, PyEnum):
    CREATE_CONTENT = "create_content"
    UPDATE_CONTENT = "update_content"
    DELETE_CONTENT = "delete_content"
    CHANGE_ROLE = "change_role"
    DELETE_USER = "delete_user"


class Decision(str, PyEnum):
    ALLOW = "allow"
    DENY = "deny"


# 콘텐츠 생성은 author 역할 필요 (admin 은 상위 권한으로 허용)
CONTENT_CREATOR_ROLES = frozenset({UserRole.AUTHOR.value, UserRole.ADMIN.value})

_DENIAL_MESSAGES = {
    Operation.CREATE_CONTENT: "Author role required to create content",
    Operation.UPDATE_CONTENT: "Not authorized to update this content",
    Operation.DELETE_CONTENT: "Not authorized to delete this content",
    Operation.CHANGE_ROLE: "Admin role required and cannot change your own role",
    Operation.DELETE_USER: "Admin role required and cannot delete your own account",
}


def authorize(role: str, caller_id: int, owner_id: Optional[int], operation: Operation) -> Decision:
    role = getattr(role, "value", role)
    is_admin = role == UserRole.ADMIN.value

    if operation == Operation.CREATE_CONTENT:
        allowed = role in CONTENT_CREATOR_ROLES
    elif operation in (Operation.UPDATE_CONTENT, Operation.DELETE_CONTENT):
        allowed = is_admin or (owner_id is not None and caller_id == owner_id)
    elif operation in (Operation.CHANGE_ROLE, Operation.DELETE_USER):
        # owner_id 는 대상 사용자 id. 관리자도 자기 자신은 이 경로로 수정/삭제 불가
        allowed = is_admin and owner_id is not None and caller_id != owner_id
    else:
        allowed = False

    return Decision.ALLOW if allowed else Decision.DENY


def ensure_allowed(role: str, caller_id: int, owner_id: Optional[int], operation: Operation) -> None:
    if authorize(role, caller_id, owner_id, operation) is Decision.DENY:
        raise AuthorizationError("Access denied", error=_DENIAL_MESSAGES[operation])
