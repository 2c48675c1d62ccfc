import pytest

from casebook.auth.policy import Decision, Operation, authorize, ensure_allowed
from casebook.exceptions import AuthorizationError


@pytest.mark.parametrize(
    "role, expected",
    [("user", Decision.DENY), ("author", Decision.ALLOW), ("admin", Decision.ALLOW)],
)
def test_create_content_requires_author_or_admin(role, expected):
    assert authorize(role, 1, None, Operation.CREATE_CONTENT) is expected


@pytest.mark.parametrize("operation", [Operation.UPDATE_CONTENT, Operation.DELETE_CONTENT])
def test_owner_or_admin_can_modify_content(operation):
    assert authorize("author", 1, 1, operation) is Decision.ALLOW
    assert authorize("user", 1, 1, operation) is Decision.ALLOW
    assert authorize("author", 2, 1, operation) is Decision.DENY
    assert authorize("admin", 2, 1, operation) is Decision.ALLOW


@pytest.mark.parametrize("operation", [Operation.CHANGE_ROLE, Operation.DELETE_USER])
def test_admin_user_management_excludes_self(operation):
    assert authorize("admin", 1, 2, operation) is Decision.ALLOW
    assert authorize("admin", 1, 1, operation) is Decision.DENY
    assert authorize("author", 1, 2, operation) is Decision.DENY


def test_ensure_allowed_raises_403():
    with pytest.raises(AuthorizationError) as exc_info:
        ensure_allowed("user", 1, None, Operation.CREATE_CONTENT)
    assert exc_info.value.status_code == 403
    assert exc_info.value.error == "Author role required to create content"

    # 허용이면 아무 일도 없음
    ensure_allowed("admin", 1, 2, Operation.DELETE_USER)
