import logging

from sqlalchemy import select

from casebook.users.models import User
from conftest import PASSWORD, auth_header


async def test_register_returns_tokens_and_public_profile(register):
    body = await register(name="  Jane Doe  ", email="Jane@Example.com")
    assert body["message"] == "User registered successfully"
    assert body["token"] and body["refreshToken"]
    user = body["user"]
    assert user["name"] == "Jane Doe"
    assert user["email"] == "jane@example.com"
    assert user["role"] == "user"
    assert "hashedPassword" not in user
    assert "resetPasswordToken" not in user


async def test_allow_listed_email_registers_as_author(register):
    body = await register(name="Alice Author", email="author@example.com")
    assert body["user"]["role"] == "author"


async def test_register_duplicate_email_is_conflict(client, register):
    await register()
    response = await client.post(
        "/api/auth/register",
        json={"name": "Other", "email": "JANE@example.com", "password": PASSWORD, "confirmPassword": PASSWORD},
    )
    assert response.status_code == 409
    assert response.json()["message"] == "User already exists with this email"


async def test_register_validation_errors(client):
    response = await client.post(
        "/api/auth/register",
        json={"name": "J", "email": "not-an-email", "password": "123", "confirmPassword": "456"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    fields = {error["field"] for error in body["errors"]}
    assert {"name", "email", "password"} <= fields


async def test_register_password_mismatch(client):
    response = await client.post(
        "/api/auth/register",
        json={"name": "Jane", "email": "jane@example.com", "password": PASSWORD, "confirmPassword": "different"},
    )
    assert response.status_code == 400


async def test_login_success_and_failures(client, register):
    await register()
    ok = await client.post("/api/auth/login", json={"email": "jane@example.com", "password": PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["message"] == "Login successful"

    wrong = await client.post("/api/auth/login", json={"email": "jane@example.com", "password": "nope123"})
    unknown = await client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
    for response in (wrong, unknown):
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"


async def test_me_requires_valid_token(client, user_token):
    missing = await client.get("/api/auth/me")
    assert missing.status_code == 401
    assert missing.json()["message"] == "Access denied. No token provided."

    bogus = await client.get("/api/auth/me", headers=auth_header("not-a-jwt"))
    assert bogus.status_code == 401
    assert bogus.json()["message"] == "Invalid token."

    me = await client.get("/api/auth/me", headers=auth_header(user_token))
    assert me.status_code == 200
    assert me.json()["user"]["email"] == "jane@example.com"


async def test_refresh_token_issues_new_access_token(client, register):
    body = await register()
    response = await client.post("/api/auth/refresh", json={"refreshToken": body["refreshToken"]})
    assert response.status_code == 200
    new_token = response.json()["token"]
    me = await client.get("/api/auth/me", headers=auth_header(new_token))
    assert me.status_code == 200

    # access token 은 refresh 용도로 쓸 수 없음
    rejected = await client.post("/api/auth/refresh", json={"refreshToken": body["token"]})
    assert rejected.status_code == 401


async def test_change_password(client, user_token):
    wrong = await client.put(
        "/api/auth/password",
        json={"currentPassword": "wrong-one", "newPassword": "newpass1", "confirmPassword": "newpass1"},
        headers=auth_header(user_token),
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    ok = await client.put(
        "/api/auth/password",
        json={"currentPassword": PASSWORD, "newPassword": "newpass1", "confirmPassword": "newpass1"},
        headers=auth_header(user_token),
    )
    assert ok.status_code == 200
    login = await client.post("/api/auth/login", json={"email": "jane@example.com", "password": "newpass1"})
    assert login.status_code == 200


async def test_forgot_password_same_message_for_unknown_email(client, register):
    await register()
    known = await client.post("/api/auth/forgot-password", json={"email": "jane@example.com"})
    unknown = await client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.json()["message"] == unknown.json()["message"]


async def test_reset_password_token_is_single_use(client, register, session_factory):
    await register()
    await client.post("/api/auth/forgot-password", json={"email": "jane@example.com"})
    async with session_factory() as session:
        user = (await session.execute(select(User).where(User.email == "jane@example.com"))).scalar_one()
        token = user.reset_password_token
    assert token

    payload = {"token": token, "newPassword": "brandnew1", "confirmPassword": "brandnew1"}
    first = await client.post("/api/auth/reset-password", json=payload)
    assert first.status_code == 200

    second = await client.post("/api/auth/reset-password", json=payload)
    assert second.status_code == 401
    assert second.json()["message"] == "Invalid or expired reset token"

    login = await client.post("/api/auth/login", json={"email": "jane@example.com", "password": "brandnew1"})
    assert login.status_code == 200


async def test_reset_password_rejects_garbage_token(client):
    response = await client.post(
        "/api/auth/reset-password",
        json={"token": "garbage", "newPassword": "brandnew1", "confirmPassword": "brandnew1"},
    )
    assert response.status_code == 401


async def test_update_profile_via_auth_route(client, user_token):
    response = await client.put(
        "/api/auth/profile",
        json={"bio": "Writer", "socialLinks": {"github": "https://github.com/jane"}},
        headers=auth_header(user_token),
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["bio"] == "Writer"
    assert user["socialLinks"]["github"] == "https://github.com/jane"


async def test_reset_token_is_not_logged_at_info(client, register, session_factory, caplog):
    await register()
    with caplog.at_level(logging.INFO, logger="casebook.auth.service"):
        await client.post("/api/auth/forgot-password", json={"email": "jane@example.com"})

    async with session_factory() as session:
        user = (await session.execute(select(User).where(User.email == "jane@example.com"))).scalar_one()
    assert "Password reset token issued" in caplog.text
    assert user.reset_password_token not in caplog.text
