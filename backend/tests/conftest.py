import os
import sys
from pathlib import Path
import pytest

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

# 테스트용 환경 변수 세팅 (casebook 모듈 임포트 전에 적용)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTHOR_EMAILS", "author@example.com")
os.environ.setdefault("CORS_ORIGINS", "*")

# sys.path에 backend 추가하여 'casebook' 패키지 검색 가능하게 함
repo_root = Path(__file__).resolve().parents[2]
backend_path = repo_root / "backend"
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from casebook.main import app
from casebook.database import Base
from casebook.database import get_db as real_get_db
from casebook.users import service as user_service
from casebook.users.models import UserRole

PASSWORD = "secret123"
LONG_CONTENT = (
    "Streaming platforms rely on careful engineering to serve millions of viewers. "
    "This article walks through the architecture."
)


@pytest.fixture()
async def test_engine():
    # 메모리 SQLite. StaticPool 로 모든 세션이 같은 연결(같은 DB)을 사용
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(test_engine):
    return sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
async def override_db(session_factory):
    # 요청마다 새 세션 (운영 환경과 동일하게 요청 단위 identity map)
    async def _get_db():
        async with session_factory() as session:
            yield session
    app.dependency_overrides[real_get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def blog_payload(title: str = "How Netflix Scales Video Streaming", **overrides) -> dict:
    payload = {
        "title": title,
        "description": "A look at the streaming architecture behind Netflix.",
        "content": LONG_CONTENT,
        "tags": ["architecture", "streaming"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def register(client):
    async def _register(name: str = "Jane Doe", email: str = "jane@example.com", password: str = PASSWORD):
        response = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, "confirmPassword": password},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture()
async def user_token(register):
    return (await register())["token"]


@pytest.fixture()
async def author_token(register):
    # AUTHOR_EMAILS 허용 목록에 있는 이메일
    return (await register(name="Alice Author", email="author@example.com"))["token"]


@pytest.fixture()
async def admin_token(client, db):
    await user_service.create_user(
        db, name="Admin", email="admin@example.com", password=PASSWORD, role=UserRole.ADMIN.value
    )
    response = await client.post("/api/auth/login", json={"email": "admin@example.com", "password": PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture()
def create_blog(client, author_token):
    async def _create(title: str = "How Netflix Scales Video Streaming", token: str = None, **overrides):
        response = await client.post(
            "/api/blogs", json=blog_payload(title, **overrides), headers=auth_header(token or author_token)
        )
        assert response.status_code == 201, response.text
        return response.json()["blog"]
    return _create


@pytest.fixture()
def create_case_study(client, author_token):
    async def _create(title: str = "Rebuilding A Retail Mobile App", **overrides):
        response = await client.post(
            "/api/case-studies", json=blog_payload(title, **overrides), headers=auth_header(author_token)
        )
        assert response.status_code == 201, response.text
        return response.json()["caseStudy"]
    return _create
