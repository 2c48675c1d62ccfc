import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .database import engine, SessionDep
from .db_models import *
from .config import settings
from .exceptions import register_exception_handlers
from .auth.router import router as auth_router
from .users.router import router as users_router
from .blogs.router import router as blogs_router
from .case_studies.router import router as case_studies_router

# 로깅 설정 (Docker 환경 최적화)
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)  # stdout으로 명시적 출력
    ]
)

# SQL 로그는 DEBUG 일 때만
logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if log_level <= logging.DEBUG else logging.WARNING)

logger = logging.getLogger(__name__)
logger.info(f"Application starting with log level: {settings.LOG_LEVEL} (env={settings.ENVIRONMENT})")

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await engine.dispose()
    logger.info("Database engine disposed")

app = FastAPI(title="Casebook API", lifespan=lifespan)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# 라우터 등록 (모든 API 는 /api 아래)
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(blogs_router, prefix="/api")
app.include_router(case_studies_router, prefix="/api")

@app.get("/", tags=["health"])
async def root():
    return {"message": "Casebook API", "environment": settings.ENVIRONMENT}

# 헬스 체크: 주입된 세션으로 DB 연결까지 확인
@app.get("/health", tags=["health"])
async def health(db: SessionDep):
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "database": "disconnected"},
        )
    return {"status": "ok", "database": "connected"}
