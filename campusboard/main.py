"""FastAPI 애플리케이션 진입점. 로깅, 미들웨어, 오류 핸들러, API 라우터, 업로드 파일 서빙을 등록합니다."""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from campusboard.config import settings
from campusboard.database import Base, SessionLocal, engine
from campusboard.errors import ContentError, handle_content_error
import campusboard.models  # noqa: F401 - 모델 import로 metadata 등록
from campusboard.routers import auth, content, meta
from campusboard.services.settings_service import ensure_settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(
    title="Campusboard",
    description="학과/분반 단위 공지·노트·과제·강의계획서 배포 시스템",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ContentError, handle_content_error)

app.include_router(auth.router)
app.include_router(content.router)
app.include_router(meta.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_settings(db)
    finally:
        db.close()


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "campusboard"}


# Static file serving for uploads
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
