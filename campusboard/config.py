"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./campusboard.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # File upload
    # 크기/형식 정책은 system_settings 테이블에서 읽고, 여기서는 요청 자체의 상한만 둔다.
    UPLOAD_HARD_LIMIT_BYTES: int = 100 * 1024 * 1024  # 100 MB
    UPLOAD_DIR: str = "uploads"
    CONTENT_SUBDIR: str = "contents"
    VERSIONS_SUBDIR: str = "versions"

    class Config:
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
