"""Auth Service 도메인 서비스 레이어입니다. 외부 인증 시스템을 대신하는 토큰 발급/모의 로그인을 제공합니다."""

from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from campusboard.models.user import User
from campusboard.config import settings

ALGORITHM = "HS256"


def create_access_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def mock_login(db: Session, contact_number: str) -> User:
    user = db.query(User).filter(User.contact_number == contact_number, User.is_active == True).first()  # noqa: E712
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"No active user found for contact number '{contact_number}'",
        )
    return user
