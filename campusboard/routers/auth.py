"""Auth 기능 API 라우터입니다. 외부 인증 연동 전까지 사용하는 모의 로그인과 내 정보 조회를 제공합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from campusboard.database import get_db
from campusboard.schemas.user import LoginRequest, TokenResponse, UserOut
from campusboard.services.auth_service import create_access_token, mock_login
from campusboard.middleware.auth_middleware import get_current_user
from campusboard.models.user import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = mock_login(db, request.contact_number)
    token = create_access_token(user.id)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user
