from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from campusboard.database import get_db
from campusboard.errors import Forbidden
from campusboard.models.user import User
from campusboard.config import settings
from campusboard.services.auth_service import ALGORITHM
from campusboard.services.settings_service import ensure_writes_allowed
from campusboard.utils.permissions import CR

security = HTTPBearer()


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if not user.is_active:
        raise Forbidden("Account is deactivated. Contact administrator.")
    return user


def require_roles(*roles: str):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise Forbidden(f"Requires role: {', '.join(roles)}")
        return current_user
    return checker


def require_writer(*roles: str):
    """쓰기 요청 공통 관문: 점검 모드 → 역할 → CR 비밀번호 변경 여부 순으로 검사한다."""
    def checker(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        ensure_writes_allowed(db, current_user)
        if current_user.role not in roles:
            raise Forbidden(f"Requires role: {', '.join(roles)}")
        if current_user.role == CR and current_user.must_change_password:
            raise Forbidden(
                "You must change your password before uploading or editing content.",
                code="MUST_CHANGE_PASSWORD",
            )
        return current_user
    return checker
