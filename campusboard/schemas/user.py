"""User/인증 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserOut(BaseModel):
    id: int
    full_name: str
    contact_number: str
    role: str
    department_id: Optional[int] = None
    division_id: Optional[int] = None
    semester: Optional[str] = None
    must_change_password: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    contact_number: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
