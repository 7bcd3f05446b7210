"""Content 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ContentCreate(BaseModel):
    title: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    semester: Optional[str] = None
    allow_duplicate: bool = False


class ContentUpdate(BaseModel):
    # 부분 수정: 전달된 필드만 반영한다(model_dump(exclude_unset=True)).
    title: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    semester: Optional[str] = None


class ContentOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: str
    file_path: Optional[str] = None
    due_date: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_pinned: bool
    pinned_at: Optional[datetime] = None
    department_id: int
    division_id: int
    semester: Optional[str] = None
    created_by_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ContentVersionOut(BaseModel):
    id: int
    content_id: int
    version_number: int
    title: str
    description: Optional[str] = None
    category: str
    file_path: Optional[str] = None
    file_relocated: bool
    due_date: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_by_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
