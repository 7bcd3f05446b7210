"""공개 시스템 상태(점검 모드, 업로드 규칙) 응답 스키마입니다."""

from typing import List, Optional

from pydantic import BaseModel


class UploadRulesOut(BaseModel):
    max_size_mb: int
    allowed_mime_types: List[str]


class SystemStatusOut(BaseModel):
    maintenance_mode: bool
    maintenance_message: Optional[str] = None
    upload_rules: UploadRulesOut
