"""첨부 파일의 크기/MIME 형식을 시스템 설정 기준으로 검증하는 업로드 정책입니다.

정책 검사는 콘텐츠 저장소와 Blob 저장소에 어떤 변경도 일어나기 전에 수행된다.
업로드 본문은 메모리에만 올려 두고(StagedUpload), 검사를 통과한 뒤에야 파일로 기록한다.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from campusboard.config import settings
from campusboard.errors import FileTooLarge, InvalidFileType
from campusboard.models.system_setting import SystemSetting
from campusboard.services import settings_service

MB = 1024 * 1024


@dataclass(frozen=True)
class UploadPolicy:
    max_bytes: int
    allowed_types: FrozenSet[str] = frozenset()

    @property
    def max_size_mb(self) -> int:
        return self.max_bytes // MB

    @classmethod
    def from_settings(cls, row: SystemSetting) -> "UploadPolicy":
        max_mb = int(row.upload_max_size_mb or 10)
        allowed = {
            item.strip()
            for item in str(row.upload_allowed_mime_types or "").split(",")
            if item.strip()
        }
        return cls(max_bytes=max(1, max_mb) * MB, allowed_types=frozenset(allowed))


@dataclass(frozen=True)
class StagedUpload:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def load_upload_policy(db: Session) -> UploadPolicy:
    return UploadPolicy.from_settings(settings_service.ensure_settings(db))


def enforce_upload_policy(policy: UploadPolicy, declared_type: str, size: int) -> None:
    if policy.allowed_types and declared_type not in policy.allowed_types:
        raise InvalidFileType(
            "Invalid file type",
            allowed_mime_types=sorted(policy.allowed_types),
        )
    if size > policy.max_bytes:
        raise FileTooLarge(
            f"File too large. Max allowed is {policy.max_size_mb}MB",
            max_size_mb=policy.max_size_mb,
        )


def check_upload(db: Session, upload: StagedUpload) -> None:
    enforce_upload_policy(load_upload_policy(db), upload.content_type, upload.size)


async def stage_upload(file: Optional[UploadFile]) -> Optional[StagedUpload]:
    if file is None or not file.filename:
        return None
    limit = settings.UPLOAD_HARD_LIMIT_BYTES
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise FileTooLarge(
            f"File too large. Max allowed is {limit // MB}MB",
            max_size_mb=limit // MB,
        )
    return StagedUpload(
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
        data=data,
    )
