"""시스템 설정(업로드 정책, 점검 모드) 단일 행 SQLAlchemy 모델입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from campusboard.database import Base
from campusboard.utils.helpers import utcnow

DEFAULT_ALLOWED_MIME_TYPES = ",".join([
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
])


class SystemSetting(Base):
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True)
    upload_max_size_mb = Column(Integer, nullable=False, default=10)
    upload_allowed_mime_types = Column(String(600), nullable=False, default=DEFAULT_ALLOWED_MIME_TYPES)
    maintenance_mode = Column(Boolean, nullable=False, default=False)
    maintenance_message = Column(String(300))
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
