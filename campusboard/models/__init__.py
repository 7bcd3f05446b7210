"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from campusboard.models.org import Department, Division
from campusboard.models.user import User
from campusboard.models.content import Content
from campusboard.models.content_version import ContentVersion
from campusboard.models.system_setting import SystemSetting

__all__ = [
    "Department", "Division",
    "User",
    "Content",
    "ContentVersion",
    "SystemSetting",
]
