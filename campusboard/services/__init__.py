"""서비스 레이어 패키지 초기화 모듈입니다."""

from campusboard.services import (
    auth_service,
    settings_service,
    storage_service,
    upload_policy,
    version_service,
    content_service,
    pin_service,
    visibility_service,
)
