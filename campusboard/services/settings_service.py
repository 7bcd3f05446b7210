"""시스템 설정 행을 보장하고 점검 모드 쓰기 차단을 판정하는 서비스입니다."""

from sqlalchemy.orm import Session

from campusboard.errors import MaintenanceMode
from campusboard.models.system_setting import SystemSetting
from campusboard.models.user import User
from campusboard.utils.permissions import is_admin

SETTINGS_ROW_ID = 1
DEFAULT_MAINTENANCE_MESSAGE = "System is in maintenance mode. Please try later."


def ensure_settings(db: Session) -> SystemSetting:
    row = db.get(SystemSetting, SETTINGS_ROW_ID)
    if row is None:
        row = SystemSetting(id=SETTINGS_ROW_ID)
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def ensure_writes_allowed(db: Session, current_user: User) -> None:
    row = ensure_settings(db)
    if row.maintenance_mode and not is_admin(current_user):
        raise MaintenanceMode(row.maintenance_message or DEFAULT_MAINTENANCE_MESSAGE)
