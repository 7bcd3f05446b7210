from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """DB 에 저장되는 시각은 모두 tz 정보 없는 UTC 로 통일한다."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
