"""콘텐츠 파일 교체 시 직전 상태를 버전으로 적재/조회하는 도메인 서비스입니다."""

from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from campusboard.models.content import Content
from campusboard.models.content_version import ContentVersion

SNAPSHOT_FIELDS = ("title", "description", "category", "file_path", "due_date", "expires_at")


def snapshot_of(content: Content) -> Dict[str, Any]:
    return {field: getattr(content, field) for field in SNAPSHOT_FIELDS}


def next_version_number(db: Session, content_id: int) -> int:
    # 호출자는 부모 콘텐츠 행을 잠근 상태(with_for_update)에서 호출해야 한다.
    current_max = (
        db.query(func.max(ContentVersion.version_number))
        .filter(ContentVersion.content_id == content_id)
        .scalar()
    )
    return (current_max or 0) + 1


def append_version(
    db: Session,
    *,
    content: Content,
    snapshot: Dict[str, Any],
    changed_by: int,
    file_relocated: bool = True,
) -> ContentVersion:
    """스냅샷을 새 버전으로 추가한다. 커밋은 호출자의 트랜잭션에서 함께 수행된다."""
    row = ContentVersion(
        content_id=content.id,
        version_number=next_version_number(db, content.id),
        file_relocated=file_relocated,
        created_by_id=changed_by,
        **{field: snapshot.get(field) for field in SNAPSHOT_FIELDS},
    )
    db.add(row)
    return row


def list_versions(db: Session, content_id: int) -> List[ContentVersion]:
    return (
        db.query(ContentVersion)
        .filter(ContentVersion.content_id == content_id)
        .order_by(ContentVersion.version_number.desc(), ContentVersion.created_at.desc())
        .all()
    )
