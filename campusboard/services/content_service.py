"""Content Service 도메인 서비스 레이어입니다. 콘텐츠 생성/수정/삭제와 중복 업로드 검사를 담당합니다.

수정 흐름은 순서가 중요하다. 요청된 필드를 반영하기 전에 현재 상태를 스냅샷으로 잡아 두고,
첨부 파일이 교체된 경우에만 그 스냅샷을 버전 이력으로 남긴다. 이전 파일은 versions 영역으로
이동(rename)되며 버전 행은 이동된 경로를 가리킨다.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from campusboard.database import commit_or_raise
from campusboard.errors import DuplicateContent, Forbidden, NotFound, ValidationError
from campusboard.models.content import CONTENT_CATEGORIES, PINNABLE_CATEGORY, Content
from campusboard.models.content_version import ContentVersion
from campusboard.models.org import Department, Division
from campusboard.models.user import User
from campusboard.schemas.content import ContentCreate, ContentUpdate
from campusboard.services import version_service
from campusboard.services.storage_service import LocalBlobStore, blob_store
from campusboard.services.upload_policy import StagedUpload, check_upload
from campusboard.utils.helpers import to_naive_utc
from campusboard.utils.permissions import (
    can_view_history,
    can_view_item,
    is_admin,
    is_cr,
    is_creator,
    requester_from_user,
)
from campusboard.utils.scope import ScopeKey, normalize_semester

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 200


def _validate_title(title: Optional[str]) -> str:
    if title is None or not str(title).strip():
        raise ValidationError("Title and category are required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return title


def _validate_category(category: Optional[str]) -> str:
    if not category:
        raise ValidationError("Title and category are required")
    if category not in CONTENT_CATEGORIES:
        raise ValidationError("Invalid category")
    return category


def _ensure_scope_exists(db: Session, scope: ScopeKey) -> None:
    if db.get(Department, scope.department_id) is None or db.get(Division, scope.division_id) is None:
        raise ValidationError("Department or division does not exist")


def _ensure_writer(current_user: User) -> None:
    if not is_cr(current_user):
        raise Forbidden("Only class representatives can manage content")


def _get_content_or_404(db: Session, content_id: int, *, lock: bool = False) -> Content:
    query = db.query(Content).filter(Content.id == content_id)
    if lock:
        query = query.with_for_update()
    item = query.first()
    if not item:
        raise NotFound("Content not found")
    return item


def _same_triple_query(db: Session, title: str, category: str, scope: ScopeKey):
    return db.query(Content).filter(
        Content.title == title,
        Content.category == category,
        Content.department_id == scope.department_id,
        Content.division_id == scope.division_id,
        Content.semester_key == (scope.semester or ""),
    )


def find_duplicate(db: Session, title: str, category: str, scope: ScopeKey) -> Optional[Content]:
    """(제목, 분류, 범위)가 정확히 같은 기존 콘텐츠를 찾는다. 학기 NULL 은 NULL 과만 일치한다."""
    return _same_triple_query(db, title, category, scope).order_by(Content.id.asc()).first()


def _next_duplicate_index(
    db: Session,
    title: str,
    category: str,
    scope: ScopeKey,
    exclude_id: Optional[int] = None,
) -> int:
    query = _same_triple_query(db, title, category, scope)
    if exclude_id is not None:
        query = query.filter(Content.id != exclude_id)
    current_max = query.with_entities(func.max(Content.duplicate_index)).scalar()
    return 0 if current_max is None else current_max + 1


def _discard_blobs(store: LocalBlobStore, paths: Iterable[Optional[str]]) -> None:
    for path in paths:
        if not path:
            continue
        try:
            store.delete(path)
        except OSError:
            logger.exception("[content] failed to delete file %s", path)


def create_content(
    db: Session,
    data: ContentCreate,
    current_user: User,
    upload: Optional[StagedUpload] = None,
    store: LocalBlobStore = blob_store,
) -> Content:
    _ensure_writer(current_user)
    title = _validate_title(data.title)
    category = _validate_category(data.category)
    if not current_user.department_id or not current_user.division_id:
        raise ValidationError("CR must be associated with a department and division")
    scope = ScopeKey(current_user.department_id, current_user.division_id, normalize_semester(data.semester))
    _ensure_scope_exists(db, scope)

    if upload is not None:
        check_upload(db, upload)

    existing = find_duplicate(db, title, category, scope)
    if existing is not None and not data.allow_duplicate:
        raise DuplicateContent(existing.id)
    duplicate_index = _next_duplicate_index(db, title, category, scope) if existing is not None else 0

    file_path = store.store(upload.data, upload.content_type, upload.filename) if upload else None
    item = Content(
        title=title,
        description=data.description or None,
        category=category,
        file_path=file_path,
        due_date=to_naive_utc(data.due_date),
        expires_at=to_naive_utc(data.expires_at),
        is_pinned=False,
        department_id=scope.department_id,
        division_id=scope.division_id,
        semester=scope.semester,
        duplicate_index=duplicate_index,
        created_by_id=current_user.id,
    )
    db.add(item)

    def _conflict():
        match = find_duplicate(db, title, category, scope)
        return DuplicateContent(match.id if match else None)

    try:
        commit_or_raise(db, "create content", on_conflict=_conflict)
    except Exception:
        _discard_blobs(store, [file_path])
        raise
    db.refresh(item)
    logger.info(
        "[content] created id=%s category=%s scope=%s by user=%s",
        item.id, item.category, scope, current_user.id,
    )
    return item


def get_content(db: Session, content_id: int, current_user: User) -> Content:
    item = _get_content_or_404(db, content_id)
    if not can_view_item(requester_from_user(current_user), item):
        raise Forbidden("Forbidden")
    return item


def _apply_changes(db: Session, item: Content, data: ContentUpdate) -> None:
    changes = data.model_dump(exclude_unset=True)
    triple_before = (item.title, item.category, item.semester)

    if changes.get("category") is not None:
        item.category = _validate_category(changes["category"])
    if changes.get("title") is not None:
        item.title = _validate_title(changes["title"])
    if "description" in changes:
        item.description = changes["description"] or None
    if "due_date" in changes:
        item.due_date = to_naive_utc(changes["due_date"])
    if "expires_at" in changes:
        item.expires_at = to_naive_utc(changes["expires_at"])
    if "semester" in changes:
        item.semester = normalize_semester(changes["semester"])

    if item.is_pinned and item.category != PINNABLE_CATEGORY:
        item.is_pinned = False
        item.pinned_at = None

    if (item.title, item.category, item.semester) != triple_before:
        # 수정은 중복 검사를 하지 않으므로 유니크 제약에 걸리지 않도록 슬롯만 다시 잡는다.
        item.duplicate_index = _next_duplicate_index(
            db, item.title, item.category, ScopeKey.of(item), exclude_id=item.id
        )


def _restore_files(
    store: LocalBlobStore,
    new_path: Optional[str],
    previous_path: Optional[str],
    relocated_path: Optional[str],
) -> None:
    _discard_blobs(store, [new_path])
    if relocated_path and previous_path:
        try:
            store.move(relocated_path, previous_path)
        except OSError:
            logger.exception(
                "[content] failed to move %s back to %s after aborted update", relocated_path, previous_path
            )


def update_content(
    db: Session,
    content_id: int,
    data: ContentUpdate,
    current_user: User,
    upload: Optional[StagedUpload] = None,
    store: LocalBlobStore = blob_store,
) -> Content:
    item = _get_content_or_404(db, content_id, lock=True)
    if not is_creator(current_user, item):
        raise Forbidden("Cannot edit content created by others")
    if upload is not None:
        check_upload(db, upload)

    snapshot = version_service.snapshot_of(item)
    _apply_changes(db, item, data)

    new_path = None
    relocated_path = None
    previous_path = item.file_path
    if upload is not None:
        new_path = store.store(upload.data, upload.content_type, upload.filename)
        file_relocated = True
        if previous_path:
            target = store.version_path_for(previous_path)
            try:
                store.move(previous_path, target)
                relocated_path = target
                snapshot["file_path"] = target
            except OSError:
                # 메타데이터 수정이 파일 이력보다 우선한다. 이동 실패는 기록만 하고 계속 진행한다.
                logger.exception(
                    "[content] failed to move previous file %s into versions for content=%s",
                    previous_path, item.id,
                )
                file_relocated = False
        item.file_path = new_path
        version_service.append_version(
            db,
            content=item,
            snapshot=snapshot,
            changed_by=current_user.id,
            file_relocated=file_relocated,
        )

    try:
        commit_or_raise(db, "update content")
    except Exception:
        if upload is not None:
            _restore_files(store, new_path, previous_path, relocated_path)
        raise
    db.refresh(item)
    logger.info(
        "[content] updated id=%s by user=%s file_replaced=%s", item.id, current_user.id, upload is not None
    )
    return item


def delete_content(
    db: Session,
    content_id: int,
    current_user: User,
    store: LocalBlobStore = blob_store,
) -> None:
    item = _get_content_or_404(db, content_id)
    if not is_admin(current_user):
        _ensure_writer(current_user)
        if not is_creator(current_user, item):
            raise Forbidden("Cannot delete content created by others")

    # 버전 이력도 함께 삭제한다(Content.versions cascade).
    paths: List[str] = []
    for path in [item.file_path, *(version.file_path for version in item.versions)]:
        if path and path not in paths:
            paths.append(path)

    db.delete(item)
    commit_or_raise(db, "delete content")
    # 파일 삭제 실패는 이미 커밋된 삭제를 되돌리지 않는다.
    _discard_blobs(store, paths)
    logger.info("[content] deleted id=%s by user=%s (%d files)", content_id, current_user.id, len(paths))


def list_versions(db: Session, content_id: int, current_user: User) -> List[ContentVersion]:
    item = _get_content_or_404(db, content_id)
    if not can_view_history(requester_from_user(current_user), item):
        raise Forbidden("Forbidden")
    return version_service.list_versions(db, item.id)
