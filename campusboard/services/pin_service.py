"""공지 고정(pin) 관리 서비스입니다.

같은 학과/분반 안에서는 학기와 무관하게 고정된 항목이 최대 하나다. 새 항목을 고정할 때는
같은 범위의 다른 고정을 해제하고 대상을 고정하는 두 단계를 하나의 트랜잭션으로 커밋한다.
"""

import logging

from sqlalchemy.orm import Session

from campusboard.database import commit_or_raise
from campusboard.errors import Forbidden, InvalidOperation, NotFound, PinConflict
from campusboard.models.content import PINNABLE_CATEGORY, Content
from campusboard.models.user import User
from campusboard.utils.helpers import utcnow
from campusboard.utils.permissions import is_cr, requester_from_user
from campusboard.utils.scope import ScopeKey

logger = logging.getLogger(__name__)


def _requester_scope(current_user: User) -> ScopeKey:
    if not is_cr(current_user):
        raise Forbidden("Only class representatives can pin notices")
    return requester_from_user(current_user).scope


def _load(db: Session, content_id: int) -> Content:
    item = db.query(Content).filter(Content.id == content_id).with_for_update().first()
    if not item:
        raise NotFound("Content not found")
    return item


def pin_content(db: Session, content_id: int, current_user: User) -> Content:
    scope = _requester_scope(current_user)
    item = _load(db, content_id)
    if item.category != PINNABLE_CATEGORY:
        raise InvalidOperation("Only notices can be pinned")
    if not scope.same_pair(ScopeKey.of(item)):
        raise Forbidden("Cannot pin notice outside your division")

    # 같은 범위의 행을 잠가 동시 고정 요청이 서로 끼어들지 않게 한다.
    (
        db.query(Content.id)
        .filter(Content.department_id == item.department_id, Content.division_id == item.division_id)
        .with_for_update()
        .all()
    )
    db.query(Content).filter(
        Content.id != item.id,
        Content.department_id == item.department_id,
        Content.division_id == item.division_id,
        Content.is_pinned == True,  # noqa: E712
    ).update({"is_pinned": False, "pinned_at": None, "pin_slot": None}, synchronize_session="fetch")

    item.is_pinned = True
    item.pinned_at = utcnow()
    commit_or_raise(
        db,
        "pin notice",
        on_conflict=lambda: PinConflict("Another notice was pinned concurrently. Please retry."),
    )
    db.refresh(item)
    logger.info(
        "[pin] content=%s pinned in department=%s division=%s by user=%s",
        item.id, item.department_id, item.division_id, current_user.id,
    )
    return item


def unpin_content(db: Session, content_id: int, current_user: User) -> Content:
    scope = _requester_scope(current_user)
    item = _load(db, content_id)
    if not scope.same_pair(ScopeKey.of(item)):
        raise Forbidden("Cannot unpin notice outside your division")

    item.is_pinned = False
    item.pinned_at = None
    commit_or_raise(db, "unpin notice")
    db.refresh(item)
    logger.info("[pin] content=%s unpinned by user=%s", item.id, current_user.id)
    return item
