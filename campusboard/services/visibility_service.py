"""조회 주체별 콘텐츠 노출 조건(Visibility Filter)과 목록 조회 서비스입니다.

``build_visibility_filter`` 는 (조회 주체, 조회 조건, 현재 시각)만으로 조건식과 정렬을
계산하는 순수 함수다. 활성/보관 상태는 저장하지 않고 expires_at 과 현재 시각을 비교해 매번 판정한다.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session

from campusboard.errors import Forbidden, ValidationError
from campusboard.models.content import CONTENT_CATEGORIES, PINNABLE_CATEGORY, Content
from campusboard.models.user import User
from campusboard.utils.helpers import utcnow
from campusboard.utils.permissions import (
    AdminRequester,
    CrRequester,
    Requester,
    StudentRequester,
    requester_from_user,
)
from campusboard.utils.scope import normalize_semester


@dataclass(frozen=True)
class ContentQuery:
    category: Optional[str] = None
    department_id: Optional[int] = None
    division_id: Optional[int] = None
    semester: Optional[str] = None


@dataclass(frozen=True)
class VisibilityFilter:
    criteria: Tuple
    order_by: Tuple

    def apply(self, query: Query) -> Query:
        return query.filter(*self.criteria).order_by(*self.order_by)


def _scope_criteria(requester: Requester, params: ContentQuery) -> list:
    semester = normalize_semester(params.semester)

    if isinstance(requester, StudentRequester):
        scope = requester.scope
        return [
            Content.department_id == scope.department_id,
            Content.division_id == scope.division_id,
            or_(Content.semester.is_(None), Content.semester == scope.semester)
            if scope.semester
            else Content.semester.is_(None),
        ]

    if isinstance(requester, CrRequester):
        scope = requester.scope
        criteria = [
            Content.department_id == scope.department_id,
            Content.division_id == scope.division_id,
        ]
        if semester:
            criteria.append(Content.semester == semester)
        return criteria

    if isinstance(requester, AdminRequester):
        criteria = []
        if params.department_id is not None:
            criteria.append(Content.department_id == params.department_id)
        if params.division_id is not None:
            criteria.append(Content.division_id == params.division_id)
        if semester:
            criteria.append(Content.semester == semester)
        return criteria

    raise TypeError(f"unknown requester: {requester!r}")


def build_visibility_filter(
    requester: Requester,
    params: ContentQuery,
    *,
    now: datetime,
    archived: bool = False,
) -> VisibilityFilter:
    if params.category and params.category not in CONTENT_CATEGORIES:
        raise ValidationError("Invalid category")

    criteria = _scope_criteria(requester, params)
    if params.category:
        criteria.append(Content.category == params.category)

    if archived:
        criteria.append(and_(Content.expires_at.isnot(None), Content.expires_at <= now))
        order_by = (Content.expires_at.desc(), Content.updated_at.desc(), Content.id.desc())
    else:
        criteria.append(or_(Content.expires_at.is_(None), Content.expires_at > now))
        order_by = ()
        if not params.category or params.category == PINNABLE_CATEGORY:
            order_by = (Content.is_pinned.desc(), Content.pinned_at.desc())
        order_by += (Content.created_at.desc(), Content.id.desc())

    return VisibilityFilter(criteria=tuple(criteria), order_by=order_by)


def build_mine_filter(requester: Requester) -> VisibilityFilter:
    if not isinstance(requester, CrRequester):
        raise Forbidden("Only class representatives have their own uploads")
    return VisibilityFilter(
        criteria=(Content.created_by_id == requester.user_id,),
        order_by=(Content.created_at.desc(), Content.id.desc()),
    )


def list_feed(
    db: Session,
    current_user: User,
    params: ContentQuery,
    now: Optional[datetime] = None,
) -> List[Content]:
    visibility = build_visibility_filter(requester_from_user(current_user), params, now=now or utcnow())
    return visibility.apply(db.query(Content)).all()


def list_archive(
    db: Session,
    current_user: User,
    params: ContentQuery,
    now: Optional[datetime] = None,
) -> List[Content]:
    visibility = build_visibility_filter(
        requester_from_user(current_user), params, now=now or utcnow(), archived=True
    )
    return visibility.apply(db.query(Content)).all()


def list_mine(db: Session, current_user: User) -> List[Content]:
    return build_mine_filter(requester_from_user(current_user)).apply(db.query(Content)).all()


def latest_notice(db: Session, current_user: User, now: Optional[datetime] = None) -> Optional[Content]:
    requester = requester_from_user(current_user)
    if isinstance(requester, AdminRequester):
        return None
    visibility = build_visibility_filter(
        requester, ContentQuery(category=PINNABLE_CATEGORY), now=now or utcnow()
    )
    return visibility.apply(db.query(Content)).first()
