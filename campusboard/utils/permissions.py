"""역할 상수와 조회 주체(Requester) 변형 타입을 정의하는 권한 유틸리티입니다."""

from dataclasses import dataclass
from typing import Union

from campusboard.errors import ValidationError
from campusboard.models.user import User
from campusboard.utils.scope import ScopeKey


ADMIN = "admin"
CR = "cr"
CR_PENDING = "cr_pending"
STUDENT = "student"

ALL_ROLES = (STUDENT, CR_PENDING, CR, ADMIN)
CONTENT_WRITERS = (CR,)
CONTENT_DELETERS = (CR, ADMIN)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_cr(user: User) -> bool:
    return user.role == CR


def is_creator(user: User, item) -> bool:
    return item.created_by_id == user.id


@dataclass(frozen=True)
class StudentRequester:
    user_id: int
    scope: ScopeKey


@dataclass(frozen=True)
class CrRequester:
    user_id: int
    scope: ScopeKey


@dataclass(frozen=True)
class AdminRequester:
    user_id: int


Requester = Union[StudentRequester, CrRequester, AdminRequester]


def _user_scope(user: User) -> ScopeKey:
    if not user.department_id or not user.division_id:
        raise ValidationError("User missing department or division")
    return ScopeKey(user.department_id, user.division_id, user.semester or None)


def requester_from_user(user: User) -> Requester:
    if user.role == ADMIN:
        return AdminRequester(user_id=user.id)
    if user.role == CR:
        return CrRequester(user_id=user.id, scope=_user_scope(user))
    # 승인 대기 중인 CR 신청자는 학생과 동일한 범위로 조회한다.
    return StudentRequester(user_id=user.id, scope=_user_scope(user))


def can_view_item(requester: Requester, item) -> bool:
    if isinstance(requester, AdminRequester):
        return True
    if not requester.scope.same_pair(ScopeKey.of(item)):
        return False
    if isinstance(requester, StudentRequester):
        return item.semester is None or item.semester == requester.scope.semester
    return True


def can_view_history(requester: Requester, item) -> bool:
    if isinstance(requester, AdminRequester):
        return True
    return requester.scope.same_pair(ScopeKey.of(item))
