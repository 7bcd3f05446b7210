"""콘텐츠 공개 범위(학과/분반/학기)를 나타내는 값 타입입니다."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ScopeKey:
    department_id: int
    division_id: int
    semester: Optional[str] = None

    @property
    def pair(self) -> tuple[int, int]:
        return (self.department_id, self.division_id)

    def same_pair(self, other: "ScopeKey") -> bool:
        return self.pair == other.pair

    @classmethod
    def of(cls, item) -> "ScopeKey":
        # Content, User 등 department_id/division_id/semester 속성을 가진 객체에서 생성
        return cls(
            department_id=item.department_id,
            division_id=item.division_id,
            semester=item.semester,
        )


def normalize_semester(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None
