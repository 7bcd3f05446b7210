"""학과/분반 단위로 배포되는 콘텐츠(공지/노트/과제/강의계획서) SQLAlchemy 모델입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship, validates
from campusboard.database import Base
from campusboard.utils.helpers import utcnow

CONTENT_CATEGORIES = ("notice", "note", "assignment", "syllabus")
PINNABLE_CATEGORY = "notice"


class Content(Base):
    __tablename__ = "content_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    category = Column(String(20), nullable=False)  # notice/note/assignment/syllabus
    file_path = Column(String(500))
    due_date = Column(DateTime)
    expires_at = Column(DateTime)  # NULL 이면 보관(archive) 처리되지 않음
    is_pinned = Column(Boolean, nullable=False, default=False)
    pinned_at = Column(DateTime)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=False)
    division_id = Column(Integer, ForeignKey("divisions.id"), nullable=False)
    semester = Column(String(20))  # NULL = 분반 전체 학기
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # 유니크 제약용 보조 컬럼: semester NULL 도 하나의 값으로 비교되도록 ""로 저장
    semester_key = Column(String(20), nullable=False, default="")
    # 중복 업로드 허용(override) 시 1, 2, ... 로 증가
    duplicate_index = Column(Integer, nullable=False, default=0)
    # 고정된 항목만 1, 나머지는 NULL (NULL 은 유니크 비교에서 제외됨)
    pin_slot = Column(Integer)

    creator = relationship("User", back_populates="uploads")
    versions = relationship(
        "ContentVersion",
        back_populates="content",
        cascade="all, delete-orphan",
        order_by="ContentVersion.version_number",
    )

    __table_args__ = (
        UniqueConstraint(
            "title", "category", "department_id", "division_id", "semester_key", "duplicate_index",
            name="uq_content_scope_title",
        ),
        UniqueConstraint("department_id", "division_id", "pin_slot", name="uq_content_pinned_scope"),
        Index("idx_content_scope", "department_id", "division_id", "category"),
        Index("idx_content_creator", "created_by_id", "created_at"),
        Index("idx_content_expires", "expires_at"),
    )

    @validates("semester")
    def _sync_semester_key(self, key, value):
        self.semester_key = value or ""
        return value

    @validates("is_pinned")
    def _sync_pin_slot(self, key, value):
        self.pin_slot = 1 if value else None
        return value
