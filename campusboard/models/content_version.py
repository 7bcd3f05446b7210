"""파일 교체 직전의 콘텐츠 상태를 보존하는 버전 이력 SQLAlchemy 모델입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from campusboard.database import Base
from campusboard.utils.helpers import utcnow


class ContentVersion(Base):
    __tablename__ = "content_versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content_id = Column(Integer, ForeignKey("content_items.id", ondelete="CASCADE"), nullable=False)
    version_number = Column(Integer, nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    category = Column(String(20), nullable=False)
    file_path = Column(String(500))
    file_relocated = Column(Boolean, nullable=False, default=True)  # False 면 이전 파일 이동 실패
    due_date = Column(DateTime)
    expires_at = Column(DateTime)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    content = relationship("Content", back_populates="versions")

    __table_args__ = (
        UniqueConstraint("content_id", "version_number", name="uq_content_version_number"),
        Index("idx_content_version_parent", "content_id", "version_number"),
    )
