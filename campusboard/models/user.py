"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from campusboard.database import Base
from campusboard.utils.helpers import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(150), nullable=False)
    contact_number = Column(String(20), unique=True, nullable=False)
    role = Column(String(20), nullable=False, default="student")  # student/cr_pending/cr/admin
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)
    division_id = Column(Integer, ForeignKey("divisions.id"), nullable=True)
    semester = Column(String(20), nullable=True)
    must_change_password = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)

    uploads = relationship("Content", back_populates="creator")
