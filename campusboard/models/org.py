"""학과(Department)/분반(Division) SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime
from campusboard.database import Base
from campusboard.utils.helpers import utcnow


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)


class Division(Base):
    __tablename__ = "divisions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(10), unique=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)
