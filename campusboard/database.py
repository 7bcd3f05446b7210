"""SQLAlchemy 엔진/세션/Base 와 트랜잭션 커밋 헬퍼를 정의하는 데이터베이스 모듈입니다."""

import logging
from typing import Callable, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from campusboard.config import settings
from campusboard.errors import ContentError, InternalError

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_raise(
    db: Session,
    action: str,
    *,
    on_conflict: Optional[Callable[[], ContentError]] = None,
) -> None:
    """커밋 실패 시 롤백하고 도메인 오류로 바꿔 올린다.

    유니크 제약 위반은 ``on_conflict`` 가 주어지면 그 결과(예: DuplicateContent)로,
    그 밖의 저장소 오류는 InternalError 로 변환한다.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if on_conflict is not None:
            logger.info("[db] %s rejected by constraint: %s", action, exc.orig)
            raise on_conflict() from exc
        logger.exception("[db] %s violated a constraint", action)
        raise InternalError(f"Failed to {action}") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[db] %s failed", action)
        raise InternalError(f"Failed to {action}") from exc
