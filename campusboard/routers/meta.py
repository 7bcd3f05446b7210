"""Meta 기능 API 라우터입니다. 업로드 화면에서 쓰는 학과/분반 목록과 시스템 상태를 제공합니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusboard.database import get_db
from campusboard.models.org import Department, Division
from campusboard.schemas.org import DepartmentOut, DivisionOut
from campusboard.schemas.system import SystemStatusOut, UploadRulesOut
from campusboard.services.settings_service import ensure_settings
from campusboard.services.upload_policy import UploadPolicy

router = APIRouter(prefix="/api/meta", tags=["meta"])


@router.get("/departments", response_model=List[DepartmentOut])
def list_departments(db: Session = Depends(get_db)):
    return db.query(Department).order_by(Department.name.asc()).all()


@router.get("/divisions", response_model=List[DivisionOut])
def list_divisions(db: Session = Depends(get_db)):
    return db.query(Division).order_by(Division.name.asc()).all()


@router.get("/system", response_model=SystemStatusOut)
def get_system_status(db: Session = Depends(get_db)):
    # 로그인 전에도 점검 여부와 업로드 제한을 확인할 수 있도록 인증 없이 공개한다.
    row = ensure_settings(db)
    policy = UploadPolicy.from_settings(row)
    return SystemStatusOut(
        maintenance_mode=bool(row.maintenance_mode),
        maintenance_message=row.maintenance_message,
        upload_rules=UploadRulesOut(
            max_size_mb=policy.max_size_mb,
            allowed_mime_types=sorted(policy.allowed_types),
        ),
    )
