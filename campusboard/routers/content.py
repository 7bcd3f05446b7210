"""Content 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from campusboard.database import get_db
from campusboard.errors import ValidationError
from campusboard.middleware.auth_middleware import get_current_user, require_roles, require_writer
from campusboard.models.user import User
from campusboard.schemas.content import ContentCreate, ContentOut, ContentUpdate, ContentVersionOut
from campusboard.services import content_service, pin_service, visibility_service
from campusboard.services.upload_policy import stage_upload
from campusboard.services.visibility_service import ContentQuery
from campusboard.utils.permissions import CONTENT_DELETERS, CONTENT_WRITERS, CR

router = APIRouter(prefix="/api/content", tags=["content"])

content_writer = require_writer(*CONTENT_WRITERS)
content_deleter = require_writer(*CONTENT_DELETERS)


CLEARABLE_FIELDS = ("description", "due_date", "expires_at", "semester")


def _build(schema, values: dict, cleared=()):
    provided = {key: value for key, value in values.items() if value is not None}
    provided.update({key: None for key in cleared})
    try:
        return schema(**provided)
    except SchemaValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise ValidationError(f"Invalid value for: {fields}") from exc


async def _cleared_fields(request: Request) -> List[str]:
    # FastAPI 는 빈 폼 값을 기본값(None)으로 바꾸므로 원본 폼에서 "값 지움" 요청을 찾는다.
    form = await request.form()
    return [key for key in CLEARABLE_FIELDS if key in form and form[key] == ""]


@router.post("", response_model=ContentOut, status_code=201)
async def create_content(
    title: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    due_date: Optional[str] = Form(None),
    expires_at: Optional[str] = Form(None),
    semester: Optional[str] = Form(None),
    allow_duplicate: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(content_writer),
):
    data = _build(ContentCreate, {
        "title": title,
        "category": category,
        "description": description,
        "due_date": due_date,
        "expires_at": expires_at,
        "semester": semester,
        "allow_duplicate": str(allow_duplicate or "").lower() == "true",
    })
    upload = await stage_upload(file)
    return content_service.create_content(db, data, current_user, upload=upload)


@router.get("", response_model=List[ContentOut])
def list_content(
    category: Optional[str] = None,
    department_id: Optional[int] = None,
    division_id: Optional[int] = None,
    semester: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    params = ContentQuery(
        category=category, department_id=department_id, division_id=division_id, semester=semester
    )
    return visibility_service.list_feed(db, current_user, params)


@router.get("/archive", response_model=List[ContentOut])
def list_archived_content(
    category: Optional[str] = None,
    department_id: Optional[int] = None,
    division_id: Optional[int] = None,
    semester: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    params = ContentQuery(
        category=category, department_id=department_id, division_id=division_id, semester=semester
    )
    return visibility_service.list_archive(db, current_user, params)


@router.get("/mine", response_model=List[ContentOut])
def list_my_content(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(CR)),
):
    return visibility_service.list_mine(db, current_user)


@router.get("/latest-notice", response_model=Optional[ContentOut])
def get_latest_notice(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return visibility_service.latest_notice(db, current_user)


@router.get("/{content_id}", response_model=ContentOut)
def get_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return content_service.get_content(db, content_id, current_user)


@router.put("/{content_id}", response_model=ContentOut)
async def update_content(
    content_id: int,
    request: Request,
    title: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    due_date: Optional[str] = Form(None),
    expires_at: Optional[str] = Form(None),
    semester: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(content_writer),
):
    data = _build(ContentUpdate, {
        "title": title,
        "category": category,
        "description": description,
        "due_date": due_date,
        "expires_at": expires_at,
        "semester": semester,
    }, cleared=await _cleared_fields(request))
    upload = await stage_upload(file)
    return content_service.update_content(db, content_id, data, current_user, upload=upload)


@router.delete("/{content_id}")
def delete_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(content_deleter),
):
    content_service.delete_content(db, content_id, current_user)
    return {"message": "Content deleted"}


@router.patch("/{content_id}/pin", response_model=ContentOut)
def pin_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(content_writer),
):
    return pin_service.pin_content(db, content_id, current_user)


@router.patch("/{content_id}/unpin", response_model=ContentOut)
def unpin_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(content_writer),
):
    return pin_service.unpin_content(db, content_id, current_user)


@router.get("/{content_id}/versions", response_model=List[ContentVersionOut])
def list_content_versions(
    content_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return content_service.list_versions(db, content_id, current_user)
