import pytest

from campusboard.errors import DuplicateContent
from campusboard.models.content import Content
from campusboard.schemas.content import ContentCreate
from campusboard.services import content_service
from campusboard.services.upload_policy import StagedUpload
from tests.conftest import PDF, auth_headers, make_content, stored_files


def _create(client, headers, files=None, **fields):
    data = {"title": "Week 1 notes", "category": "note"}
    data.update(fields)
    return client.post("/api/content", data=data, files=files, headers=headers)


def test_cr_creates_content_in_own_scope(client, seed_users):
    headers = auth_headers(client, "cr-a")
    resp = _create(client, headers, semester="SEM3", description="intro")
    assert resp.status_code == 201
    data = resp.json()
    assert data["title"] == "Week 1 notes"
    assert data["department_id"] == seed_users["cr"].department_id
    assert data["division_id"] == seed_users["cr"].division_id
    assert data["semester"] == "SEM3"
    assert data["is_pinned"] is False
    assert data["file_path"] is None


def test_create_with_file_stores_blob(client, seed_users, upload_dir):
    headers = auth_headers(client, "cr-a")
    resp = _create(client, headers, files={"file": PDF})
    assert resp.status_code == 201
    path = resp.json()["file_path"]
    assert path.startswith("contents/")
    assert path.endswith(".pdf")
    assert (upload_dir / path).read_bytes() == PDF[1]


def test_blank_semester_means_all_semesters(client, seed_users):
    headers = auth_headers(client, "cr-a")
    resp = _create(client, headers, semester="  ")
    assert resp.status_code == 201
    assert resp.json()["semester"] is None


def test_missing_title_is_rejected(client, seed_users):
    headers = auth_headers(client, "cr-a")
    resp = client.post("/api/content", data={"category": "note"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_invalid_category_is_rejected(client, seed_users):
    headers = auth_headers(client, "cr-a")
    resp = _create(client, headers, category="memo")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid category"


def test_title_length_limit(client, seed_users):
    headers = auth_headers(client, "cr-a")
    resp = _create(client, headers, title="x" * 201)
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_invalid_date_is_rejected(client, seed_users):
    headers = auth_headers(client, "cr-a")
    resp = _create(client, headers, due_date="not-a-date")
    assert resp.status_code == 400
    assert "due_date" in resp.json()["message"]


def test_duplicate_upload_flow(client, db, seed_users):
    headers = auth_headers(client, "cr-a")
    first = _create(client, headers, semester="SEM3")
    assert first.status_code == 201

    again = _create(client, headers, semester="SEM3")
    assert again.status_code == 409
    body = again.json()
    assert body["code"] == "DUPLICATE_UPLOAD"
    assert body["existing_id"] == first.json()["id"]

    forced = _create(client, headers, semester="SEM3", allow_duplicate="true")
    assert forced.status_code == 201
    assert forced.json()["id"] != first.json()["id"]

    forced_again = _create(client, headers, semester="SEM3", allow_duplicate="true")
    assert forced_again.status_code == 201
    assert db.query(Content).filter(Content.title == "Week 1 notes").count() == 3


def test_duplicate_check_distinguishes_semester_and_category(client, seed_users):
    headers = auth_headers(client, "cr-a")
    assert _create(client, headers).status_code == 201
    # NULL 학기는 특정 학기와 다른 범위다
    assert _create(client, headers, semester="SEM3").status_code == 201
    assert _create(client, headers, category="assignment").status_code == 201
    assert _create(client, headers).status_code == 409


def test_duplicate_check_is_per_division(client, seed_users):
    assert _create(client, auth_headers(client, "cr-a")).status_code == 201
    assert _create(client, auth_headers(client, "cr-b")).status_code == 201


def test_rejected_duplicate_leaves_no_blob(client, seed_users, upload_dir):
    headers = auth_headers(client, "cr-a")
    assert _create(client, headers, files={"file": PDF}).status_code == 201
    before = stored_files(upload_dir)

    resp = _create(client, headers, files={"file": PDF})
    assert resp.status_code == 409
    assert stored_files(upload_dir) == before


def test_get_content_respects_semester(client, seed_users):
    cr_headers = auth_headers(client, "cr-a")
    sem3 = _create(client, cr_headers, title="SEM3 only", semester="SEM3").json()
    sem5 = _create(client, cr_headers, title="SEM5 only", semester="SEM5").json()

    student = auth_headers(client, "stu-3")
    assert client.get(f"/api/content/{sem3['id']}", headers=student).status_code == 200
    resp = client.get(f"/api/content/{sem5['id']}", headers=student)
    assert resp.status_code == 403
    assert resp.json()["code"] == "FORBIDDEN"


def test_get_content_other_division_forbidden(client, seed_users):
    item = _create(client, auth_headers(client, "cr-a")).json()
    resp = client.get(f"/api/content/{item['id']}", headers=auth_headers(client, "stu-b"))
    assert resp.status_code == 403


def test_get_content_not_found(client, seed_users):
    resp = client.get("/api/content/999", headers=auth_headers(client, "admin"))
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"


def test_unique_constraint_reports_duplicate_and_discards_blob(db, seed_users, upload_dir, monkeypatch):
    cr = seed_users["cr"]
    existing = make_content(db, cr, title="Week 1 notes", category="note")

    real_find_duplicate = content_service.find_duplicate
    calls = []

    def find_duplicate_after_race(*args, **kwargs):
        # 첫 사전 검사 시점에는 아직 다른 요청의 행이 보이지 않았던 상황
        calls.append(args)
        if len(calls) == 1:
            return None
        return real_find_duplicate(*args, **kwargs)

    monkeypatch.setattr(content_service, "find_duplicate", find_duplicate_after_race)
    upload = StagedUpload(filename=PDF[0], content_type=PDF[2], data=PDF[1])

    with pytest.raises(DuplicateContent) as exc:
        content_service.create_content(
            db, ContentCreate(title="Week 1 notes", category="note"), cr, upload=upload
        )
    assert exc.value.existing_id == existing.id
    assert exc.value.extra == {"existing_id": existing.id}
    assert stored_files(upload_dir) == []
    db.expire_all()
    assert db.query(Content).count() == 1
