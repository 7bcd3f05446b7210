import pytest

from campusboard.errors import FileTooLarge, InvalidFileType
from campusboard.models.content import Content
from campusboard.models.system_setting import SystemSetting
from campusboard.services.upload_policy import MB, UploadPolicy, enforce_upload_policy
from tests.conftest import PDF, auth_headers, stored_files

TEXT = ("readme.txt", b"plain text", "text/plain")


def test_policy_from_settings_row():
    row = SystemSetting(upload_max_size_mb=5, upload_allowed_mime_types=" application/pdf , image/png,,")
    policy = UploadPolicy.from_settings(row)
    assert policy.max_bytes == 5 * MB
    assert policy.max_size_mb == 5
    assert policy.allowed_types == frozenset({"application/pdf", "image/png"})


def test_policy_limit_is_at_least_one_megabyte():
    row = SystemSetting(upload_max_size_mb=-3, upload_allowed_mime_types="")
    assert UploadPolicy.from_settings(row).max_bytes == MB


def test_type_is_checked_before_size():
    policy = UploadPolicy(max_bytes=MB, allowed_types=frozenset({"application/pdf"}))
    with pytest.raises(InvalidFileType) as exc:
        enforce_upload_policy(policy, "text/plain", 10 * MB)
    assert exc.value.extra["allowed_mime_types"] == ["application/pdf"]


def test_size_limit_is_inclusive():
    policy = UploadPolicy(max_bytes=MB, allowed_types=frozenset({"application/pdf"}))
    enforce_upload_policy(policy, "application/pdf", MB)
    with pytest.raises(FileTooLarge) as exc:
        enforce_upload_policy(policy, "application/pdf", MB + 1)
    assert exc.value.extra["max_size_mb"] == 1


def test_empty_allow_list_accepts_any_type():
    enforce_upload_policy(UploadPolicy(max_bytes=MB), "application/x-anything", 10)


def test_too_large_upload_leaves_nothing_behind(client, db, seed_users, upload_dir):
    big = ("big.pdf", b"x" * (MB + 1), "application/pdf")
    resp = client.post(
        "/api/content",
        data={"title": "Big", "category": "note"},
        files={"file": big},
        headers=auth_headers(client, "cr-a"),
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "FILE_TOO_LARGE"
    assert resp.json()["max_size_mb"] == 1
    assert db.query(Content).count() == 0
    assert stored_files(upload_dir) == []


def test_invalid_type_rejected_on_create(client, db, seed_users, upload_dir):
    resp = client.post(
        "/api/content",
        data={"title": "Readme", "category": "note"},
        files={"file": TEXT},
        headers=auth_headers(client, "cr-a"),
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "INVALID_FILE_TYPE"
    assert "application/pdf" in body["allowed_mime_types"]
    assert db.query(Content).count() == 0
    assert stored_files(upload_dir) == []


def test_rejected_replacement_keeps_item_unchanged(client, db, seed_users, upload_dir):
    headers = auth_headers(client, "cr-a")
    item = client.post(
        "/api/content", data={"title": "Keep", "category": "note"}, files={"file": PDF}, headers=headers
    ).json()

    resp = client.put(
        f"/api/content/{item['id']}", data={"title": "Changed"}, files={"file": TEXT}, headers=headers
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_FILE_TYPE"

    current = client.get(f"/api/content/{item['id']}", headers=headers).json()
    assert current["title"] == "Keep"
    assert current["file_path"] == item["file_path"]
    assert client.get(f"/api/content/{item['id']}/versions", headers=headers).json() == []
    assert stored_files(upload_dir) == [item["file_path"]]


def test_empty_allowed_list_setting_accepts_any_type(client, db, seed_users, seed_settings):
    seed_settings.upload_allowed_mime_types = ""
    db.commit()

    resp = client.post(
        "/api/content",
        data={"title": "Readme", "category": "note"},
        files={"file": TEXT},
        headers=auth_headers(client, "cr-a"),
    )
    assert resp.status_code == 201
    assert resp.json()["file_path"].endswith(".txt")
