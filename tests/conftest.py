import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from campusboard.config import settings
from campusboard.database import Base, get_db
from campusboard.main import app
from campusboard.models.content import Content
from campusboard.models.org import Department, Division
from campusboard.models.system_setting import SystemSetting
from campusboard.models.user import User

TEST_DB_URL = "sqlite:///./test_campusboard.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PDF = ("notes.pdf", b"%PDF-1.4 test", "application/pdf")


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    root = tmp_path / "uploads"
    root.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(root))
    return root


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_org(db):
    org = {
        "comp": Department(name="Computer Engineering"),
        "mech": Department(name="Mechanical Engineering"),
        "div_a": Division(name="A"),
        "div_b": Division(name="B"),
    }
    db.add_all(org.values())
    db.commit()
    for row in org.values():
        db.refresh(row)
    return org


@pytest.fixture
def seed_settings(db):
    row = SystemSetting(id=1, upload_max_size_mb=1)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def seed_users(db, seed_org, seed_settings):
    comp = seed_org["comp"].id
    div_a = seed_org["div_a"].id
    div_b = seed_org["div_b"].id
    users = {
        "admin": User(full_name="Admin", contact_number="admin", role="admin"),
        "cr": User(full_name="CR A", contact_number="cr-a", role="cr", department_id=comp, division_id=div_a),
        "cr2": User(full_name="CR A second", contact_number="cr-a2", role="cr", department_id=comp, division_id=div_a),
        "cr_b": User(full_name="CR B", contact_number="cr-b", role="cr", department_id=comp, division_id=div_b),
        "student": User(
            full_name="Student SEM3", contact_number="stu-3", role="student",
            department_id=comp, division_id=div_a, semester="SEM3",
        ),
        "student_b": User(
            full_name="Student B", contact_number="stu-b", role="student",
            department_id=comp, division_id=div_b, semester="SEM3",
        ),
        "pending": User(
            full_name="Pending CR", contact_number="pending", role="cr_pending",
            department_id=comp, division_id=div_a, semester="SEM4",
        ),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


def make_content(db, creator: User, **fields) -> Content:
    values = {
        "title": "Item",
        "category": "note",
        "department_id": creator.department_id,
        "division_id": creator.division_id,
        "created_by_id": creator.id,
    }
    values.update(fields)
    item = Content(**values)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def get_token(client, contact_number: str) -> str:
    resp = client.post("/api/auth/login", json={"contact_number": contact_number})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, contact_number: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, contact_number)}"}


def stored_files(root) -> list:
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())
