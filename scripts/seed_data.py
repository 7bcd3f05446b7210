"""Seed the database with sample departments, divisions, users and content."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import timedelta
from campusboard.database import SessionLocal, engine, Base
import campusboard.models  # noqa: F401

from campusboard.models.org import Department, Division
from campusboard.models.user import User
from campusboard.models.content import Content
from campusboard.services.settings_service import ensure_settings
from campusboard.utils.helpers import utcnow


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        ensure_settings(db)

        departments = [Department(name="Computer Engineering"), Department(name="Mechanical Engineering")]
        divisions = [Division(name="A"), Division(name="B")]
        db.add_all(departments + divisions)
        db.flush()

        comp, mech = departments
        div_a, div_b = divisions
        users = [
            User(full_name="Admin", contact_number="9000000001", role="admin"),
            User(full_name="CR Comp A", contact_number="9000000002", role="cr",
                 department_id=comp.id, division_id=div_a.id),
            User(full_name="CR Comp B", contact_number="9000000003", role="cr",
                 department_id=comp.id, division_id=div_b.id),
            User(full_name="Student Comp A Sem3", contact_number="9000000004", role="student",
                 department_id=comp.id, division_id=div_a.id, semester="SEM3"),
            User(full_name="Student Mech A Sem5", contact_number="9000000005", role="student",
                 department_id=mech.id, division_id=div_a.id, semester="SEM5"),
        ]
        db.add_all(users)
        db.flush()

        cr = users[1]
        now = utcnow()
        contents = [
            Content(title="Welcome back", category="notice", department_id=comp.id, division_id=div_a.id,
                    created_by_id=cr.id, is_pinned=True, pinned_at=now),
            Content(title="Unit 1 notes", category="note", department_id=comp.id, division_id=div_a.id,
                    semester="SEM3", created_by_id=cr.id),
            Content(title="Assignment 1", category="assignment", department_id=comp.id, division_id=div_a.id,
                    semester="SEM3", due_date=now + timedelta(days=7), created_by_id=cr.id),
            Content(title="Old timetable", category="notice", department_id=comp.id, division_id=div_a.id,
                    expires_at=now - timedelta(days=1), created_by_id=cr.id),
        ]
        db.add_all(contents)
        db.commit()
        print("Seed data inserted.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
