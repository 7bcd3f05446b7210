"""Initialize the database - creates all tables and the settings row."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from campusboard.database import engine, Base, SessionLocal
import campusboard.models  # noqa: F401 - registers all models
from campusboard.services.settings_service import ensure_settings


def init_db():
    print("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_settings(db)
    finally:
        db.close()
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db()
