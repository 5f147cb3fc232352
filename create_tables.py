# create_tables.py
import os

from app.database import Base, engine, SessionLocal
from app.models import User, UserRole, Project, Task, Comment  # noqa: F401 - registers tables
from app.utils.security import hash_password

DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin12345")


def create_tables(drop_existing: bool = True):
    """Create all tables (dropping existing ones first)"""
    try:
        if drop_existing:
            Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        print("✅ All tables created successfully!")

        create_default_admin()

    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise


def create_default_admin():
    """Create a default admin user"""
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == DEFAULT_ADMIN_EMAIL).first():
            print(f"ℹ️ Admin user already exists: {DEFAULT_ADMIN_EMAIL}")
            return

        db.add(User(
            email=DEFAULT_ADMIN_EMAIL,
            first_name="System",
            last_name="Admin",
            hashed_password=hash_password(DEFAULT_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        ))
        db.commit()
        print(f"✅ Default admin user created: {DEFAULT_ADMIN_EMAIL}")
    finally:
        db.close()


if __name__ == "__main__":
    create_tables(drop_existing=os.getenv("KEEP_EXISTING_TABLES", "false").lower() != "true")
