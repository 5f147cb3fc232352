"""
Shared pytest fixtures.

The database URL must point at a throwaway SQLite file BEFORE the app is
imported, because app.config.settings reads the environment at import time.
"""

import os
import tempfile

TEST_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="taskmanager-tests-"), "test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient

from app.database import Base, SessionLocal, engine
from app.models import Comment, Project, Task, User, UserRole
from app.utils.permissions import Principal
from app.utils.security import create_access_token, hash_password
from main import app


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    """Create a user directly in the database"""
    counter = {"n": 0}

    def _make_user(email=None, role=UserRole.USER, password="Password123!"):
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            first_name="Test",
            last_name=f"User{counter['n']}",
            hashed_password=hash_password(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token({"sub": str(user.id), "email": user.email})
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def principal_for():
    def _principal_for(user):
        return Principal.from_user(user)

    return _principal_for


@pytest.fixture
def make_project(db):
    """Create a project with the given members directly in the database"""

    def _make_project(members, name="Test Project", **fields):
        project = Project(name=name, **fields)
        project.members = list(members)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    return _make_project


@pytest.fixture
def make_task(db):
    """Create a task directly in the database"""

    def _make_task(project, creator, title="Test Task", assignee=None, **fields):
        task = Task(
            title=title,
            project_id=project.id,
            creator_id=creator.id,
            assignee_id=assignee.id if assignee else None,
            **fields,
        )
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    return _make_task


@pytest.fixture
def make_comment(db):
    def _make_comment(task, user, content="Looks good"):
        comment = Comment(task_id=task.id, user_id=user.id, content=content)
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment

    return _make_comment
