"""Test configuration and fixtures."""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  (registers mappers)
from app.database import Base, enable_sqlite_pragmas, get_db
from app.main import app as fastapi_app
from app.models import Feedback, Teacher, User
from app.services.auth_service import create_access_token, hash_password


@pytest.fixture
def engine():
    """One in-memory SQLite database shared by every connection in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_pragmas(engine, wal=False)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create an in-memory SQLite database for tests."""
    Session = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    """TestClient whose requests use the test database (lifespan not run)."""
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(fastapi_app)
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory: ``make_user(role)`` -> ``(user, auth_headers)``."""
    counter = {"n": 0}

    def _make(role: str = "student", name: str | None = None, email: str | None = None):
        counter["n"] += 1
        n = counter["n"]
        email = email or f"{role}{n}@example.edu"
        user = User(
            name=name or f"{role.title()} {n}",
            email=email,
            username=email.split("@")[0],
            password_hash=hash_password("secret123"),
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        headers = {"Authorization": f"Bearer {create_access_token(user)}"}
        return user, headers

    return _make


@pytest.fixture
def make_teacher(db_session):
    def _make(name: str = "Pratik Singh", department: str = "Computer Science", subject: str = "DSA"):
        teacher = Teacher(name=name, department=department, subject=subject)
        db_session.add(teacher)
        db_session.commit()
        db_session.refresh(teacher)
        return teacher

    return _make


@pytest.fixture
def add_feedback(db_session):
    """Insert a feedback row directly (bypasses validation and aggregates)."""
    def _add(teacher: Teacher, student: User, rating: int, comment: str | None = None,
             created_at: datetime | None = None, channel: str = "account"):
        fb = Feedback(
            teacher_id=teacher.id,
            student_id=student.id,
            student_name=student.name,
            rating=rating,
            comment=comment,
            subject=teacher.subject,
            channel=channel,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db_session.add(fb)
        db_session.commit()
        db_session.refresh(fb)
        return fb

    return _add
