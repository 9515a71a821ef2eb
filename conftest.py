import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.main import app
from app.models import Base, Class, Exam, Student, Subject
from app.services.auth import ensure_admin

ADMIN_PASSWORD = "correct-horse"

engine = create_engine(
    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_headers(client, db):
    ensure_admin(db, "admin", ADMIN_PASSWORD)
    response = client.post(
        "/api/v1/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def class_10a(db):
    cls = Class(name="10A")
    cls.subjects = [Subject(name="Math", position=0), Subject(name="Science", position=1)]
    db.add(cls)
    db.commit()
    db.refresh(cls)
    return cls


@pytest.fixture()
def student_1001(db, class_10a):
    student = Student(id=1001, name="Asha Verma", dob=date(2010, 5, 1), class_id=class_10a.id)
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


@pytest.fixture()
def midterm(db, class_10a):
    exam = Exam(name="Midterm", date=date(2024, 3, 15), class_id=class_10a.id, is_published=True)
    db.add(exam)
    db.commit()
    db.refresh(exam)
    return exam


def subject_named(cls, name):
    return next(s for s in cls.subjects if s.name == name)
