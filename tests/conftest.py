import os

# settings are read at import time, so these must be set before app is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./techteam_test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

PASSWORD = "Secret123!"


@pytest.fixture()
def engine(tmp_path):
    from app import model  # noqa: F401
    from app.database.base_class import Base

    eng = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def client(session_factory):
    from app.database import get_db
    from app.main import app

    def _override_get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, username, role, school_id=None, points=0, **names):
    from app.router.api.logics.user_logic import create_user, update_user
    from app.schema.user_schema import UserCreate

    user = create_user(
        db,
        UserCreate(username=username, email=f"{username}@hogwarts.edu", password=PASSWORD, **names),
        role=role,
        school_id=school_id,
    )
    if points:
        user = update_user(db, user, {"points": points})
    return user


def make_school(db, name="Hogwarts"):
    from app.router.api.logics.school_logic import create_school
    from app.schema.school_schema import SchoolCreate

    return create_school(db, SchoolCreate(name=name, address="Scotland, UK"))


def login(client, username, password=PASSWORD):
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    # tests authenticate with the bearer header; the cookie would take precedence
    client.cookies.clear()
    return r.json()["accessToken"]


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def school(db):
    return make_school(db)


@pytest.fixture()
def other_school(db):
    return make_school(db, "Durmstrang")


@pytest.fixture()
def super_admin(db):
    from app.model.enums import UserRole
    return make_user(db, "superadmin", UserRole.super_admin)


@pytest.fixture()
def admin(db, school):
    from app.model.enums import UserRole
    return make_user(db, "minerva", UserRole.admin, school.id, first_name="Minerva", last_name="McGonagall")


@pytest.fixture()
def student(db, school):
    from app.model.enums import UserRole
    return make_user(db, "jane.smith", UserRole.student, school.id, first_name="Jane", last_name="Smith")


@pytest.fixture()
def other_admin(db, other_school):
    from app.model.enums import UserRole
    return make_user(db, "igor", UserRole.admin, other_school.id)


@pytest.fixture()
def super_admin_token(client, super_admin):
    return login(client, super_admin.username)


@pytest.fixture()
def admin_token(client, admin):
    return login(client, admin.username)


@pytest.fixture()
def student_token(client, student):
    return login(client, student.username)


@pytest.fixture()
def other_admin_token(client, other_admin):
    return login(client, other_admin.username)
