import os

# Settings are read at import time; give the app a throwaway secret and database.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from library_portal.database import Base, get_db
from library_portal.main import app
from library_portal.models import Book, Profile
from library_portal.services.auth import create_access_token, hash_password


@pytest.fixture(scope="session")
def engine():
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    tx = connection.begin()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=connection
    )
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        tx.rollback()
        connection.close()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_profile(db_session, email, role="student", name=None, password="password123"):
    profile = Profile(
        email=email,
        name=name or email.split("@")[0].title(),
        role=role,
        password_hash=hash_password(password),
    )
    db_session.add(profile)
    db_session.flush()
    return profile


def make_book(db_session, title="Dune", isbn="9780441013593", copies=2, genre="Science Fiction", **fields):
    book = Book(
        title=title,
        author=fields.pop("author", "Frank Herbert"),
        isbn=isbn,
        genre=genre,
        total_copies=copies,
        available_copies=fields.pop("available_copies", copies),
        status=fields.pop("status", "available"),
        **fields,
    )
    db_session.add(book)
    db_session.flush()
    return book


def auth_headers(profile):
    token = create_access_token(profile.profile_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def student(db_session):
    return make_profile(db_session, "student@example.com")


@pytest.fixture()
def librarian(db_session):
    return make_profile(db_session, "librarian@example.com", role="librarian", name="Libby")


@pytest.fixture()
def book(db_session):
    return make_book(db_session)
