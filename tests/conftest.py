"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Each test gets its own user id, so rows never collide across tests.
"""
import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_reclaim.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from reclaim.db.base import Base, get_db
from reclaim.main import app
import reclaim.models  # noqa: F401

SQLITE_URL = "sqlite:///./test_reclaim.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def user_id() -> str:
    return f"user-{uuid.uuid4()}"


@pytest.fixture()
def headers(user_id) -> dict:
    return {"X-User-Id": user_id}


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
