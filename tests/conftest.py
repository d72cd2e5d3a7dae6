from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from reviewhub.comments_main import app as comments_app
from reviewhub.db import Base, CommentsBase, enable_sqlite_foreign_keys, get_db
from reviewhub.main import app


def make_session(metadata=None):
    # Use in-memory SQLite with a single connection
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    enable_sqlite_foreign_keys(engine)
    if metadata is not None:
        metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
    return TestingSessionLocal()


def client_for(application, session):
    # Override dependency to use the same session
    def override_get_db():
        try:
            yield session
        finally:
            pass
    application.dependency_overrides[get_db] = override_get_db
    return TestClient(application)


@pytest.fixture(scope="function")
def db_session() -> Generator:
    db = make_session(Base.metadata)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def comments_session() -> Generator:
    db = make_session(CommentsBase.metadata)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def client(db_session):
    with client_for(app, db_session) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def comments_client(comments_session):
    with client_for(comments_app, comments_session) as c:
        yield c
    comments_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def bare_client():
    """Reviews app on a database with no tables yet."""
    db = make_session()
    with client_for(app, db) as c:
        yield c
    app.dependency_overrides.clear()
    db.close()


@pytest.fixture(scope="function")
def bare_comments_client():
    db = make_session()
    with client_for(comments_app, db) as c:
        yield c
    comments_app.dependency_overrides.clear()
    db.close()


def register(client, name, email, password="secret"):
    return client.post("/register", json={"name": name, "email": email, "password": password})


def login(client, email, password="secret"):
    return client.post("/login", json={"email": email, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_token(client):
    register(client, "Regular", "regular@example.com")
    return login(client, "regular@example.com").json()["token"]


@pytest.fixture
def admin_token(client):
    r = client.post("/crear-admin", json={"name": "Admin", "email": "admin@example.com", "password": "adminpass"})
    assert r.status_code == 201
    return login(client, "admin@example.com", "adminpass").json()["token"]
