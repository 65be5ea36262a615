import os

# Settings read the environment at import time.
os.environ.setdefault("JWT_SECRET", "test-signing-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from chirpy.db.session import get_session
from chirpy.db.store import SQLStore
from chirpy.main import app


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine: Engine) -> Iterator[SQLStore]:
    with Session(engine) as session:
        yield SQLStore(session)


@pytest.fixture
def client(engine: Engine) -> Iterator[TestClient]:
    def get_test_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_test_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def register_and_login(client: TestClient):
    def _register_and_login(email: str = "a@example.com", password: str = "pw123") -> dict:
        create_response = client.post("/api/users", json={"email": email, "password": password})
        assert create_response.status_code == 201

        login_response = client.post("/api/login", json={"email": email, "password": password})
        assert login_response.status_code == 200
        return login_response.json()

    return _register_and_login
