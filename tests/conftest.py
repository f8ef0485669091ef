"""
Shared fixtures: an in-memory database per test, and a TestClient whose
requests use it instead of the configured DATABASE_URL.
"""

from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

import models  # noqa: F401
from db import get_session, make_engine
from main import app


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def get_test_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_test_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client) -> Callable[..., dict]:
    """Sign up through the API and return the created user."""
    counter = {"n": 0}

    def _make_user(role: str = "receiver", **overrides) -> dict:
        counter["n"] += 1
        payload = {
            "email": f"user{counter['n']}@example.com",
            "password": "s3cret-pass",
            "display_name": f"User {counter['n']}",
            "zip_code": "73102",
            "role": role,
        }
        payload.update(overrides)
        response = client.post("/api/signup", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _make_user


@pytest.fixture
def make_listing(client) -> Callable[..., dict]:
    def _make_listing(user_id: int, **overrides) -> dict:
        payload = {
            "user_id": user_id,
            "title": "Fresh bread",
            "description": "Two loaves of sourdough from this morning",
            "pickup_location": "Main St Bakery",
        }
        payload.update(overrides)
        response = client.post("/api/listings", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["listing"]

    return _make_listing
