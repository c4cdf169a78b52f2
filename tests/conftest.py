import os

os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from app.core.rate_limit import limiter
from app.core.session import session_registry
from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.realtime.feed import get_change_feed
from tests.fakes import FakeChangeFeed, FakeSupabase

PASSWORD = "secret123"


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def feed():
    return FakeChangeFeed()


@pytest.fixture
def client(db, feed):
    limiter.enabled = False
    session_registry.clear()
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_change_feed] = lambda: feed
    yield TestClient(app)
    app.dependency_overrides.clear()
    session_registry.clear()


class Accounts:
    """Registers users through the API and keeps their tokens."""

    def __init__(self, client: TestClient):
        self.client = client
        self.tokens = {}
        self.ids = {}

    def create(self, name: str, role: str, first_name: str = None, last_name: str = None) -> dict:
        email = f"{name}@example.com"
        response = self.client.post("/api/v1/auth/register", json={
            "email": email,
            "password": PASSWORD,
            "role": role,
            "first_name": first_name or name.capitalize(),
            "last_name": last_name or "Tester"
        })
        assert response.status_code == 201, response.text
        login = self.client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
        assert login.status_code == 200, login.text
        self.tokens[name] = login.json()["access_token"]
        self.ids[name] = login.json()["user_id"]
        # keep the client anonymous; each call passes its own header
        self.client.cookies.clear()
        return self.headers(name)

    def headers(self, name: str) -> dict:
        return {"Authorization": f"Bearer {self.tokens[name]}"}


@pytest.fixture
def accounts(client):
    return Accounts(client)


@pytest.fixture
def classroom(client, accounts):
    """A classroom owned by teacher 'tina' with student 'sam' and parent 'pat' enrolled"""
    teacher = accounts.create("tina", "teacher")
    student = accounts.create("sam", "student")
    parent = accounts.create("pat", "parent")
    created = client.post("/api/v1/classrooms", json={"name": "Grade 5 Math", "subject": "Math"}, headers=teacher)
    assert created.status_code == 201, created.text
    code = created.json()["classroom_code"]
    for headers in (student, parent):
        joined = client.post("/api/v1/classrooms/join", json={"classroom_code": code}, headers=headers)
        assert joined.status_code == 201, joined.text
    return created.json()
