from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.auth.verify import auth_dependency
from app.db.json_store import JsonStore
from app.models.domain.ambassador_domain import ContactSubmission, User
from app.routes import contacts, health, leaderboard, protected, users

DEFAULT_SETTINGS = {
    "allowed_email_domain": "kprit.edu.in",
    "credits_per_approval": "1",
    "max_pending_contacts_per_user": "10",
}


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "database" / "data.json"


@pytest.fixture
def store(store_path):
    return JsonStore(store_path, DEFAULT_SETTINGS).open()


@pytest.fixture
def add_user(store):
    """Insert a user record directly, bypassing registration."""
    base = datetime(2025, 1, 1, tzinfo=UTC)

    def _add(
        user_id: str,
        *,
        name: str | None = None,
        role: str = "ambassador",
        credits: int = 0,
        offset_minutes: int | None = None,
    ) -> User:
        minutes = len(store.users) if offset_minutes is None else offset_minutes
        created = base + timedelta(minutes=minutes)
        user = User(
            id=user_id,
            email=f"{user_id}@kprit.edu.in",
            name=name or user_id,
            role=role,
            credits=credits,
            created_at=created,
            updated_at=created,
        )
        store.users.append(user)
        return user

    return _add


@pytest.fixture
def submission():
    def _make(name: str = "Sarah Johnson", company: str = "TechCorp", **kwargs) -> ContactSubmission:
        return ContactSubmission(name=name, company=company, **kwargs)

    return _make


@pytest.fixture
def client_for(store):
    """Build a TestClient whose caller is identified by the given claims."""

    def _client(sub: str, email: str, name: str | None = None) -> TestClient:
        app = FastAPI()
        app.state.store = store
        app.include_router(health.router)
        app.include_router(protected.router)
        app.include_router(users.router)
        app.include_router(contacts.router)
        app.include_router(leaderboard.router)

        claims = {"sub": sub, "email": email}
        if name:
            claims["name"] = name
        app.dependency_overrides[auth_dependency] = lambda: claims
        return TestClient(app)

    return _client
