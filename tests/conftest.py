import os

# Must be set before anything imports obrador.config
os.environ["OBRADOR_DB_URL"] = "sqlite://"
os.environ.setdefault("OBRADOR_LOG_LEVEL", "WARNING")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from obrador.database import SessionLocal, drop_db, get_db_context, init_db
from obrador.main import app
from obrador.models import Role, User, UserSession, utcnow
from obrador.services.auth import AuthService

ROLES = {
    "admin": {"timesheets": {"submit": True, "read": True, "manage": True, "viewAll": True}},
    "supervisor": {"timesheets": {"submit": True, "read": True, "manage": True, "viewAll": True}},
    "operario": {"timesheets": {"submit": True}},
    "auditor": {"timesheets": {"read": True, "viewAll": True}},
    "lector": {"timesheets": {"viewAll": True}},
}

USERS = [
    # username, display name, roles
    ("ana", "Ana Diaz", ["operario"]),
    ("beto", "Beto Ruiz", ["operario"]),
    ("sara", "Sara Paz", ["supervisor"]),
    ("vera", "Vera Sol", ["lector"]),
    ("nadie", None, []),
]


@pytest.fixture
def db():
    """Fresh schema per test; yields a session."""
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_db()


@pytest.fixture
def users(db):
    """Seeded roles and users, keyed by username."""
    for name, permissions in ROLES.items():
        db.add(Role(name=name, permissions=permissions))
    created = {}
    for username, display_name, roles in USERS:
        user = User(username=username, display_name=display_name, roles=roles)
        db.add(user)
        created[username] = user
    db.commit()
    return created


@pytest.fixture
def principals(db, users):
    """Principals built the same way the request boundary builds them."""
    auth = AuthService(db)
    return {username: auth.build_principal(user) for username, user in users.items()}


@pytest.fixture
def tokens(db, users):
    """One active session token per seeded user."""
    issued = {}
    for username, user in users.items():
        token = f"token-{username}"
        db.add(UserSession(
            user_id=user.user_id,
            session_token=token,
            expires_at=utcnow() + timedelta(hours=8),
        ))
        issued[username] = token
    db.commit()
    db.close()
    return issued


@pytest.fixture
def client(tokens):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def as_user(tokens):
    """Header factory: as_user("ana") -> bearer headers for ana."""
    return lambda username: auth_headers(tokens[username])


@pytest.fixture
def raw_session(db):
    """Independent session for arranging rows inside API tests."""
    with get_db_context() as session:
        yield session
