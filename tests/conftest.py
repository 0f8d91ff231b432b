"""Pytest bootstrap and shared fixtures."""

from pathlib import Path
import sys

# Ensure project root is on sys.path so `import skill_swap` works uninstalled
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skill_swap import models
from skill_swap.config import settings
from skill_swap.crud import credit as credit_crud
from skill_swap.crud import review as review_crud
from skill_swap.database import Base
from skill_swap.models.swap import SwapStatus


@pytest.fixture(autouse=True)
def no_outbound_email(monkeypatch):
    """Tests never talk to a real SMTP server."""
    monkeypatch.setattr(settings, "EMAIL_NOTIFICATIONS_ENABLED", False)


@pytest.fixture
def db_session():
    """In-memory database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def make_user(db_session):
    """Create a user with its reputation and credit balance."""
    counter = {"n": 0}

    def _make(name: str = None, email: str = None, credits: int = 0, **fields) -> models.User:
        counter["n"] += 1
        n = counter["n"]
        user = models.User(
            name=name or f"User {n}",
            email=email or f"user{n}@test.edu",
            password_hash="hash",
            role="member",
            **fields,
        )
        db_session.add(user)
        db_session.flush()
        review_crud.get_or_create_reputation(db_session, user.id)
        credit_crud.create_balance(db_session, user.id, initial_credits=credits)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_swap(db_session):
    """Insert a swap request directly in any state."""

    def _make(requester, receiver, status: str = SwapStatus.PENDING, duration: int = 60, **fields) -> models.SwapRequest:
        swap = models.SwapRequest(
            requester_id=requester.id,
            receiver_id=receiver.id,
            skill_offered=fields.pop("skill_offered", "Guitar"),
            skill_requested=fields.pop("skill_requested", "Spanish"),
            duration=duration,
            status=status,
            **fields,
        )
        db_session.add(swap)
        db_session.commit()
        db_session.refresh(swap)
        return swap

    return _make


@pytest.fixture
def auth_headers():
    from skill_swap.utils.security import create_access_token

    def _headers(user: models.User) -> dict:
        token = create_access_token(data={"sub": user.email, "role": user.role})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client(db_session):
    """TestClient bound to the test database (lifespan is not entered)."""
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    from skill_swap.database import get_db
    from skill_swap.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
