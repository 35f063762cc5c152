"""Pytest configuration and fixtures."""

import re
from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.exceptions import MailDeliveryError
from app.models.chat_board import ChatBoard  # noqa: F401
from app.models.user import User  # noqa: F401
from app.services import mailer as mailer_module

TOKEN_LINK = re.compile(r"/(?:verify-email|reset-password)/([0-9a-f]+)")


@dataclass
class SentEmail:
    email: str
    subject: str
    text: str

    @property
    def token(self) -> str:
        match = TOKEN_LINK.search(self.text)
        assert match, f"no token link in: {self.text}"
        return match.group(1)


@dataclass
class RecordingMailer:
    """Stands in for the mail transport and keeps every message."""

    sent: list[SentEmail] = field(default_factory=list)
    fail: bool = False

    def send_email(self, email: str, subject: str, text: str) -> None:
        if self.fail:
            raise MailDeliveryError()
        self.sent.append(SentEmail(email=email, subject=subject, text=text))

    @property
    def last(self) -> SentEmail:
        assert self.sent, "no email was sent"
        return self.sent[-1]


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="outbox")
def outbox_fixture(monkeypatch) -> RecordingMailer:
    """Replace the mailer singleton with a recording one."""
    recorder = RecordingMailer()
    monkeypatch.setattr(mailer_module, "_mailer", recorder)
    return recorder


@pytest.fixture(name="client")
def client_fixture(db_session: Session, outbox: RecordingMailer):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, outbox: RecordingMailer):
    """Register a user through the service and return its credentials."""
    from app.services.auth import AuthService

    user = AuthService().register(db_session, "test@example.com", "tester", "password123", "password123")
    return {
        "user_id": user.id,
        "email": user.email,
        "username": user.username,
        "password": "password123",
        "verification_token": outbox.last.token,
    }


@pytest.fixture(name="logged_in")
def logged_in_fixture(client: TestClient, test_user: dict):
    """Log the test user in and return the login response data."""
    response = client.post(
        "/api/v1/auth/login",
        json={"userData": {"email": test_user["email"], "password": test_user["password"]}},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    return {
        "access_token": data["accessToken"],
        "refresh_token": _cookie_value(response, "refreshToken"),
        "headers": {"Authorization": f"Bearer {data['accessToken']}"},
    }


def _cookie_value(response, name: str) -> str:
    for header in response.headers.get_list("set-cookie"):
        if header.startswith(f"{name}="):
            return header.split(";", 1)[0].split("=", 1)[1]
    raise AssertionError(f"cookie {name} not set")


@pytest.fixture(name="cookie_value")
def cookie_value_fixture():
    """Read a cookie value straight from the Set-Cookie headers."""
    return _cookie_value
