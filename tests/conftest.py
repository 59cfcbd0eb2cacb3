"""
Shared fixtures: in-memory SQLite, a fake auth provider and a fake email
transport, so the whole review workflow runs without network access.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import uuid

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.app_config import JWT_SECRET, JWT_ALGORITHM
from core.email_client import EmailDeliveryError, get_email_client
from core.identity_provider import Identity, IdentityProviderError, get_identity_provider
from database.config import get_db
from database.models import Base, DesignerApplication, ApplicationStatus, Profile, ProfileRole
from services.application_service import ApplicationReviewService
from services.notification_service import NotificationService


class FakeIdentityProvider:
    """In-memory stand-in for the auth provider admin API."""

    def __init__(self):
        self.users = {}
        self.calls = []
        self.fail_create = False
        self.fail_list = False
        self.fail_link = False

    def add_user(self, email):
        identity = Identity(id=str(uuid.uuid4()), email=email)
        self.users[identity.id] = identity
        return identity

    def find_user_by_email(self, email):
        self.calls.append(("list", email))
        if self.fail_list:
            raise IdentityProviderError("list failed")
        for identity in self.users.values():
            if identity.email.lower() == email.lower():
                return identity
        return None

    def create_user(self, email, password, user_metadata=None):
        self.calls.append(("create", email))
        if self.fail_create:
            raise IdentityProviderError("create failed")
        identity = self.add_user(email)
        identity.password = password
        identity.user_metadata = user_metadata
        return identity

    def generate_recovery_link(self, email, redirect_to):
        self.calls.append(("link", email))
        if self.fail_link:
            raise IdentityProviderError("link failed")
        return f"https://auth.example.com/verify?type=recovery&email={email}&redirect_to={redirect_to}"


class FakeEmailClient:

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, to, subject, html, text=None, reply_to=None):
        if self.fail:
            raise EmailDeliveryError("smtp down")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": f"msg_{len(self.sent)}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def email_client():
    return FakeEmailClient()


@pytest.fixture
def review_service(db_session, identity_provider, email_client):
    return ApplicationReviewService(
        db_session,
        identity_provider=identity_provider,
        notifier=NotificationService(email_client, site_url="https://oma-hub.com"),
    )


@pytest.fixture
def make_application(db_session):
    def _make(**overrides):
        fields = {
            "brand_name": "Aso Oke Co",
            "designer_name": "Ada Designer",
            "email": "d@x.com",
            "location": "Lagos",
            "category": "Bridal",
            "description": "Handwoven aso oke pieces",
            "status": ApplicationStatus.NEW,
        }
        fields.update(overrides)
        application = DesignerApplication(**fields)
        db_session.add(application)
        db_session.commit()
        db_session.refresh(application)
        return application
    return _make


@pytest.fixture
def make_profile(db_session):
    def _make(role=ProfileRole.USER, email=None, owned_brands=None, profile_id=None):
        profile = Profile(
            id=profile_id or str(uuid.uuid4()),
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            role=role,
            owned_brands=owned_brands or [],
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile
    return _make


def make_token(profile):
    return jwt.encode({"sub": profile.id, "email": profile.email}, JWT_SECRET, algorithm=JWT_ALGORITHM)


@pytest.fixture
def client(db_session, identity_provider, email_client):
    from server import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_email_client] = lambda: email_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides = {}


@pytest.fixture
def admin_headers(make_profile):
    admin = make_profile(role=ProfileRole.SUPER_ADMIN, email="admin@oma-hub.com")
    return {"Authorization": f"Bearer {make_token(admin)}"}
