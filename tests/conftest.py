"""
Pytest configuration and fixtures for all tests.
"""

import os

# Settings are read once at import time, so the environment comes first
os.environ.update(
    {
        "ENVIRONMENT": "testing",
        "DATABASE_URL": "sqlite://",
        "SECRET_KEY": "test-secret-key-not-for-production",
        "BCRYPT_ROUNDS": "4",
        "RATE_LIMIT_ENABLED": "false",
        "LOG_TO_FILE": "false",
        "REDIS_ENABLED": "false",
        "TOKEN_REVOCATION_ENABLED": "false",
        "SENTRY_DSN": "",
        "GEMINI_API_KEY": "",
    }
)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from upskillnow.core.config import settings  # noqa: E402
from upskillnow.core.security import create_access_token  # noqa: E402
from upskillnow.main import create_app  # noqa: E402
from upskillnow.models import UserRole  # noqa: E402
from upskillnow.services.auth import AuthService  # noqa: E402
from upskillnow.services.cloudinary import get_storage  # noqa: E402

PASSWORD = "correct-horse-battery"


class FakeStorage:
    """Stands in for Cloudinary and records what it was asked to do"""

    def __init__(self):
        self.uploads = []
        self.deleted_folders = []

    def upload_profile_image(self, file, user_id):
        self.uploads.append((user_id, file.read()))
        return f"https://res.cloudinary.test/students/{user_id}/profile.png"

    def delete_student_folder(self, user_id):
        self.deleted_folders.append(user_id)
        return True

    def delete_student_folders(self, user_ids):
        return sum(1 for user_id in user_ids if self.delete_student_folder(user_id))


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def app(storage):
    """A fresh application with its own in-memory database"""
    application = create_app(database_url="sqlite://")
    application.dependency_overrides[get_storage] = lambda: storage
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(client):
    session = client.app.state.database.session()
    try:
        yield session
    finally:
        session.close()


def make_user(db, email, role=UserRole.STUDENT, name="Test User", password=PASSWORD, **profile):
    return AuthService.create_user(
        db, name=name, email=email, password=password, role=role, **profile
    )


@pytest.fixture
def student(db):
    return make_user(db, "student@example.com", name="Sam Student", gender="female")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", role=UserRole.ADMIN, name="Ada Admin")


def sign_in(client, user):
    """Put a session cookie for user on the client"""
    client.cookies.clear()
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_access_token(user))
    return client


@pytest.fixture
def student_client(client, student):
    return sign_in(client, student)


@pytest.fixture
def admin_client(client, admin):
    return sign_in(client, admin)
