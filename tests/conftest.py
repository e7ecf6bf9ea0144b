import os
import sys
from datetime import timedelta
from pathlib import Path

# Deterministic environment, set before any app module imports read it.
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only-do-not-use")

import pytest  # noqa: E402

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models.base_model import utcnow  # noqa: E402
from models.db_storage import DBStorage  # noqa: E402
from models.user import Role, User  # noqa: E402
from services.auth_service import AuthSessionManager  # noqa: E402

TEST_CONFIG = {
    "JWT_SECRET": "test-secret-key-for-testing-only-do-not-use",
    "JWT_ISSUER": "hr-project-management-tests",
    "JWT_AUDIENCE": "hr-project-management-clients",
    "JWT_ALGORITHM": "HS256",
    "ACCESS_TOKEN_MINUTES": 60,
    "REFRESH_TOKEN_DAYS": 7,
    "PASSWORD_RESET_HOURS": 1,
    "EXPOSE_RESET_TOKEN": True,
}

PASSWORD = "Secret1!"


class FakeClock:
    """Naive-UTC clock the tests can move forward."""

    def __init__(self):
        self.now = utcnow()

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_reset_token(self, email, token, expires_at):
        self.sent.append((email, token, expires_at))


@pytest.fixture
def storage(tmp_path):
    db = DBStorage(f"sqlite:///{tmp_path / 'auth.db'}")
    db.reload()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def manager(storage, clock, notifier):
    return AuthSessionManager.from_config(storage, TEST_CONFIG, notifier=notifier, clock=clock)


@pytest.fixture
def user(storage, manager):
    """u1 with password Secret1!"""
    u = User(full_name="User One", email="u1@x.com", role=Role.EMPLOYEE, password_hash=manager.hasher.hash(PASSWORD))
    storage.new(u)
    storage.save()
    return u


@pytest.fixture
def app(tmp_path):
    from api import create_app
    from models import storage as app_storage

    app = create_app("testing", {"DATABASE_URL": f"sqlite:///{tmp_path / 'api.db'}"})
    yield app
    app_storage.drop_all()
    app_storage.dispose()


@pytest.fixture
def client(app):
    return app.test_client()
