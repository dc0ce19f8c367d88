import pytest
from fastapi.testclient import TestClient

from tests.fakes import FakeSupabase


class CurrentUser:
    """Mutable holder so a test can switch who is calling the API."""

    def __init__(self):
        self.id = None

    def as_user_data(self):
        return {"id": self.id, "phone": None, "user_metadata": {}}


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def current_user():
    return CurrentUser()


@pytest.fixture
def client(db, current_user, monkeypatch):
    from app.config import settings
    monkeypatch.setattr(settings, "cron_secret", "test-cron-secret")
    monkeypatch.setattr(settings, "default_timezone", "UTC")

    from app.main import app
    from app.core.dependencies import get_current_user_id
    from app.database.supabase_client import get_supabase, get_service_supabase

    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_current_user_id] = current_user.as_user_data

    yield TestClient(app)

    app.dependency_overrides = {}


@pytest.fixture
def alice(db, current_user):
    user_id = db.add_user(display_name="Alice", phone="+15550000001")
    current_user.id = user_id
    return user_id


@pytest.fixture
def bob(db):
    return db.add_user(display_name="Bob", phone="+15550000002")
