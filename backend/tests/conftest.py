"""
pytest configuration for the habitclub backend.

Pins the settings the tests depend on before the application is imported,
and swaps the Supabase client for an in-memory fake.
"""
import os
import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parent.parent
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

os.environ["APP_TIMEZONE"] = "America/Los_Angeles"
os.environ["STREAK_POLICY"] = "calendar_day"
os.environ["FEED_TIME_FORMAT"] = "%I:%M:%S %p"
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")

import pytest  # noqa: E402

from habitclub.core import dependencies  # noqa: E402
from tests.fake_supabase import FakeSupabase  # noqa: E402


@pytest.fixture
def fake_db(monkeypatch):
    """Route every repository call to a fresh in-memory database"""
    fake = FakeSupabase()
    monkeypatch.setattr(dependencies, "get_supabase_client", lambda: fake)
    return fake


@pytest.fixture
def client(fake_db):
    """FastAPI test client authenticated as 'user-1'"""
    from fastapi.testclient import TestClient
    from main import app

    app.dependency_overrides[dependencies.get_current_user_id] = lambda: "user-1"
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
