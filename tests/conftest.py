import os
import tempfile

import pytest

# Settings are read at import time; keep them away from /app/data
os.environ.setdefault("SQLITE_DB_PATH", os.path.join(tempfile.gettempdir(), "usage_service_test.db"))
os.environ.setdefault("DEFAULT_TIMEZONE", "UTC")

from fastapi.testclient import TestClient  # noqa: E402

from app.db import sqlite  # noqa: E402
from app.main import app  # noqa: E402
from app.services.api_key_service import create_api_key  # noqa: E402


@pytest.fixture(autouse=True)
def db(tmp_path, monkeypatch):
    """Fresh SQLite database for every test."""
    monkeypatch.setattr(sqlite, "DB_PATH", str(tmp_path / "usage.db"))
    sqlite.init_db()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def api_key():
    """An active key: dict with 'key' (plaintext) and 'key_id'."""
    return create_api_key(name="test-key")
