"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as using a SQLite test database (deselect with '-m \"not db\"')"
    )


@pytest.fixture(autouse=True)
def isolate_notification_env(monkeypatch):
    """Keep gateway credentials from the developer's shell out of tests."""
    for key in ('ONESIGNAL_APP_ID', 'ONESIGNAL_API_KEY', 'NOTIFICATION_DRY_RUN', 'NOTIFICATION_BATCH_SIZE', 'DATABASE_URL'):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def sqlite_db():
    from tests import SQLiteTestDatabase

    db = SQLiteTestDatabase()
    try:
        yield db
    finally:
        db.close()
