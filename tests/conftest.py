"""Pytest fixtures for zakatbook tests."""
import sqlite3
from datetime import datetime, timezone

import pytest

from zakatbook import create_app
from zakatbook.db import get_schema
from zakatbook.services import price_hint
from zakatbook.services.state import StateStore
from zakatbook.services.time_provider import TimeProvider


# Fixed "now" for deterministic tests - 2026-03-01 is 12 Ramadan 1447
FROZEN_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep tests off the network and give each test a fresh price cell."""
    monkeypatch.setenv('PRICE_HINT_ALLOW_NETWORK', '0')
    for name in ('PRICE_HINT_BACKGROUND', 'PRICE_HINT_INTERVAL_SECONDS', 'PRICE_HINT_USER_AGENT', 'LEDGER_NAME'):
        monkeypatch.delenv(name, raising=False)
    price_hint.reset_price_hint_cell()
    yield
    price_hint.reset_price_hint_cell()


@pytest.fixture
def app(tmp_path):
    """Create application for testing.

    Yields:
        Flask application with its SQLite state in a temp directory.
    """
    app = create_app({
        'TESTING': True,
        'DATA_DIR': str(tmp_path),
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client.

    Yields:
        Flask test client for making requests.
    """
    with app.test_client() as client:
        yield client


@pytest.fixture
def runner(app):
    """Click runner for the Flask CLI."""
    return app.test_cli_runner()


@pytest.fixture
def store():
    """State store over an in-memory database."""
    conn = sqlite3.connect(':memory:')
    conn.executescript(get_schema())
    yield StateStore(conn)
    conn.close()


@pytest.fixture
def frozen_time():
    """Freeze time to FROZEN_NOW (2026-03-01 12:00 UTC).

    Yields the TimeProvider. Automatically resets the default provider
    after the test completes.
    """
    provider = TimeProvider(frozen_at=FROZEN_NOW)
    TimeProvider.set_default(provider)
    yield provider
    TimeProvider.reset_default()
