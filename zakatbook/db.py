"""SQLite database connection management for persisted state."""
import os
import sqlite3
from flask import current_app, g

from zakatbook.services.state import StateStore


def get_db_path() -> str:
    """Get the path to the SQLite database file."""
    data_dir = current_app.config['DATA_DIR']
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, 'zakatbook.sqlite')


def get_db() -> sqlite3.Connection:
    """Get a database connection, creating one if needed for this request."""
    if 'db' not in g:
        g.db = sqlite3.connect(get_db_path())
        g.db.row_factory = sqlite3.Row
    return g.db


def get_store() -> StateStore:
    """State store bound to this request's connection."""
    return StateStore(get_db())


def close_db(e=None):
    """Close the database connection at end of request."""
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db():
    """Initialize the database with schema."""
    db = get_db()
    db.executescript(get_schema())
    db.commit()


def get_schema() -> str:
    """Return the database schema SQL."""
    return '''
-- Persisted state: one JSON blob per key, always overwritten wholesale.
--   last_obligation, currency_preferences, ledger:<name>
CREATE TABLE IF NOT EXISTS state (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);
'''


def init_app(app):
    """Register database functions with Flask app and ensure database exists."""
    app.teardown_appcontext(close_db)

    with app.app_context():
        init_db()
