"""Key/value JSON state store on top of SQLite.

Every value is a whole blob: writers always replace it, never merge.
"""
import json
import logging
import sqlite3

from zakatbook.constants import (
    CURRENCY_PREFERENCES_KEY,
    LAST_OBLIGATION_KEY,
    REFERENCE_CURRENCY,
)
from zakatbook.data.currencies import is_valid_currency

logger = logging.getLogger('state')


class StateStore:
    """Persisted state backed by the ``state`` table."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def get(self, key: str, default=None):
        """Read a value, returning ``default`` if missing or unreadable."""
        row = self._conn.execute('SELECT value FROM state WHERE key = ?', (key,)).fetchone()
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Discarding unreadable state for key {key!r}")
            return default

    def put(self, key: str, value) -> None:
        """Overwrite a value wholesale."""
        self._conn.execute(
            "INSERT OR REPLACE INTO state (key, value, updated_at) VALUES (?, ?, datetime('now'))",
            (key, json.dumps(value)),
        )
        self._conn.commit()

    def delete(self, key: str) -> None:
        self._conn.execute('DELETE FROM state WHERE key = ?', (key,))
        self._conn.commit()


def save_last_obligation(store: StateStore, result) -> dict:
    """Persist the due amount of an ObligationResult for the ledger."""
    record = {
        'amount_usd': round(result.due_amount_usd, 2),
        'display_currency': result.display_currency,
        'amount_display': round(result.due_amount_display, 2),
    }
    store.put(LAST_OBLIGATION_KEY, record)
    return record


def load_last_obligation(store: StateStore) -> dict:
    """Load the last computed obligation (zero in USD if none yet)."""
    data = store.get(LAST_OBLIGATION_KEY) or {}
    return {
        'amount_usd': float(data.get('amount_usd') or 0.0),
        'display_currency': data.get('display_currency') or REFERENCE_CURRENCY,
        'amount_display': float(data.get('amount_display') or 0.0),
    }


def save_currency_preferences(store: StateStore, gold_currency: str, silver_currency: str,
                              display_currency: str) -> dict:
    """Overwrite the saved currency preferences.

    Raises:
        ValueError: If any code is not in the currency table
    """
    prefs = {
        'gold_currency': gold_currency,
        'silver_currency': silver_currency,
        'display_currency': display_currency,
    }
    for field_name, code in prefs.items():
        if not is_valid_currency(code):
            raise ValueError(f"Invalid currency for {field_name}: {code}")
    prefs = {k: v.upper() for k, v in prefs.items()}
    store.put(CURRENCY_PREFERENCES_KEY, prefs)
    return prefs


def load_currency_preferences(store: StateStore) -> dict:
    """Load currency preferences, defaulting each field to USD."""
    data = store.get(CURRENCY_PREFERENCES_KEY) or {}
    return {
        'gold_currency': data.get('gold_currency') or REFERENCE_CURRENCY,
        'silver_currency': data.get('silver_currency') or REFERENCE_CURRENCY,
        'display_currency': data.get('display_currency') or REFERENCE_CURRENCY,
    }
