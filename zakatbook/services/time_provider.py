"""Time provider abstraction for testable date handling.

All times are UTC. Ledger record ids and timestamps are taken from here so
tests can freeze the clock.
"""
from datetime import date, datetime, timezone
from typing import Optional


class TimeProvider:
    """Provides the current time, allowing tests to freeze it.

    Usage:
        # Production: uses real UTC time
        provider = TimeProvider()
        now = provider.now()

        # Testing: freeze to a specific instant
        provider = TimeProvider(frozen_at=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))
        provider.today()  # Always returns 2026-03-01
    """

    _instance: Optional['TimeProvider'] = None

    def __init__(self, frozen_at: Optional[datetime] = None):
        self._frozen_at = frozen_at

    def now(self) -> datetime:
        """Get current UTC datetime, or the frozen instant if set."""
        if self._frozen_at is not None:
            return self._frozen_at
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()

    @classmethod
    def get_default(cls) -> 'TimeProvider':
        """Get the default TimeProvider instance (singleton for production)."""
        if cls._instance is None:
            cls._instance = TimeProvider()
        return cls._instance

    @classmethod
    def set_default(cls, provider: 'TimeProvider') -> None:
        """Set the default TimeProvider (for testing)."""
        cls._instance = provider

    @classmethod
    def reset_default(cls) -> None:
        """Reset to production TimeProvider."""
        cls._instance = None


def get_now(time_provider: Optional[TimeProvider] = None) -> datetime:
    if time_provider is None:
        time_provider = TimeProvider.get_default()
    return time_provider.now()


def get_today(time_provider: Optional[TimeProvider] = None) -> date:
    """Convenience function to get today's UTC date."""
    return get_now(time_provider).date()
