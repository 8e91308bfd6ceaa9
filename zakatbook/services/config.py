"""Configuration service for price hints, storage and logging."""
import os

from zakatbook.constants import DEFAULT_LEDGER_NAME


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


def get_data_dir() -> str:
    """Directory holding the SQLite state file. DATA_DIR env var (default: ./data)."""
    return os.environ.get('DATA_DIR', os.path.join(os.path.dirname(__file__), '..', '..', 'data'))


def get_log_level() -> str:
    return os.environ.get('LOG_LEVEL', 'INFO').upper()


def is_network_enabled() -> bool:
    """Check if live price fetches may hit the network.

    Controlled by PRICE_HINT_ALLOW_NETWORK env var (default: 1/true).
    """
    return _env_flag('PRICE_HINT_ALLOW_NETWORK', '1')


def is_background_refresh_enabled() -> bool:
    """Check if the background price poller should start with the app.

    Controlled by PRICE_HINT_BACKGROUND env var (default: 0). Only effective
    if network access is also enabled.
    """
    if not is_network_enabled():
        return False
    return _env_flag('PRICE_HINT_BACKGROUND', '0')


def get_refresh_interval_seconds() -> int:
    """Poll interval for the background price refresher.

    Controlled by PRICE_HINT_INTERVAL_SECONDS env var (default: 3600).
    """
    return int(os.environ.get('PRICE_HINT_INTERVAL_SECONDS', '3600'))


def get_request_timeout_seconds() -> float:
    return float(os.environ.get('PRICE_HINT_TIMEOUT_SECONDS', '10'))


def get_user_agent() -> str:
    """Get the User-Agent string for price source HTTP requests."""
    default_ua = 'Zakatbook/1.0'
    return os.environ.get('PRICE_HINT_USER_AGENT', default_ua)


def get_ledger_name() -> str:
    return os.environ.get('LEDGER_NAME', DEFAULT_LEDGER_NAME)


def get_price_hint_config() -> dict:
    """Get complete price hint configuration status."""
    return {
        'network_enabled': is_network_enabled(),
        'background_refresh_enabled': is_background_refresh_enabled(),
        'refresh_interval_seconds': get_refresh_interval_seconds(),
        'request_timeout_seconds': get_request_timeout_seconds(),
        'user_agent': get_user_agent(),
    }
