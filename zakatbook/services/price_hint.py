"""
Live Price Hints

Best-effort spot prices for gold and silver. A successful fetch proposes a
new value into a single-slot cell per metal; calculations read the cell
synchronously and never wait on a fetch. Failed or implausible quotes are
logged and dropped, leaving the last known (or fallback) price in place.

Overlapping refreshes (manual refresh during a background poll) are not
serialized: the last successful write wins.
"""

import logging
import math
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

from zakatbook.constants import (
    FALLBACK_METAL_PRICES,
    PLAUSIBLE_PRICE_RANGES,
    TROY_OZ_TO_GRAMS,
)
from zakatbook.services.config import get_refresh_interval_seconds, is_network_enabled
from zakatbook.services.providers import InvalidQuoteError, MetalProvider, MetalQuote, ProviderError

logger = logging.getLogger('price_hint')


def normalize_quote(metal: str, raw_price: float) -> float:
    """Normalize a raw quote of unknown unit to USD per gram.

    A quote already inside the plausible per-gram range is kept; otherwise it
    is treated as a per-troy-ounce price. Anything still out of range is
    rejected.

    Raises:
        InvalidQuoteError: If the quote is non-finite or implausible
    """
    if metal not in PLAUSIBLE_PRICE_RANGES:
        raise InvalidQuoteError(f"Unsupported metal: {metal}")
    if not isinstance(raw_price, (int, float)) or isinstance(raw_price, bool):
        raise InvalidQuoteError(f"Non-numeric quote: {raw_price!r}")
    if not math.isfinite(raw_price) or raw_price <= 0:
        raise InvalidQuoteError(f"Non-finite or non-positive quote: {raw_price}")

    low, high = PLAUSIBLE_PRICE_RANGES[metal]
    if low <= raw_price <= high:
        return float(raw_price)

    per_gram = raw_price / TROY_OZ_TO_GRAMS
    if low <= per_gram <= high:
        return round(per_gram, 4)

    raise InvalidQuoteError(f"Implausible {metal} quote: {raw_price}")


class PriceHintCell:
    """Last known price per metal. Reads never block on fetches."""

    def __init__(self, defaults: Optional[dict] = None):
        self._lock = threading.Lock()
        self._quotes: dict[str, MetalQuote] = {}
        self._updated_at: dict[str, Optional[str]] = {}
        for metal, price in (defaults or FALLBACK_METAL_PRICES).items():
            self._quotes[metal] = MetalQuote(metal=metal, price_per_gram_usd=price, source='fallback')
            self._updated_at[metal] = None

    def get(self, metal: str) -> float:
        with self._lock:
            quote = self._quotes.get(metal)
            return quote.price_per_gram_usd if quote else 0.0

    def propose(self, quote: MetalQuote) -> None:
        with self._lock:
            self._quotes[quote.metal] = quote
            self._updated_at[quote.metal] = datetime.now(timezone.utc).isoformat()

    def snapshot(self) -> dict:
        with self._lock:
            return {
                metal: {
                    'price_per_gram_usd': quote.price_per_gram_usd,
                    'source': quote.source,
                    'updated_at': self._updated_at.get(metal),
                }
                for metal, quote in self._quotes.items()
            }


_cell: Optional[PriceHintCell] = None
_cell_lock = threading.Lock()


def get_price_hint_cell() -> PriceHintCell:
    """Get the process-wide price hint cell."""
    global _cell
    with _cell_lock:
        if _cell is None:
            _cell = PriceHintCell()
        return _cell


def reset_price_hint_cell() -> None:
    """Drop all fetched prices (for testing)."""
    global _cell
    with _cell_lock:
        _cell = None


def get_default_provider() -> MetalProvider:
    """Live source when network is allowed, otherwise the fallback prices."""
    from zakatbook.services.providers.metal_providers import MetalsLiveProvider, StaticMetalProvider

    if is_network_enabled():
        return MetalsLiveProvider()
    return StaticMetalProvider(FALLBACK_METAL_PRICES)


def refresh_price_hint(metal: str, provider: Optional[MetalProvider] = None,
                       cell: Optional[PriceHintCell] = None) -> float:
    """Try to refresh one metal's price. Never raises for source failures.

    Returns:
        The price held in the cell after the attempt (fresh on success,
        last known on failure)
    """
    provider = provider or get_default_provider()
    cell = cell or get_price_hint_cell()

    try:
        raw = provider.get_spot_price(metal)
        price = normalize_quote(metal, raw)
    except ProviderError as e:
        logger.warning(f"{provider.name} {metal} price fetch failed, keeping last known: {e}")
        return cell.get(metal)

    cell.propose(MetalQuote(metal=metal, price_per_gram_usd=price, source=provider.name))
    logger.info(f"{metal} price updated from {provider.name}: {price}/g")
    return price


def refresh_all(provider: Optional[MetalProvider] = None,
                cell: Optional[PriceHintCell] = None) -> dict:
    """Refresh every supported metal and return the cell snapshot."""
    cell = cell or get_price_hint_cell()
    for metal in PLAUSIBLE_PRICE_RANGES:
        refresh_price_hint(metal, provider=provider, cell=cell)
    return cell.snapshot()


# Background poller
_refresh_thread: Optional[threading.Thread] = None
_stop_event = threading.Event()


def start_price_refresher():
    """Start the background price refresher if not already running."""
    global _refresh_thread

    if _refresh_thread is not None and _refresh_thread.is_alive():
        logger.info("Price refresher thread already running")
        return

    _stop_event.clear()
    _refresh_thread = threading.Thread(target=_refresh_loop, daemon=True, name='price-hint')
    _refresh_thread.start()
    logger.info("Price refresher thread started")


def stop_price_refresher():
    """Stop the background price refresher."""
    global _refresh_thread

    if _refresh_thread is None:
        return

    logger.info("Stopping price refresher thread...")
    _stop_event.set()
    _refresh_thread.join(timeout=5)
    _refresh_thread = None
    logger.info("Price refresher thread stopped")


def _refresh_loop():
    sleep_seconds = get_refresh_interval_seconds()
    logger.info(f"Price refresher loop started, interval {sleep_seconds}s")

    while not _stop_event.is_set():
        try:
            refresh_all()
        except Exception as e:
            logger.exception(f"Price refresh cycle failed: {e}")

        next_run = datetime.now(timezone.utc) + timedelta(seconds=sleep_seconds)
        logger.debug(f"Next price refresh at {next_run.isoformat()}")
        _stop_event.wait(timeout=sleep_seconds)
