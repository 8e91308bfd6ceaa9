"""Currency conversion against the static USD rate table."""
import logging

from zakatbook.constants import REFERENCE_CURRENCY
from zakatbook.data.currencies import get_rate_to_usd, is_valid_currency as _is_valid

logger = logging.getLogger('fx')


def to_reference(amount: float, currency: str) -> float:
    """Convert an amount in ``currency`` to USD.

    Unknown currencies are treated as already being in USD: a warning is
    logged and the amount is returned unchanged.
    """
    if currency == REFERENCE_CURRENCY:
        return amount
    rate = get_rate_to_usd(currency)
    if rate is None:
        logger.warning(f"Unknown currency: {currency!r}, assuming {REFERENCE_CURRENCY}")
        return amount
    if rate == 1.0:
        return amount
    usd = amount * rate
    logger.debug(f"Convert {amount} {currency} (rate: {rate}) -> {usd:.2f} {REFERENCE_CURRENCY}")
    return usd


def from_reference(amount: float, currency: str) -> float:
    """Convert a USD amount into ``currency``. Inverse of ``to_reference``."""
    if currency == REFERENCE_CURRENCY:
        return amount
    rate = get_rate_to_usd(currency)
    if rate is None:
        logger.warning(f"Unknown currency: {currency!r}, assuming {REFERENCE_CURRENCY}")
        return amount
    if rate == 1.0:
        return amount
    converted = amount / rate
    logger.debug(f"Convert {amount:.2f} {REFERENCE_CURRENCY} -> {converted:.2f} {currency} (rate: {rate})")
    return converted


def convert(amount: float, from_currency: str, to_currency: str) -> float:
    """Convert between two table currencies through USD."""
    if from_currency == to_currency:
        return amount
    return from_reference(to_reference(amount, from_currency), to_currency)


def validate_currency(currency: str) -> bool:
    """Validate if a currency code is in the conversion table."""
    return _is_valid(currency)
