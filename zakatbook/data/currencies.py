"""Static currency table with fixed exchange rates to USD.

Rates are "how much USD equals 1 unit of this currency" and are fixed for a
given deployment. The list order is the order shown in currency dropdowns.
"""

DEFAULT_CURRENCY = 'USD'

# Format: code -> (name, symbol, rate_to_usd)
EXCHANGE_RATES: dict[str, tuple[str, str, float]] = {
    'USD': ('US Dollar', '$', 1.0),
    'EUR': ('Euro', '€', 0.92),
    'GBP': ('British Pound', '£', 0.79),
    'AED': ('UAE Dirham', 'د.إ', 0.27),
    'PKR': ('Pakistani Rupee', '₨', 0.0036),
    'INR': ('Indian Rupee', '₹', 0.012),
    'SAR': ('Saudi Riyal', '﷼', 0.27),
    'EGP': ('Egyptian Pound', '£', 0.020),
    'BDT': ('Bangladeshi Taka', '৳', 0.0095),
    'MYR': ('Malaysian Ringgit', 'RM', 0.22),
    'SGD': ('Singapore Dollar', '$', 0.74),
    'AUD': ('Australian Dollar', '$', 0.65),
    'CAD': ('Canadian Dollar', '$', 0.73),
    'JPY': ('Japanese Yen', '¥', 0.0067),
    'CNY': ('Chinese Yuan', '¥', 0.14),
}


def get_currency_codes() -> list[str]:
    """Get all currency codes in display order."""
    return list(EXCHANGE_RATES.keys())


def get_ordered_currencies() -> list[dict]:
    """Get currencies for UI dropdowns.

    Returns:
        List of dicts with code, name, symbol and rate_to_usd.
    """
    return [
        {
            'code': code,
            'name': name,
            'symbol': symbol,
            'rate_to_usd': rate,
        }
        for code, (name, symbol, rate) in EXCHANGE_RATES.items()
    ]


def is_valid_currency(code: str) -> bool:
    """Check if a currency code is in the table."""
    if not code or not isinstance(code, str):
        return False
    return code.upper() in EXCHANGE_RATES


def get_currency_name(code: str) -> str:
    """Get the display name for a currency code (code itself if unknown)."""
    entry = EXCHANGE_RATES.get((code or '').upper())
    return entry[0] if entry else code


def get_currency_symbol(code: str) -> str:
    """Get the display symbol for a currency code ('$' if unknown)."""
    entry = EXCHANGE_RATES.get((code or '').upper())
    return entry[1] if entry else '$'


def get_rate_to_usd(code: str) -> float | None:
    """Get the fixed USD rate for a currency, or None if unknown."""
    entry = EXCHANGE_RATES.get((code or '').upper())
    return entry[2] if entry else None
