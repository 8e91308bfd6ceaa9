"""Weight and purity normalization for precious metal entries."""
import math

from zakatbook.constants import VORI_TO_GRAMS
from zakatbook.data.metals import DEFAULT_KARAT, GOLD_KARATS


def parse_amount(value) -> float:
    """Parse user input into a finite float.

    Blank, malformed, NaN and infinite inputs all become 0.0 so they cannot
    poison downstream sums.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def weight_to_grams(amount: float, unit: str | None) -> float:
    """Convert a weight to grams. Unknown units are taken as grams."""
    if unit == 'vori':
        return amount * VORI_TO_GRAMS
    return amount


def normalize_karat(karat) -> int | None:
    """Return ``karat`` as one of the offered karats, or None if it is not one.

    Fractional labels such as 18.5 are not rounded to a neighbouring karat.
    """
    value = parse_amount(karat)
    if value.is_integer() and int(value) in GOLD_KARATS:
        return int(value)
    return None


def karat_to_fraction(karat) -> float:
    """Convert a karat label to a purity fraction. 24K=1.0, 18K=0.75, etc.

    Anything outside the offered karats (missing, garbage, 30K, 18.5K) is
    priced as 24K.
    """
    return GOLD_KARATS[normalize_karat(karat) or DEFAULT_KARAT]


def purity_adjusted_price(base_price_24k: float, karat) -> float:
    """Convert a 24K price per gram into the price for ``karat``."""
    return base_price_24k * karat_to_fraction(karat)
