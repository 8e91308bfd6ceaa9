"""Gold purities supported by the calculator."""

# Gold karats offered to users and their purity fractions
GOLD_KARATS = {
    24: 1.0,
    22: 22/24,
    21: 21/24,
    19: 19/24,
    18: 18/24,
    14: 14/24,
}
DEFAULT_KARAT = 24


def get_valid_karats() -> list[int]:
    """Get list of valid karat values."""
    return sorted(GOLD_KARATS.keys(), reverse=True)
