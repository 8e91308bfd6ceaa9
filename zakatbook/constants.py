"""Shared constants for zakat calculation and distribution tracking."""

# Nisab thresholds in grams (2.5 mithqal of gold, 52.5 dirham of silver)
NISAB_GOLD_GRAMS = 87.48
NISAB_SILVER_GRAMS = 612.36

# Zakat rate (2.5% per lunar year)
ZAKAT_RATE = 0.025

# Reference currency for all internal sums
REFERENCE_CURRENCY = 'USD'

# Weight units
VORI_TO_GRAMS = 11.66
TROY_OZ_TO_GRAMS = 31.1035
WEIGHT_UNITS = {
    'grams': 'Grams',
    'vori': 'Vori (1 Vori = 11.66g)',
}
DEFAULT_WEIGHT_UNIT = 'grams'

# Fallback spot prices (USD per gram) used when no live quote is available
FALLBACK_METAL_PRICES = {
    'gold': 66.0,
    'silver': 0.80,
}

# Plausible USD-per-gram ranges for accepting a live quote
PLAUSIBLE_PRICE_RANGES = {
    'gold': (20.0, 300.0),
    'silver': (0.1, 10.0),
}

# Asset categories accepted by the valuation engine
ASSET_CATEGORIES = ('gold', 'silver', 'cash', 'business', 'other', 'liability')
METAL_CATEGORIES = ('gold', 'silver')

# Obligation states
STATUS_INDETERMINATE = 'indeterminate'
STATUS_BELOW_THRESHOLD = 'below_threshold'
STATUS_DUE = 'due'

STATUS_MESSAGES = {
    STATUS_INDETERMINATE: 'Enter valid prices',
    STATUS_BELOW_THRESHOLD: 'Nisab NOT Met',
    STATUS_DUE: 'Nisab Met - Zakat DUE',
}

# Zakat recipient categories (Quran 9:60)
RECIPIENT_CATEGORIES = {
    'fuqara': 'The Poor (Al-Fuqara)',
    'masakin': 'The Needy (Al-Masakin)',
    'amilin': 'Zakat Administrators (Al-Amilin)',
    'muallafah': 'Those Whose Hearts Are to Be Reconciled (Al-Muallafah)',
    'riqab': 'Freeing Captives (Ar-Riqab)',
    'gharimin': 'Those in Debt (Al-Gharimin)',
    'fi_sabilillah': 'In the Cause of Allah (Fi Sabilillah)',
    'ibn_sabil': 'The Wayfarer (Ibn As-Sabil)',
}

# Persisted state keys
LAST_OBLIGATION_KEY = 'last_obligation'
CURRENCY_PREFERENCES_KEY = 'currency_preferences'
LEDGER_KEY_PREFIX = 'ledger:'
DEFAULT_LEDGER_NAME = 'zakatDistributions'
