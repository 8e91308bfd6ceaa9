"""Zakat valuation and obligation service.

All sums are carried in USD. Only the final result is converted to the
display currency, so repeated cross-currency conversion never compounds
rounding error.
"""
import math
from dataclasses import dataclass, field

from zakatbook.constants import (
    ASSET_CATEGORIES,
    DEFAULT_WEIGHT_UNIT,
    METAL_CATEGORIES,
    REFERENCE_CURRENCY,
    STATUS_BELOW_THRESHOLD,
    STATUS_DUE,
    STATUS_INDETERMINATE,
    STATUS_MESSAGES,
    ZAKAT_RATE,
)
from .fx import from_reference, to_reference
from .nisab import NisabSnapshot, evaluate_nisab
from .units import normalize_karat, parse_amount, purity_adjusted_price, weight_to_grams

ADDITIVE_CATEGORIES = ('gold', 'silver', 'cash', 'business', 'other')


@dataclass(frozen=True)
class AssetEntry:
    """One declared asset or liability.

    Metals carry a weight ``unit`` (and gold a ``karat``); every other
    category carries a ``currency`` for its ``amount``.
    """
    category: str
    amount: float
    currency: str = REFERENCE_CURRENCY
    unit: str = DEFAULT_WEIGHT_UNIT
    karat: int | None = None
    name: str = ''

    def __post_init__(self):
        if self.category not in ASSET_CATEGORIES:
            raise ValueError(f"Unknown asset category: {self.category}")
        if (not isinstance(self.amount, (int, float)) or isinstance(self.amount, bool)
                or not math.isfinite(self.amount) or self.amount < 0):
            raise ValueError(f"Amount must be a finite non-negative number: {self.amount!r}")

    @property
    def is_metal(self) -> bool:
        return self.category in METAL_CATEGORIES

    @classmethod
    def from_dict(cls, data: dict) -> 'AssetEntry':
        """Build an entry from loosely-typed request data.

        Amounts are sanitized to finite non-negative floats; a missing or
        non-text unit or currency falls back to its default, and a karat
        outside the offered set is dropped (priced as 24K).
        """
        category = str(data.get('category', '')).lower()
        amount = max(parse_amount(data.get('amount')), 0.0)
        currency = data.get('currency')
        unit = data.get('unit')
        name = data.get('name')
        return cls(
            category=category,
            amount=amount,
            currency=currency.upper() if isinstance(currency, str) and currency else REFERENCE_CURRENCY,
            unit=unit if isinstance(unit, str) and unit else DEFAULT_WEIGHT_UNIT,
            karat=normalize_karat(data.get('karat')),
            name=str(name) if name is not None else '',
        )


@dataclass(frozen=True)
class MetalPrices:
    """24K gold and silver spot prices in USD per gram."""
    gold: float = 0.0
    silver: float = 0.0


@dataclass(frozen=True)
class CalculationInput:
    """Everything one calculation reads. Nothing is taken from ambient state."""
    entries: tuple = ()
    gold_price: float = 0.0
    gold_currency: str = REFERENCE_CURRENCY
    silver_price: float = 0.0
    silver_currency: str = REFERENCE_CURRENCY
    display_currency: str = REFERENCE_CURRENCY

    def metal_prices(self) -> MetalPrices:
        """Metal prices converted to USD once, up front."""
        return MetalPrices(
            gold=to_reference(max(parse_amount(self.gold_price), 0.0), self.gold_currency),
            silver=to_reference(max(parse_amount(self.silver_price), 0.0), self.silver_currency),
        )


@dataclass(frozen=True)
class Valuation:
    """Per-category USD subtotals and the floored net wealth."""
    subtotals: dict
    items: list
    gold_grams: float
    silver_grams: float
    gross_assets: float
    liabilities: float
    net_wealth: float


@dataclass(frozen=True)
class ObligationResult:
    """Immutable result of one calculation."""
    net_wealth_usd: float
    binding_threshold_usd: float
    status: str
    due_amount_usd: float
    display_currency: str
    nisab: NisabSnapshot
    valuation: Valuation
    metal_prices: MetalPrices = field(default_factory=MetalPrices)

    @property
    def is_due(self) -> bool:
        return self.status == STATUS_DUE

    @property
    def due_amount_display(self) -> float:
        return from_reference(self.due_amount_usd, self.display_currency)

    def to_dict(self) -> dict:
        ccy = self.display_currency
        return {
            'display_currency': ccy,
            'status': self.status,
            'status_message': STATUS_MESSAGES[self.status],
            'is_due': self.is_due,
            'zakat_rate': ZAKAT_RATE,
            'metal_prices_usd': {
                'gold': round(self.metal_prices.gold, 4),
                'silver': round(self.metal_prices.silver, 4),
            },
            'subtotals': {
                category: round(from_reference(value, ccy), 2)
                for category, value in self.valuation.subtotals.items()
            },
            'items': self.valuation.items,
            'gold_grams': round(self.valuation.gold_grams, 4),
            'silver_grams': round(self.valuation.silver_grams, 4),
            'net_wealth': round(from_reference(self.net_wealth_usd, ccy), 2),
            'nisab': {
                'gold_threshold': round(from_reference(self.nisab.gold_threshold, ccy), 2),
                'silver_threshold': round(from_reference(self.nisab.silver_threshold, ccy), 2),
                'binding_threshold': round(from_reference(self.binding_threshold_usd, ccy), 2),
                'basis': self.nisab.basis,
            },
            'zakat_due': round(self.due_amount_display, 2),
            'zakat_due_usd': round(self.due_amount_usd, 2),
            'net_wealth_usd': round(self.net_wealth_usd, 2),
        }


def entry_value(entry: AssetEntry, prices: MetalPrices) -> float:
    """USD value of a single entry (liabilities are returned positive)."""
    if entry.category == 'gold':
        grams = weight_to_grams(entry.amount, entry.unit)
        return grams * purity_adjusted_price(prices.gold, entry.karat)
    if entry.category == 'silver':
        return weight_to_grams(entry.amount, entry.unit) * prices.silver
    return to_reference(entry.amount, entry.currency)


def compute_net_wealth(entries, prices: MetalPrices) -> Valuation:
    """Aggregate entries into per-category subtotals and net wealth.

    Args:
        entries: Iterable of AssetEntry
        prices: Metal prices in USD per gram

    Returns:
        Valuation where net_wealth = assets - liabilities, floored at 0
    """
    subtotals = {category: 0.0 for category in ASSET_CATEGORIES}
    items = []
    gold_grams = 0.0
    silver_grams = 0.0

    for entry in entries:
        value = entry_value(entry, prices)
        subtotals[entry.category] += value
        if entry.category == 'gold':
            gold_grams += weight_to_grams(entry.amount, entry.unit)
        elif entry.category == 'silver':
            silver_grams += weight_to_grams(entry.amount, entry.unit)

        item = {
            'name': entry.name or entry.category.title(),
            'category': entry.category,
            'amount': entry.amount,
            'value_usd': round(value, 2),
        }
        if entry.is_metal:
            item['unit'] = entry.unit
            if entry.category == 'gold':
                item['karat'] = entry.karat
        else:
            item['currency'] = entry.currency
        items.append(item)

    gross = sum(subtotals[c] for c in ADDITIVE_CATEGORIES)
    liabilities = subtotals['liability']
    net = max(0.0, gross - liabilities)

    return Valuation(
        subtotals=subtotals,
        items=items,
        gold_grams=gold_grams,
        silver_grams=silver_grams,
        gross_assets=gross,
        liabilities=liabilities,
        net_wealth=net,
    )


def classify_obligation(net_wealth: float, binding_threshold: float) -> str:
    """Classify into indeterminate / below_threshold / due."""
    if binding_threshold <= 0:
        return STATUS_INDETERMINATE
    if net_wealth >= binding_threshold:
        return STATUS_DUE
    return STATUS_BELOW_THRESHOLD


def calculate_due(net_wealth: float, binding_threshold: float) -> tuple[str, float]:
    """Return (status, due_amount_usd). Holding period is assumed satisfied."""
    status = classify_obligation(net_wealth, binding_threshold)
    if status == STATUS_DUE:
        return status, net_wealth * ZAKAT_RATE
    return status, 0.0


def calculate_obligation(calc_input: CalculationInput) -> ObligationResult:
    """Run one full calculation from an explicit input structure."""
    prices = calc_input.metal_prices()
    valuation = compute_net_wealth(calc_input.entries, prices)
    nisab = evaluate_nisab(prices.gold, prices.silver)
    status, due = calculate_due(valuation.net_wealth, nisab.binding_threshold)

    return ObligationResult(
        net_wealth_usd=valuation.net_wealth,
        binding_threshold_usd=nisab.binding_threshold,
        status=status,
        due_amount_usd=due,
        display_currency=calc_input.display_currency,
        nisab=nisab,
        valuation=valuation,
        metal_prices=prices,
    )
