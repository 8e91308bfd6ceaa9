"""Nisab threshold evaluation."""
from dataclasses import dataclass
from typing import Optional

from zakatbook.constants import NISAB_GOLD_GRAMS, NISAB_SILVER_GRAMS


@dataclass(frozen=True)
class NisabSnapshot:
    """Gold, silver and binding thresholds, all in USD."""
    gold_threshold: float
    silver_threshold: float
    binding_threshold: float
    basis: Optional[str]  # 'gold', 'silver' or None when no price is usable

    @property
    def is_determinate(self) -> bool:
        return self.basis is not None and self.binding_threshold > 0

    def to_dict(self) -> dict:
        return {
            'gold_grams': NISAB_GOLD_GRAMS,
            'silver_grams': NISAB_SILVER_GRAMS,
            'gold_threshold': self.gold_threshold,
            'silver_threshold': self.silver_threshold,
            'binding_threshold': self.binding_threshold,
            'basis': self.basis,
        }


def evaluate_nisab(gold_price_per_gram: float, silver_price_per_gram: float) -> NisabSnapshot:
    """Compute both thresholds and select the binding (lower) one.

    A metal without a positive price does not take part in the minimum, so
    a missing gold price cannot drag the binding threshold to zero. With
    neither price set the binding threshold is 0 and basis is None.

    Args:
        gold_price_per_gram: 24K gold price in USD per gram
        silver_price_per_gram: Silver price in USD per gram

    Returns:
        NisabSnapshot computed from scratch
    """
    gold_price = max(gold_price_per_gram, 0.0)
    silver_price = max(silver_price_per_gram, 0.0)

    gold_threshold = gold_price * NISAB_GOLD_GRAMS
    silver_threshold = silver_price * NISAB_SILVER_GRAMS

    candidates = []
    if gold_threshold > 0:
        candidates.append((gold_threshold, 'gold'))
    if silver_threshold > 0:
        candidates.append((silver_threshold, 'silver'))

    if not candidates:
        return NisabSnapshot(gold_threshold, silver_threshold, 0.0, None)

    binding, basis = min(candidates, key=lambda c: c[0])
    return NisabSnapshot(gold_threshold, silver_threshold, binding, basis)
