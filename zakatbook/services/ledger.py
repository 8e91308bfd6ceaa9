"""Zakat distribution ledger.

The ledger owns a list of disbursement records persisted as one blob per
ledger name. Every mutation re-reads the stored snapshot, changes it and
writes the whole list back, so no stale in-memory copy is ever written.
"""
import csv
import io
import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Optional

from zakatbook.constants import (
    DEFAULT_LEDGER_NAME,
    LEDGER_KEY_PREFIX,
    RECIPIENT_CATEGORIES,
    REFERENCE_CURRENCY,
)
from .fx import from_reference, to_reference
from .hijri import format_hijri
from .state import StateStore
from .time_provider import TimeProvider, get_now
from .units import parse_amount

logger = logging.getLogger('ledger')

CSV_HEADER = [
    'Date (Gregorian)',
    'Date (Hijri)',
    'Recipient Name',
    'Category',
    'Amount',
    'Currency',
    'Notes',
]


class LedgerValidationError(ValueError):
    """Raised when a distribution record fails validation."""

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field


@dataclass(frozen=True)
class DistributionRecord:
    """A single disbursement to a recipient."""
    id: int
    recipient_name: str
    category: str
    amount: float
    currency: str
    date: date
    notes: str
    created_at: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data['date'] = self.date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'DistributionRecord':
        return cls(
            id=int(data['id']),
            recipient_name=data['recipient_name'],
            category=data['category'],
            amount=float(data['amount']),
            currency=data.get('currency') or REFERENCE_CURRENCY,
            date=date.fromisoformat(data['date']),
            notes=data.get('notes') or '',
            created_at=data.get('created_at') or '',
        )


@dataclass(frozen=True)
class Reconciliation:
    """Distributed-vs-due summary in the display currency."""
    display_currency: str
    total_distributed: float
    total_due: float
    remaining: float
    progress_percent: float
    record_count: int
    most_recent_date: Optional[date]

    def to_dict(self) -> dict:
        return {
            'display_currency': self.display_currency,
            'total_distributed': round(self.total_distributed, 2),
            'total_due': round(self.total_due, 2),
            'remaining': round(self.remaining, 2),
            'progress_percent': round(self.progress_percent, 1),
            'record_count': self.record_count,
            'most_recent_date': self.most_recent_date.isoformat() if self.most_recent_date else None,
        }


def _parse_date(value) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


class DistributionLedger:
    """Append/delete-only ledger of distribution records."""

    def __init__(self, store: StateStore, name: str = DEFAULT_LEDGER_NAME,
                 time_provider: Optional[TimeProvider] = None):
        self._store = store
        self.name = name
        self._time_provider = time_provider

    @property
    def key(self) -> str:
        return f"{LEDGER_KEY_PREFIX}{self.name}"

    def _load(self) -> list[DistributionRecord]:
        raw = self._store.get(self.key) or []
        records = []
        for item in raw:
            try:
                records.append(DistributionRecord.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed record in ledger {self.name!r}: {e}")
        return records

    def _save(self, records: list[DistributionRecord]) -> None:
        self._store.put(self.key, [r.to_dict() for r in records])

    def records(self) -> list[DistributionRecord]:
        """Records in insertion order."""
        return self._load()

    def list_records(self) -> list[DistributionRecord]:
        """Records ordered newest distribution date first."""
        return sorted(self._load(), key=lambda r: (r.date, r.id), reverse=True)

    def add(self, recipient_name: str, category: str, amount, currency: str = REFERENCE_CURRENCY,
            record_date=None, notes: str = '') -> DistributionRecord:
        """Validate and append a record.

        Raises:
            LedgerValidationError: If any field is missing, malformed or of the wrong type.
                Nothing is persisted in that case.
        """
        if recipient_name is not None and not isinstance(recipient_name, str):
            raise LedgerValidationError('Recipient name must be text', 'recipient_name')
        recipient_name = (recipient_name or '').strip()
        if not recipient_name:
            raise LedgerValidationError('Please enter recipient name', 'recipient_name')
        if not category:
            raise LedgerValidationError('Please select a category', 'category')
        if not isinstance(category, str) or category not in RECIPIENT_CATEGORIES:
            raise LedgerValidationError(f'Unknown category: {category}', 'category')
        amount_value = parse_amount(amount)
        if amount_value <= 0:
            raise LedgerValidationError('Please enter a valid amount', 'amount')
        parsed_date = _parse_date(record_date)
        if parsed_date is None:
            raise LedgerValidationError('Please select a date', 'date')
        if currency is not None and not isinstance(currency, str):
            raise LedgerValidationError('Currency must be a currency code', 'currency')
        if notes is not None and not isinstance(notes, str):
            raise LedgerValidationError('Notes must be text', 'notes')

        records = self._load()
        now = get_now(self._time_provider)
        record_id = int(now.timestamp() * 1000)
        if records:
            record_id = max(record_id, max(r.id for r in records) + 1)

        record = DistributionRecord(
            id=record_id,
            recipient_name=recipient_name,
            category=category,
            amount=amount_value,
            currency=(currency or REFERENCE_CURRENCY).upper(),
            date=parsed_date,
            notes=(notes or '').strip(),
            created_at=now.isoformat(),
        )
        records.append(record)
        self._save(records)
        logger.info(f"Added distribution {record.id} to ledger {self.name!r}")
        return record

    def delete(self, record_id: int) -> bool:
        """Remove a record by id. Returns False (not an error) if absent."""
        records = self._load()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self._save(remaining)
        logger.info(f"Deleted distribution {record_id} from ledger {self.name!r}")
        return True

    def clear(self) -> int:
        """Irreversibly remove every record. Returns how many were removed."""
        count = len(self._load())
        self._store.delete(self.key)
        logger.info(f"Cleared {count} distributions from ledger {self.name!r}")
        return count

    def reconcile(self, last_obligation_usd: float, display_currency: str) -> Reconciliation:
        """Compare everything distributed against the last computed obligation.

        Over-distribution is not an error: remaining floors at 0 and
        progress caps at 100.
        """
        records = self._load()
        distributed_usd = sum(to_reference(r.amount, r.currency) for r in records)
        due_usd = max(parse_amount(last_obligation_usd), 0.0)

        total_distributed = from_reference(distributed_usd, display_currency)
        total_due = from_reference(due_usd, display_currency)
        remaining = max(0.0, total_due - total_distributed)
        if due_usd > 0:
            progress = min(100.0, distributed_usd * 100 / due_usd)
        else:
            progress = 0.0

        most_recent = max((r.date for r in records), default=None)
        return Reconciliation(
            display_currency=display_currency,
            total_distributed=total_distributed,
            total_due=total_due,
            remaining=remaining,
            progress_percent=progress,
            record_count=len(records),
            most_recent_date=most_recent,
        )

    def export_csv(self) -> str:
        """Serialize the ledger as CSV, one row per record in insertion order."""
        buf = io.StringIO()
        writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator='\n')
        writer.writerow(CSV_HEADER)
        for record in self._load():
            writer.writerow([
                record.date.isoformat(),
                format_hijri(record.date),
                record.recipient_name,
                record.category,
                record.amount,
                record.currency,
                record.notes,
            ])
        return buf.getvalue()
