"""Tests for the distribution ledger."""
import csv
import io
from datetime import date, datetime, timezone

import pytest

from zakatbook.services.ledger import (
    CSV_HEADER,
    DistributionLedger,
    LedgerValidationError,
)
from zakatbook.services.time_provider import TimeProvider


@pytest.fixture
def ledger(store, frozen_time):
    return DistributionLedger(store, time_provider=frozen_time)


def _add(ledger, **overrides):
    fields = {
        'recipient_name': 'Local food bank',
        'category': 'fuqara',
        'amount': 100,
        'currency': 'USD',
        'record_date': '2026-03-01',
        'notes': '',
    }
    fields.update(overrides)
    return ledger.add(**fields)


class TestAdd:
    """Tests for DistributionLedger.add."""

    def test_add_persists_record(self, ledger, store):
        record = _add(ledger, notes='  Ramadan  ')

        assert record.recipient_name == 'Local food bank'
        assert record.date == date(2026, 3, 1)
        assert record.notes == 'Ramadan'
        assert record.created_at == '2026-03-01T12:00:00+00:00'
        assert store.get('ledger:zakatDistributions')[0]['id'] == record.id

    def test_ids_are_creation_ordered_and_unique(self, ledger):
        """Records added within the same millisecond still get distinct, increasing ids."""
        first = _add(ledger)
        second = _add(ledger)
        assert second.id > first.id

    def test_id_is_epoch_millis(self, ledger, frozen_time):
        record = _add(ledger)
        assert record.id == int(frozen_time.now().timestamp() * 1000)

    @pytest.mark.parametrize('overrides,field', [
        ({'recipient_name': '   '}, 'recipient_name'),
        ({'category': ''}, 'category'),
        ({'category': 'friends'}, 'category'),
        ({'amount': 0}, 'amount'),
        ({'amount': -5}, 'amount'),
        ({'amount': 'abc'}, 'amount'),
        ({'record_date': None}, 'date'),
        ({'record_date': 'not-a-date'}, 'date'),
        ({'recipient_name': 123}, 'recipient_name'),
        ({'category': ['fuqara']}, 'category'),
        ({'currency': 5}, 'currency'),
        ({'notes': {'text': 'x'}}, 'notes'),
    ])
    def test_validation_errors(self, ledger, overrides, field):
        with pytest.raises(LedgerValidationError) as exc_info:
            _add(ledger, **overrides)
        assert exc_info.value.field == field
        assert ledger.records() == []

    def test_failed_add_keeps_prior_records(self, ledger):
        _add(ledger)
        with pytest.raises(LedgerValidationError):
            _add(ledger, amount=0)
        assert len(ledger.records()) == 1

    def test_blank_currency_defaults_to_usd(self, ledger):
        assert _add(ledger, currency='').currency == 'USD'

    def test_accepts_date_object(self, ledger):
        assert _add(ledger, record_date=date(2026, 2, 20)).date == date(2026, 2, 20)


class TestDeleteAndClear:
    """Tests for delete and clear."""

    def test_delete_removes_record(self, ledger):
        keep = _add(ledger, recipient_name='A')
        drop = _add(ledger, recipient_name='B')

        assert ledger.delete(drop.id) is True
        assert [r.id for r in ledger.records()] == [keep.id]

    def test_delete_missing_id_is_noop(self, ledger):
        _add(ledger)
        assert ledger.delete(12345) is False
        assert len(ledger.records()) == 1

    def test_clear(self, ledger, store):
        _add(ledger)
        _add(ledger)
        assert ledger.clear() == 2
        assert ledger.records() == []
        assert store.get('ledger:zakatDistributions') is None

    def test_clear_empty_ledger(self, ledger):
        assert ledger.clear() == 0


class TestRereadBeforeWrite:
    """Two ledger objects over the same store never lose each other's writes."""

    def test_interleaved_instances(self, store):
        clock = TimeProvider(frozen_at=datetime(2026, 3, 1, tzinfo=timezone.utc))
        tab_one = DistributionLedger(store, time_provider=clock)
        tab_two = DistributionLedger(store, time_provider=clock)

        _add(tab_one, recipient_name='A')
        _add(tab_two, recipient_name='B')
        _add(tab_one, recipient_name='C')

        names = [r.recipient_name for r in tab_two.records()]
        assert names == ['A', 'B', 'C']

    def test_ledgers_are_keyed_by_name(self, store, frozen_time):
        ramadan = DistributionLedger(store, name='ramadan', time_provider=frozen_time)
        other = DistributionLedger(store, name='other', time_provider=frozen_time)
        _add(ramadan)
        assert other.records() == []


class TestListRecords:
    def test_newest_date_first(self, ledger):
        _add(ledger, recipient_name='old', record_date='2026-01-10')
        _add(ledger, recipient_name='new', record_date='2026-02-10')
        _add(ledger, recipient_name='mid', record_date='2026-01-20')

        assert [r.recipient_name for r in ledger.list_records()] == ['new', 'mid', 'old']


class TestReconcile:
    """Tests for DistributionLedger.reconcile."""

    def test_partial_distribution(self, ledger):
        _add(ledger, amount=100)
        _add(ledger, amount=50)

        summary = ledger.reconcile(250.0, 'USD')

        assert summary.total_distributed == pytest.approx(150.0)
        assert summary.total_due == pytest.approx(250.0)
        assert summary.remaining == pytest.approx(100.0)
        assert summary.progress_percent == pytest.approx(60.0)
        assert summary.record_count == 2

    def test_mixed_currencies(self, ledger):
        _add(ledger, amount=100, currency='EUR')
        summary = ledger.reconcile(184.0, 'USD')
        assert summary.total_distributed == pytest.approx(92.0)
        assert summary.progress_percent == pytest.approx(50.0)

    def test_display_currency(self, ledger):
        _add(ledger, amount=79, currency='USD')
        summary = ledger.reconcile(158.0, 'GBP')
        assert summary.total_distributed == pytest.approx(100.0)
        assert summary.total_due == pytest.approx(200.0)
        assert summary.remaining == pytest.approx(100.0)

    def test_over_distribution_capped(self, ledger):
        _add(ledger, amount=400)
        summary = ledger.reconcile(250.0, 'USD')
        assert summary.remaining == 0.0
        assert summary.progress_percent == 100.0

    def test_no_obligation(self, ledger):
        _add(ledger, amount=10)
        summary = ledger.reconcile(0.0, 'USD')
        assert summary.progress_percent == 0.0
        assert summary.remaining == 0.0

    def test_most_recent_date(self, ledger):
        _add(ledger, record_date='2026-01-10')
        _add(ledger, record_date='2026-02-15')
        assert ledger.reconcile(100.0, 'USD').most_recent_date == date(2026, 2, 15)

    def test_empty_summary_dict(self, ledger):
        data = ledger.reconcile(250.0, 'USD').to_dict()
        assert data == {
            'display_currency': 'USD',
            'total_distributed': 0.0,
            'total_due': 250.0,
            'remaining': 250.0,
            'progress_percent': 0.0,
            'record_count': 0,
            'most_recent_date': None,
        }


class TestExportCsv:
    """Tests for CSV export."""

    def test_header_only_when_empty(self, ledger):
        rows = list(csv.reader(io.StringIO(ledger.export_csv())))
        assert rows == [CSV_HEADER]

    def test_rows(self, ledger):
        _add(ledger, recipient_name='Masjid, "Central"', amount=75.5, currency='BDT',
             record_date='2025-03-01', notes='Iftar')

        rows = list(csv.reader(io.StringIO(ledger.export_csv())))
        assert rows[1] == [
            '2025-03-01',
            '1 Ramadan 1446',
            'Masjid, "Central"',
            'fuqara',
            '75.5',
            'BDT',
            'Iftar',
        ]
