"""Tests for Flask CLI commands."""
import csv

from zakatbook.db import get_store
from zakatbook.services.ledger import DistributionLedger


def _seed(app, count=2):
    with app.app_context():
        ledger = DistributionLedger(get_store(), app.config['LEDGER_NAME'])
        for i in range(count):
            ledger.add(f'Recipient {i}', 'gharimin', 25, 'USD', '2026-02-01')


def test_init_db(runner, app):
    result = runner.invoke(args=['init-db'])
    assert result.exit_code == 0
    assert 'Initialized database' in result.output


def test_refresh_prices_offline(runner):
    result = runner.invoke(args=['refresh-prices'])
    assert result.exit_code == 0
    assert 'gold: 66.0 USD/g (static)' in result.output


def test_export_distributions(runner, app, tmp_path):
    _seed(app)
    out = tmp_path / 'out.csv'
    result = runner.invoke(args=['export-distributions', str(out)])

    assert result.exit_code == 0
    assert 'Exported 2 distribution records' in result.output
    with open(out, newline='', encoding='utf-8') as f:
        rows = list(csv.reader(f))
    assert len(rows) == 3


def test_distribution_summary(runner, app):
    _seed(app, count=1)
    result = runner.invoke(args=['distribution-summary', '--currency', 'USD'])
    assert result.exit_code == 0
    assert 'Distributed: 25.00 USD' in result.output
    assert 'Progress:    0.0% (1 records)' in result.output


def test_clear_distributions_requires_confirmation(runner, app):
    _seed(app)
    result = runner.invoke(args=['clear-distributions'], input='n\n')
    assert result.exit_code != 0
    with app.app_context():
        assert len(DistributionLedger(get_store(), app.config['LEDGER_NAME']).records()) == 2


def test_clear_distributions_with_yes(runner, app):
    _seed(app)
    result = runner.invoke(args=['clear-distributions', '--yes'])
    assert result.exit_code == 0
    assert 'Cleared 2 distribution records' in result.output


def test_distribution_summary_invalid_currency(runner):
    result = runner.invoke(args=['distribution-summary', '--currency', 'XYZ'])
    assert result.exit_code == 2
    assert 'Invalid currency' in result.output
