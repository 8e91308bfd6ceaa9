"""Flask CLI commands for database management, prices and the ledger."""
import click
from flask import current_app
from flask.cli import with_appcontext

from zakatbook.data.currencies import is_valid_currency
from zakatbook.db import get_db_path, get_store, init_db
from zakatbook.services.ledger import DistributionLedger
from zakatbook.services.price_hint import refresh_all
from zakatbook.services.state import load_currency_preferences, load_last_obligation


def _ledger() -> DistributionLedger:
    return DistributionLedger(get_store(), current_app.config['LEDGER_NAME'])


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Initialize the SQLite database with schema."""
    init_db()
    click.echo(f'Initialized database at {get_db_path()}')


@click.command('refresh-prices')
@with_appcontext
def refresh_prices_command():
    """Fetch live gold and silver prices (falls back to last known)."""
    snapshot = refresh_all()
    for metal, info in snapshot.items():
        click.echo(f"{metal}: {info['price_per_gram_usd']} USD/g ({info['source']})")


@click.command('export-distributions')
@click.argument('csv_path', type=click.Path(dir_okay=False, writable=True))
@with_appcontext
def export_distributions_command(csv_path):
    """Export the distribution ledger to CSV_PATH."""
    ledger = _ledger()
    with open(csv_path, 'w', newline='', encoding='utf-8') as f:
        f.write(ledger.export_csv())
    click.echo(f'Exported {len(ledger.records())} distribution records to {csv_path}')


@click.command('distribution-summary')
@click.option('--currency', default=None, help='Display currency (default: saved preference)')
@with_appcontext
def distribution_summary_command(currency):
    """Show distributed vs due for the last calculation."""
    store = get_store()
    currency = (currency or load_currency_preferences(store)['display_currency']).upper()
    if not is_valid_currency(currency):
        raise click.BadParameter(f'Invalid currency: {currency}', param_hint='--currency')
    obligation = load_last_obligation(store)
    summary = _ledger().reconcile(obligation['amount_usd'], currency).to_dict()
    click.echo(f"Zakat due:   {summary['total_due']:.2f} {currency}")
    click.echo(f"Distributed: {summary['total_distributed']:.2f} {currency}")
    click.echo(f"Remaining:   {summary['remaining']:.2f} {currency}")
    click.echo(f"Progress:    {summary['progress_percent']:.1f}% ({summary['record_count']} records)")


@click.command('clear-distributions')
@click.confirmation_option(prompt='Delete ALL distribution records? This cannot be undone!')
@with_appcontext
def clear_distributions_command():
    """Delete every distribution record."""
    removed = _ledger().clear()
    click.echo(f'Cleared {removed} distribution records')


def register_cli(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(refresh_prices_command)
    app.cli.add_command(export_distributions_command)
    app.cli.add_command(distribution_summary_command)
    app.cli.add_command(clear_distributions_command)
