"""API routes for calculation, preferences, distributions and price hints."""
from flask import Blueprint, Response, current_app, jsonify, request

from zakatbook.constants import (
    ASSET_CATEGORIES,
    NISAB_GOLD_GRAMS,
    NISAB_SILVER_GRAMS,
    RECIPIENT_CATEGORIES,
    WEIGHT_UNITS,
    ZAKAT_RATE,
)
from zakatbook.data.currencies import DEFAULT_CURRENCY, get_ordered_currencies, is_valid_currency
from zakatbook.data.metals import get_valid_karats
from zakatbook.db import get_store
from zakatbook.services.calc import AssetEntry, CalculationInput, calculate_obligation
from zakatbook.services.fx import from_reference
from zakatbook.services.ledger import DistributionLedger, LedgerValidationError
from zakatbook.services.nisab import evaluate_nisab
from zakatbook.services.price_hint import get_price_hint_cell, refresh_all
from zakatbook.services.state import (
    load_currency_preferences,
    load_last_obligation,
    save_currency_preferences,
    save_last_obligation,
)
from zakatbook.services.time_provider import get_today

api_bp = Blueprint('api', __name__)


def _get_ledger() -> DistributionLedger:
    return DistributionLedger(get_store(), current_app.config['LEDGER_NAME'])


def _json_object() -> dict | None:
    """Return the JSON request body, {} when absent, or None when it is not an object."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    return body if isinstance(body, dict) else None


def _body_error():
    return jsonify({'error': 'Request body must be a JSON object'}), 400


def _currency_code(value, default: str) -> str | None:
    """Upper-cased currency code, ``default`` when blank, None when invalid."""
    if value is None or value == '':
        value = default
    if not is_valid_currency(value):
        return None
    return value.upper()


def _price_inputs(body: dict, prefs: dict) -> tuple[dict | None, str | None]:
    """Resolve metal prices and currencies, filling gaps from hints/preferences.

    A price that is absent from the body is read from the price hint cell
    (USD per gram). Returns (inputs, error).
    """
    cell = get_price_hint_cell()
    inputs = {}
    for metal in ('gold', 'silver'):
        price_key = f'{metal}_price'
        currency_key = f'{metal}_currency'
        if body.get(price_key) is None:
            inputs[price_key] = cell.get(metal)
            inputs[currency_key] = 'USD'
            continue
        code = _currency_code(body.get(currency_key), prefs[currency_key])
        if code is None:
            return None, f'Invalid currency: {body.get(currency_key)}'
        inputs[price_key] = body.get(price_key)
        inputs[currency_key] = code

    display = _currency_code(body.get('display_currency'), prefs['display_currency'])
    if display is None:
        return None, f"Invalid currency: {body.get('display_currency')}"
    inputs['display_currency'] = display
    return inputs, None


@api_bp.route('/currencies')
def currencies():
    """Return the currency table in display order."""
    currency_list = get_ordered_currencies()
    return jsonify({
        'currencies': currency_list,
        'default': DEFAULT_CURRENCY,
        'count': len(currency_list)
    })


@api_bp.route('/options')
def options():
    """Return the selectable asset categories, units, karats and recipient categories."""
    return jsonify({
        'asset_categories': list(ASSET_CATEGORIES),
        'weight_units': WEIGHT_UNITS,
        'karats': get_valid_karats(),
        'recipient_categories': RECIPIENT_CATEGORIES,
        'nisab': {'gold_grams': NISAB_GOLD_GRAMS, 'silver_grams': NISAB_SILVER_GRAMS},
        'zakat_rate': ZAKAT_RATE,
    })


@api_bp.route('/nisab', methods=['POST'])
def nisab():
    """Return gold, silver and binding Nisab thresholds in the display currency.

    Request body:
    {
        "gold_price": 70, "gold_currency": "USD",
        "silver_price": 0.9, "silver_currency": "USD",
        "display_currency": "EUR"
    }
    """
    body = _json_object()
    if body is None:
        return _body_error()
    inputs, error = _price_inputs(body, load_currency_preferences(get_store()))
    if error:
        return jsonify({'error': error}), 400

    prices = CalculationInput(**inputs).metal_prices()
    snapshot = evaluate_nisab(prices.gold, prices.silver)
    ccy = inputs['display_currency']
    data = snapshot.to_dict()
    for key in ('gold_threshold', 'silver_threshold', 'binding_threshold'):
        data[key] = round(from_reference(data[key], ccy), 2)
    data['display_currency'] = ccy
    data['determinate'] = snapshot.is_determinate
    return jsonify(data)


@api_bp.route('/calculate', methods=['POST'])
def calculate():
    """Calculate zakat from submitted entries.

    Request body:
    {
        "display_currency": "USD",
        "gold_price": 70, "gold_currency": "USD",
        "silver_price": 0.9, "silver_currency": "USD",
        "entries": [
            {"category": "gold", "amount": 10, "unit": "vori", "karat": 22},
            {"category": "silver", "amount": 200, "unit": "grams"},
            {"category": "cash", "amount": 5000, "currency": "EUR"},
            {"category": "business", "amount": 1000, "currency": "USD"},
            {"category": "other", "amount": 300, "currency": "GBP"},
            {"category": "liability", "amount": 800, "currency": "USD"}
        ]
    }

    Missing prices are taken from the last known live price hints.
    """
    body = _json_object()
    if body is None:
        return _body_error()
    store = get_store()
    inputs, error = _price_inputs(body, load_currency_preferences(store))
    if error:
        return jsonify({'error': error}), 400

    raw_entries = body.get('entries') or []
    if not isinstance(raw_entries, list):
        return jsonify({'error': 'entries must be a list'}), 400

    entries = []
    for item in raw_entries:
        if not isinstance(item, dict):
            return jsonify({'error': 'Each entry must be an object'}), 400
        category = str(item.get('category', '')).lower()
        if category not in ASSET_CATEGORIES:
            return jsonify({'error': f"Invalid category: {item.get('category')}"}), 400
        if item.get('currency') not in (None, '') and not is_valid_currency(item['currency']):
            return jsonify({'error': f"Invalid currency: {item['currency']}"}), 400
        unit = item.get('unit')
        if unit not in (None, '') and (not isinstance(unit, str) or unit not in WEIGHT_UNITS):
            return jsonify({'error': f"Invalid unit: {unit}"}), 400
        entries.append(AssetEntry.from_dict(item))

    result = calculate_obligation(CalculationInput(entries=tuple(entries), **inputs))
    save_last_obligation(store, result)
    return jsonify(result.to_dict())


@api_bp.route('/preferences', methods=['GET'])
def get_preferences():
    return jsonify(load_currency_preferences(get_store()))


@api_bp.route('/preferences', methods=['PUT'])
def put_preferences():
    """Overwrite saved currency preferences."""
    body = _json_object()
    if body is None:
        return _body_error()
    try:
        prefs = save_currency_preferences(
            get_store(),
            body.get('gold_currency', ''),
            body.get('silver_currency', ''),
            body.get('display_currency', ''),
        )
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify(prefs)


@api_bp.route('/distributions', methods=['GET'])
def list_distributions():
    """Return distribution records, newest date first."""
    records = _get_ledger().list_records()
    return jsonify({
        'records': [r.to_dict() for r in records],
        'count': len(records),
    })


@api_bp.route('/distributions', methods=['POST'])
def add_distribution():
    """Add a distribution record.

    Request body:
    {
        "recipient_name": "Local food bank",
        "category": "fuqara",
        "amount": 100,
        "currency": "USD",
        "date": "2026-03-01",
        "notes": "Ramadan"
    }
    """
    body = _json_object()
    if body is None:
        return _body_error()
    currency = _currency_code(body.get('currency'), DEFAULT_CURRENCY)
    if currency is None:
        return jsonify({'error': f"Invalid currency: {body.get('currency')}", 'field': 'currency'}), 400

    try:
        record = _get_ledger().add(
            recipient_name=body.get('recipient_name', ''),
            category=body.get('category', ''),
            amount=body.get('amount'),
            currency=currency,
            record_date=body.get('date'),
            notes=body.get('notes', ''),
        )
    except LedgerValidationError as e:
        return jsonify({'error': str(e), 'field': e.field}), 400
    return jsonify(record.to_dict()), 201


@api_bp.route('/distributions/<int:record_id>', methods=['DELETE'])
def delete_distribution(record_id):
    """Delete one record. Deleting a missing id is not an error."""
    deleted = _get_ledger().delete(record_id)
    return jsonify({'deleted': deleted, 'id': record_id})


@api_bp.route('/distributions/clear', methods=['POST'])
def clear_distributions():
    """Delete every record. Requires {"confirm": true}."""
    body = _json_object()
    if body is None:
        return _body_error()
    if body.get('confirm') is not True:
        return jsonify({'error': 'Clearing all distributions requires "confirm": true'}), 400
    removed = _get_ledger().clear()
    return jsonify({'cleared': removed})


@api_bp.route('/distributions/summary')
def distribution_summary():
    """Reconcile distributions against the last computed obligation.

    Query Parameters:
        currency: Display currency (default: saved display preference)
    """
    store = get_store()
    currency = (request.args.get('currency') or load_currency_preferences(store)['display_currency']).upper()
    if not is_valid_currency(currency):
        return jsonify({'error': f'Invalid currency: {currency}'}), 400

    obligation = load_last_obligation(store)
    summary = _get_ledger().reconcile(obligation['amount_usd'], currency)
    return jsonify(summary.to_dict())


@api_bp.route('/distributions/export.csv')
def export_distributions():
    """Download the ledger as CSV."""
    filename = f"Zakat-Distribution-{get_today().isoformat()}.csv"
    return Response(
        _get_ledger().export_csv(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )


@api_bp.route('/prices/hint')
def price_hint():
    """Return the last known gold and silver prices (USD per gram)."""
    return jsonify({'metals': get_price_hint_cell().snapshot()})


@api_bp.route('/prices/refresh', methods=['POST'])
def price_refresh():
    """Try to refresh live prices. Failures keep the last known values."""
    return jsonify({'metals': refresh_all()})
