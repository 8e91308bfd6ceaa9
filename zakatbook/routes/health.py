"""Health check endpoint."""
from flask import Blueprint, current_app, jsonify

from zakatbook.services.config import get_price_hint_config

health_bp = Blueprint('health', __name__)


@health_bp.route('/healthz')
def healthz():
    """Return health status along with the active ledger and price hint settings."""
    return jsonify({
        'status': 'ok',
        'ledger': current_app.config['LEDGER_NAME'],
        'price_hint': get_price_hint_config(),
    })
