"""Flask application factory for the Zakat calculator and distribution ledger."""
import logging
import os
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


logger = logging.getLogger('zakatbook')


def create_app(config: dict | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Optional configuration dictionary to override defaults.

    Returns:
        Configured Flask application instance.
    """
    from zakatbook.services.config import (
        get_data_dir,
        get_ledger_name,
        get_log_level,
        is_background_refresh_enabled,
    )

    logging.basicConfig(
        level=get_log_level(),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )

    app = Flask(__name__)

    # Trust X-Forwarded-For from reverse proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    # Default configuration
    app.config.update(
        JSON_SORT_KEYS=False,
        DATA_DIR=get_data_dir(),
        LEDGER_NAME=get_ledger_name(),
    )

    # Override with provided config
    if config:
        app.config.update(config)

    # Initialize database
    from zakatbook import db
    db.init_app(app)

    # Register CLI commands
    from zakatbook import cli
    cli.register_cli(app)

    # Register blueprints
    from zakatbook.routes.health import health_bp
    from zakatbook.routes.api import api_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(api_bp, url_prefix='/api/v1')

    # Background price hints (opt-in, never in tests)
    if is_background_refresh_enabled() and not app.config.get('TESTING'):
        from zakatbook.services.price_hint import start_price_refresher
        start_price_refresher()

    logger.info(f"App created, data dir {os.path.abspath(app.config['DATA_DIR'])}")
    return app
