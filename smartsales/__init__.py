"""Flask application factory."""
import logging

from flask import Flask, jsonify, request

from smartsales.database import init_db

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'


def configure_logging(app):
    """Console logging plus an optional log file, both at LOG_LEVEL."""
    level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger('smartsales')
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    log_file = app.config.get('LOG_FILE')
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    app.logger.setLevel(level)


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app)

    # Initialize database
    init_db(app)

    # Stores selected by STORE_BACKEND
    from smartsales.repositories import init_stores
    init_stores(app)

    # Error Handlers
    from smartsales.exceptions import SmartSalesError

    @app.errorhandler(SmartSalesError)
    def handle_smartsales_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"SmartSalesError [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"SmartSalesError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception on {request.path}: {error}", exc_info=True)
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from smartsales.blueprints.catalog import catalog_bp
    from smartsales.blueprints.customers import customers_bp
    from smartsales.blueprints.sales import sales_bp
    from smartsales.blueprints.reports import reports_bp

    app.register_blueprint(catalog_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(reports_bp)

    # Register CLI commands
    from smartsales.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(
        f"Smart Sales ready: backend={app.config.get('STORE_BACKEND')}, "
        f"atomic_stock={app.config.get('ATOMIC_STOCK_DECREMENT')}"
    )

    return app
