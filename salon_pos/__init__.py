"""Flask application factory."""
from flask import Flask, request, jsonify
from flask_wtf.csrf import CSRFProtect, CSRFError
from salon_pos.database import init_db
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Initialize CSRF protection
    csrf = CSRFProtect(app)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        app.logger.warning(f"CSRF Error: {e.description}")
        return jsonify({'status': 'error', 'message': 'Session expired. Reload the page.'}), 400

    # Sentry error tracking in production
    if os.getenv('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Redis cache (catalog reads)
    from salon_pos.services.cache_service import init_cache
    init_cache(app)

    # Prometheus metrics instrumentation
    from salon_pos.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: trust X-Forwarded-* from the reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Initialize database
    init_db(app)

    # Load account context, then apply the licensing paywall
    from salon_pos.middleware import load_user_context
    from salon_pos.middleware.license_gate import check_license_gate

    @app.before_request
    def before_request_handler():
        """Load account context for each request and gate unlicensed accounts."""
        load_user_context()
        return check_license_gate()

    # Error Handlers
    from salon_pos.exceptions import PosError

    @app.errorhandler(PosError)
    def handle_pos_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"PosError [{error.status_code}]: {error.message}")
        else:
            app.logger.info(f"PosError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'status': 'error', 'message': 'Method Not Allowed'}), 405

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.exception(f"Unhandled Exception on {request.path}: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    # Register blueprints
    from salon_pos.blueprints.pos import pos_bp
    from salon_pos.blueprints.inventory import inventory_bp
    from salon_pos.blueprints.appointments import appointments_bp
    from salon_pos.blueprints.settings import settings_bp
    from salon_pos.blueprints.license import license_bp
    from salon_pos.blueprints.metrics import metrics_bp

    app.register_blueprint(pos_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(appointments_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(license_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from salon_pos.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
