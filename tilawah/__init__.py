"""Initialize the Flask app and the Firebase Admin SDK."""

import os

from flask import Flask

from .constants import DEFAULT_DISPATCH_MAX_WORKERS, DEFAULT_TIMEZONE
from .context import initialize_firebase


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        SEED_TOKEN=os.environ.get("SEED_TOKEN"),
        SEED_DEFAULT_PASSWORD=os.environ.get("SEED_DEFAULT_PASSWORD"),
        WEEKLY_RESET_TIMEZONE=os.environ.get("WEEKLY_RESET_TIMEZONE")
        or DEFAULT_TIMEZONE,
        DISPATCH_MAX_WORKERS=int(
            os.environ.get("DISPATCH_MAX_WORKERS") or DEFAULT_DISPATCH_MAX_WORKERS
        ),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        initialize_firebase()

    # Register blueprints
    from . import seed as seed_bp

    app.register_blueprint(seed_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    return app
