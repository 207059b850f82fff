"""Routes for seeding sample data."""

import secrets

from flask import current_app, jsonify, request

from tilawah.context import get_context
from tilawah.errors import ConfigurationError

from . import bp
from .services import DEFAULT_SEED_PASSWORD, SeedService

SEED_TOKEN_HEADER = "x-seed-token"  # nosec B105


@bp.route("/seed", methods=["POST"])
def seed_sample_data():
    """Load the sample community, gated by a shared secret header."""
    required_token = current_app.config.get("SEED_TOKEN")
    if not required_token:
        raise ConfigurationError("Seed token not configured. Set SEED_TOKEN.")

    provided_token = request.headers.get(SEED_TOKEN_HEADER, "")
    if not secrets.compare_digest(
        provided_token.encode("utf-8"), required_token.encode("utf-8")
    ):
        return jsonify(error="Invalid seed token."), 403

    try:
        SeedService.run_seed(
            get_context(current_app.config["DISPATCH_MAX_WORKERS"]),
            password=current_app.config.get("SEED_DEFAULT_PASSWORD")
            or DEFAULT_SEED_PASSWORD,
        )
    except Exception as e:
        current_app.logger.error(f"Seeding failed: {e}")
        return jsonify(error=str(e)), 500

    return jsonify(status="ok"), 200
