"""The seed blueprint."""

from flask import Blueprint

bp = Blueprint("seed", __name__)

from . import routes  # noqa: E402

__all__ = ["routes"]
