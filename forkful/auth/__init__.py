"""The auth blueprint: session-based access control for the JSON API."""

from flask import Blueprint

bp = Blueprint("auth", __name__)

from . import routes  # noqa: E402

__all__ = ["routes"]
