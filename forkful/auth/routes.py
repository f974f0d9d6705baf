"""Routes for the auth blueprint."""

from flask import jsonify
from flask_wtf.csrf import generate_csrf

from . import bp


@bp.route("/csrf-token", methods=["GET"])
def csrf_token():
    """Issue the CSRF token clients send back in the X-CSRFToken header."""
    return jsonify({"csrfToken": generate_csrf()})
