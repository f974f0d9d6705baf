"""Decorators for the auth package."""

from functools import wraps

from flask import g, jsonify


def login_required(f):
    """Reject the request with 401 unless a signed-in user was loaded into g.

    Usage:
    @login_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get("user") is None:
            return jsonify({"error": "Authentication required."}), 401
        return f(*args, **kwargs)

    return decorated_function
