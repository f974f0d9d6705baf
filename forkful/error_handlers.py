"""JSON error responses for the whole application."""

from flask import Blueprint, current_app, jsonify
from flask_wtf.csrf import CSRFError

from .errors import AppError, PermissionDenied

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(PermissionDenied)
def handle_permission_denied(error):
    """Report a role policy violation along with the roles involved."""
    current_app.logger.warning(f"Permission Denied: {error.message}")
    body = {"error": error.message, "action": error.action}
    if error.actor_role is not None:
        body["actorRole"] = error.actor_role.value
    if error.target_role is not None:
        body["targetRole"] = error.target_role.value
    return jsonify(body), error.status_code


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Handles validation, not-found and conflict errors raised by services."""
    current_app.logger.warning(f"{type(error).__name__}: {error.message}")
    return jsonify({"error": error.message}), error.status_code


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """Handles CSRF errors, which usually mean a missing or stale token."""
    current_app.logger.warning(f"CSRF Error: {e.description}")
    return jsonify({"error": e.description}), 400


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Handles generic 404 errors for routes that don't exist."""
    return jsonify({"error": "Not found."}), 404


@error_handlers_bp.app_errorhandler(405)
def handle_405(e):
    """Handles requests with a method the route does not accept."""
    return jsonify({"error": "Method not allowed."}), 405


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    """Handles unexpected server errors without exposing their details."""
    current_app.logger.error(f"Internal Server Error: {e}")
    return jsonify({"error": "An unexpected error occurred."}), 500
