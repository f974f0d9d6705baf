"""Custom exception classes for the application."""

from __future__ import annotations


def _article(word):
    return "an" if word[:1].lower() in ("a", "e", "i", "o", "u") else "a"


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class PermissionDenied(AppError):
    """Raised when a group role does not allow the attempted action."""

    def __init__(self, action, actor_role=None, target_role=None, message=None):
        """Initialize the error with the action and the roles involved."""
        self.action = action
        self.actor_role = actor_role
        self.target_role = target_role
        if message is None:
            actor = actor_role.value if actor_role else "non-member"
            message = f"{_article(actor).title()} {actor} may not {action}"
            if target_role:
                message += f" {_article(target_role.value)} {target_role.value}"
            message += "."
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class ConflictError(AppError):
    """Raised when a write would break an invariant of the stored data."""

    def __init__(self, message="Conflicting state."):
        """Initialize the error."""
        super().__init__(message, 409)
