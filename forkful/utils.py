"""Helpers shared by the blueprints."""

from __future__ import annotations

from typing import Any

from flask_wtf import FlaskForm

from .errors import ValidationError


def validate_form(form: FlaskForm) -> FlaskForm:
    """Validate a submitted form, raising ValidationError with the first problem."""
    if form.validate_on_submit():
        return form
    for field_name, messages in form.errors.items():
        if messages:
            field = getattr(form, field_name, None)
            label = field.label.text if field is not None else field_name
            raise ValidationError(f"{label}: {messages[0]}")
    raise ValidationError()


def serialize_doc(data: dict[str, Any]) -> dict[str, Any]:
    """Make a Firestore document JSON friendly."""
    result = {}
    for key, value in data.items():
        if hasattr(value, "isoformat"):
            result[key] = value.isoformat()
        elif isinstance(value, dict):
            result[key] = serialize_doc(value)
        elif isinstance(value, list):
            result[key] = [
                serialize_doc(v) if isinstance(v, dict) else v for v in value
            ]
        else:
            result[key] = value
    return result
