"""
Admin payload validation.

Runs before any storage call; problems are collected per field and
reported together as one ValidationException.
"""

from typing import Any, Dict

from common.utils.exceptions import ValidationException
from common.utils.validation import is_blank, validate_email, validate_password
from powershield.models import AdminRole

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6


def validate_admin_data(data: Dict[str, Any], partial: bool = False) -> None:
    """
    Check an admin create (or, with ``partial``, update) payload.

    On update only the fields present are checked.

    Raises:
        ValidationException: With per-field messages
    """
    errors: Dict[str, str] = {}

    if not partial or "username" in data:
        username = data.get("username")
        if is_blank(username):
            errors["username"] = "Username is required"
        elif len(username.strip()) < USERNAME_MIN_LENGTH:
            errors["username"] = f"Username must be at least {USERNAME_MIN_LENGTH} characters long"

    if not partial or "email" in data:
        email = data.get("email")
        if is_blank(email):
            errors["email"] = "Email is required"
        elif not validate_email(email):
            errors["email"] = "Valid email is required"

    if not partial or data.get("password"):
        password_errors = validate_password(data.get("password"), min_length=PASSWORD_MIN_LENGTH)
        if password_errors:
            errors["password"] = password_errors[0]

    role = data.get("role")
    if role is not None and role not in {r.value for r in AdminRole}:
        errors["role"] = "Role must be either admin or super_admin"

    if errors:
        raise ValidationException(errors=errors)
