"""
Field-level input validation.

Validators collect per-field messages into a dict so a single
ValidationException can report everything that is wrong with a payload.

Example:
    from common.utils import validate_email, validate_password

    errors = {}
    if not validate_email(body.get("email")):
        errors["email"] = "Valid email is required"
    password_errors = validate_password(body.get("password"), min_length=6)
    if password_errors:
        errors["password"] = password_errors[0]
"""

import re
from typing import Any, List, Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_blank(value: Any) -> bool:
    """True for None, non-strings and whitespace-only strings."""
    return not isinstance(value, str) or not value.strip()


def validate_email(email: Any) -> bool:
    """Check that email looks like local@domain.tld."""
    if is_blank(email):
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def validate_password(
    password: Any,
    min_length: int = 6,
    max_length: int = 128,
    require_uppercase: bool = False,
    require_lowercase: bool = False,
    require_digit: bool = False,
) -> List[str]:
    """
    Validate password strength.

    Args:
        password: The password to validate
        min_length: Minimum password length
        max_length: Maximum password length
        require_uppercase: Require at least one uppercase letter
        require_lowercase: Require at least one lowercase letter
        require_digit: Require at least one digit

    Returns:
        List of error messages, empty when the password is acceptable
    """
    if not isinstance(password, str) or len(password) == 0:
        return ["Password is required"]

    errors: List[str] = []

    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters long")

    if len(password) > max_length:
        errors.append(f"Password must be no more than {max_length} characters")

    if require_uppercase and not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")

    if require_lowercase and not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")

    if require_digit and not re.search(r"\d", password):
        errors.append("Password must contain at least one digit")

    return errors


def require_fields(data: dict, fields: List[str], labels: Optional[dict] = None) -> dict:
    """
    Report every listed field that is missing or blank.

    Args:
        data: Incoming payload
        fields: Field names that must be present and non-blank
        labels: Optional display names keyed by field

    Returns:
        Dict of field -> "<Label> is required"
    """
    labels = labels or {}
    errors = {}
    for field in fields:
        if is_blank(data.get(field)):
            label = labels.get(field, field[:1].upper() + field[1:])
            errors[field] = f"{label} is required"
    return errors
