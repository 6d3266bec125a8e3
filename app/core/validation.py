from typing import Optional

from email_validator import EmailNotValidError, validate_email

from app.core.exceptions import ValidationError


def normalize_email(email: Optional[str]) -> str:
    """Trim, lower-case and syntax-check an email address. Raises ValidationError (400)."""
    if not email or not email.strip():
        raise ValidationError("Email is required")
    candidate = email.strip().lower()
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Invalid email address")
    return candidate


def clean_optional(text: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; empty strings become None"""
    if text is None:
        return None
    text = text.strip()
    return text or None
