"""Field-level validation rules for visitor-submitted forms."""

from __future__ import annotations

from typing import Mapping

from email_validator import EmailNotValidError, validate_email


def clean_text_fields(values: Mapping[str, object]) -> tuple[dict[str, str], list[str]]:
    """Trim every value and report the keys that are missing or blank."""
    cleaned: dict[str, str] = {}
    invalid: list[str] = []
    for name, raw in values.items():
        text = raw.strip() if isinstance(raw, str) else ""
        if not text:
            invalid.append(name)
        cleaned[name] = text
    return cleaned, invalid


def is_valid_email(value: str) -> bool:
    """Syntax-only check; no DNS or deliverability lookups."""
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True
