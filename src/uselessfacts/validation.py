"""Input checks applied at the repository boundary."""

from .errors import ValidationError
from .models import CATEGORIES

MIN_TEXT_LENGTH = 10
MAX_TEXT_LENGTH = 500
MIN_PASSWORD_LENGTH = 6


def validate_text(text: str | None) -> str:
    """Check fact text and return it stripped.

    Raises:
        ValidationError: If text is missing or outside the allowed length.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("Fact text is required")

    text = text.strip()
    if len(text) < MIN_TEXT_LENGTH:
        raise ValidationError(f"Fact must be at least {MIN_TEXT_LENGTH} characters")
    if len(text) > MAX_TEXT_LENGTH:
        raise ValidationError(f"Fact must be less than {MAX_TEXT_LENGTH} characters")
    return text


def validate_category(category: str | None, allow_custom: bool = False) -> str:
    """Check a category name.

    Args:
        category: The category to check.
        allow_custom: Accept any non-empty category, not just CATEGORIES.

    Raises:
        ValidationError: If the category is empty or unknown.
    """
    if not isinstance(category, str) or not category.strip():
        raise ValidationError("Please select a category")

    category = category.strip()
    if not allow_custom and category not in CATEGORIES:
        raise ValidationError(
            f"Unknown category '{category}'. Choose one of: {', '.join(CATEGORIES)}"
        )
    return category


def validate_submitter(name: str | None) -> str:
    """Check the submitter name of a public submission."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required")
    return name.strip()


def validate_optional(value: str | None, field_name: str) -> str | None:
    """Normalize an optional text field: blank becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value.strip() or None


def validate_new_password(password: str, confirm: str) -> None:
    """Check a new admin password and its confirmation.

    Raises:
        ValidationError: If too short or the confirmation does not match.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )
    if password != confirm:
        raise ValidationError("Passwords do not match")
