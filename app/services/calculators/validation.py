"""
Input validation helpers shared by the calculator methods.
"""
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from app.services.calculators.exceptions import ValidationError
from app.services.calculators.unit_converter import UnitConverter
from app.utils.constants import MAX_NUMERIC_INPUT

_WHITESPACE = re.compile(r"\s+")
_REFRIGERANT_PREFIX = re.compile(r"^r-?(\d)")


def validate_non_negative(value: Any, field: str) -> Decimal:
    """
    Parse a required, finite, non-negative number.

    Accepts ints, floats, Decimals and numeric strings (thousands separators
    allowed). Booleans are rejected, as are values above MAX_NUMERIC_INPUT.

    Raises:
        ValidationError: naming ``field`` when the value is missing or invalid
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field)

    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise ValidationError(f"{field} must be a number", field=field)

    try:
        number = UnitConverter.normalize_number(value)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}", field=field)

    if not number.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)

    if number < 0:
        raise ValidationError(f"{field} must be greater than or equal to 0", field=field)

    if number > MAX_NUMERIC_INPUT:
        raise ValidationError(
            f"{field} must not exceed {MAX_NUMERIC_INPUT:,}", field=field
        )

    # -0 behaves like 0 but would print as "-0"
    return abs(number) if number == 0 else number


def validate_percentage(value: Any, field: str) -> Decimal:
    number = validate_non_negative(value, field)
    if number > 100:
        raise ValidationError(f"{field} must be between 0 and 100", field=field)
    return number


def validate_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be true or false", field=field)
    return value


def validate_choice(value: Any, choices: type[Enum], field: str) -> Enum:
    """
    Coerce ``value`` to a member of a string enum.

    Raises:
        ValidationError: listing the allowed values
    """
    try:
        return choices(value)
    except ValueError:
        allowed = ", ".join(member.value for member in choices)
        raise ValidationError(
            f"Invalid {field}: {value!r}. Must be one of: {allowed}", field=field
        )


def validate_type(value: Any, field: str) -> str:
    """Require a non-empty type name; returns it stripped and lower-cased."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip().lower()


def normalize_refrigerant_type(value: str) -> str:
    """
    Canonical refrigerant name.

    Example:
        >>> normalize_refrigerant_type("R134a")
        'r-134a'
        >>> normalize_refrigerant_type("R 410A")
        'r-410a'
    """
    name = _WHITESPACE.sub("-", value.strip().lower())
    return _REFRIGERANT_PREFIX.sub(r"r-\1", name)
