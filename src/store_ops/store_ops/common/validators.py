from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import MAX_AMOUNT
from ..core.exceptions import ValidationError

CENTS = Decimal("0.01")


def optional_text(value: Any) -> Optional[str]:
    text = str(value).strip() if value is not None else ""
    return text or None


def require_int(value: Any, field_name: str, *, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError(f"{field_name} is required")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum}")
    return number


def require_id(value: Any, field_name: str) -> int:
    return require_int(value, field_name, minimum=1)


def to_decimal(value: Any, field_name: str) -> Decimal:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, float):
        # floats arrive from JSON bodies; go through repr to avoid binary noise
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(f"{field_name} is too large")
    try:
        exact = amount == amount.quantize(CENTS)
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not exact:
        raise ValidationError(f"{field_name} must have at most 2 decimal places")
    return amount


def require_non_negative_amount(value: Any, field_name: str) -> Decimal:
    amount = to_decimal(value, field_name)
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return amount


def require_coordinate(value: Any, field_name: str, *, limit: int) -> Decimal:
    coordinate = to_decimal_unbounded(value, field_name)
    if coordinate < -limit or coordinate > limit:
        raise ValidationError(f"{field_name} must be between -{limit} and {limit}")
    return coordinate


def to_decimal_unbounded(value: Any, field_name: str) -> Decimal:
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        raise ValidationError(f"{field_name} is required")
    try:
        number = Decimal(repr(value) if isinstance(value, float) else str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return number


def money(value: Any) -> Decimal:
    """Display precision for monetary values (2 digits, half-up)."""
    if value is None:
        return Decimal("0.00")
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def money_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(money(value))
