from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E")

# Largest value a DECIMAL(12, 2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_enum(enum_cls: Type[E], value, field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)  # type: ignore[attr-defined]
        raise ValidationError(f"Invalid {field_name}: {value!r} (expected one of: {allowed})")


def require_positive_amount(value, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a positive number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field_name} must be a positive number")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field_name} must not exceed {MAX_AMOUNT}")
    try:
        return amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError(f"{field_name} must be a positive number")
