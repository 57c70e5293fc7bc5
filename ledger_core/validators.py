"""Validation helpers shared across ledger operations."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Sequence

from .exceptions import AccountNotFoundError, InvalidAmountError, ValidationError
from .models import ACCOUNT_TYPES, parse_date


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a positive, finite Decimal with exactly two fraction digits."""
    if raw is None or isinstance(raw, bool):
        raise InvalidAmountError(f"{field} must be a numeric value")
    text = raw.strip() if isinstance(raw, str) else str(raw)
    try:
        amount = Decimal(text)
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise InvalidAmountError(f"{field} must be a numeric value") from exc

    # NaN does not support ordering comparisons, so check finiteness first.
    if not amount.is_finite():
        raise InvalidAmountError(f"{field} must be a finite number")
    if amount <= 0:
        raise InvalidAmountError(f"{field} must be greater than zero")

    quantized = _quantize_two_decimals(amount)
    if quantized <= 0:
        raise InvalidAmountError(f"{field} must be at least 0.01")
    return quantized


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_date(value: object, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_date(value)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)") from exc
    raise ValidationError(f"{field} must be a date or ISO date string")


def validate_account_type(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise AccountNotFoundError("account type must be a non-empty string")
    canonical = value.strip().lower()
    if canonical not in ACCOUNT_TYPES:
        raise AccountNotFoundError(
            f"Unknown account '{value}'. Expected one of: {', '.join(ACCOUNT_TYPES)}"
        )
    return canonical


def validate_index(value: object, items: Sequence[object], field: str = "index") -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        index = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{field} must be an integer") from exc
    if index < 0 or index >= len(items):
        raise ValidationError(f"{field} {index} is out of range")
    return index
