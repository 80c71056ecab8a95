"""Request payload validators."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from billsplit.core.errors import ValidationError


def require_keys(payload, *keys):
    missing = [k for k in keys if k not in (payload or {})]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return True


def parse_amount(value, field="amount"):
    """Parse a money value into a Decimal rounded to cents."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
