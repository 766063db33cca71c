"""Currency rounding policy.

Amounts are quantized to the minor unit (one millime, 0.001 TND) with
ROUND_HALF_UP. Each withheld amount is quantized once it is computed, never
inside bracket accumulation.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from paycore.exceptions import ValidationError

MINOR_UNIT = Decimal("0.001")
ZERO = Decimal("0")


def quantize(amount: Decimal) -> Decimal:
    """Round an amount to the currency minor unit, half up."""
    return amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


def to_decimal(value: object, field: str = "amount") -> Decimal:
    """Coerce caller input to a finite Decimal.

    Floats go through ``str()`` so 0.1 stays 0.1 rather than its binary
    expansion.
    """
    if isinstance(value, bool):
        raise ValidationError(field, f"expected a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(field, f"not a number: {value!r}") from None
    else:
        raise ValidationError(field, f"expected a number, got {type(value).__name__}")
    if not result.is_finite():
        raise ValidationError(field, f"must be finite, got {value!r}")
    return result


def format_amount(amount: Decimal, currency: str = "TND") -> str:
    """Format an amount with three decimals and a currency suffix."""
    return f"{quantize(amount):.3f} {currency}"
