"""
Module: geoacct_kernel.db.types
Responsibility: Annotated column type aliases and the sanctioned rounding
    helpers for monetary amounts and percentages.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, selectors/ and the engines.  MUST NOT import from those layers.
Invariants enforced:
    - No floats: monetary amounts are Decimal end to end.
    - round_money() is the ONLY sanctioned rounding function for amounts that
      are posted or persisted; round_percent() is the only one for reported
      percentages, applied at result boundaries.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated

from sqlalchemy import Numeric, String

from geoacct_kernel.exceptions import ValidationError

# 38 digits total, 9 decimal places
Money = Annotated[Decimal, Numeric(38, 9)]

AccountCode = Annotated[str, String(20)]
ShortCode = Annotated[str, String(50)]
LongText = Annotated[str, String(4000)]

MONEY_DECIMAL_PLACES = 2
PERCENT_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: object, field: str = "amount") -> Decimal:
    """
    Coerce an int/str/Decimal into Decimal.

    Floats are accepted only through their string form so a caller's
    ``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.

    Raises:
        ValidationError: if the value is not numeric.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be numeric", field=field, value=value)
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation as exc:
            raise ValidationError(
                f"{field} must be numeric", field=field, value=value,
            ) from exc
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        raise ValidationError(f"{field} must be numeric", field=field, value=value)
    if not result.is_finite():
        raise ValidationError(f"{field} must be finite", field=field, value=value)
    return result


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary amount to the specified decimal places.

    Preconditions: value is a Decimal.
    Postconditions: Returns a Decimal quantized to ``decimal_places``.
    """
    quantizer = Decimal(10) ** -decimal_places
    return value.quantize(quantizer, rounding=rounding)


def round_percent(value: Decimal) -> Decimal:
    """Round a percentage for reporting."""
    return round_money(value, PERCENT_DECIMAL_PLACES)


def percent_of(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator * 100`` at full precision; 0 when denominator is 0."""
    if denominator == ZERO:
        return ZERO
    return numerator / denominator * HUNDRED
