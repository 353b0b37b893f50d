"""Decimal utilities for depreciation arithmetic.

Every monetary value that flows through the engine is a ``decimal.Decimal``.
Binary floating point would leave rounding residue across long ledgers, and
the ledger invariants (``sum(amounts) == cost - book_value``) must hold
exactly, so floats are only accepted at the boundary and converted through
their string representation.

Example:
    Convert user input before handing it to the recorder::

        from asset_depreciation.decimal_utils import to_decimal, quantize_currency

        amount = quantize_currency(to_decimal(1234.567))
        # Decimal('1234.57')
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

# Standard precision for monetary results (2 decimal places = cents)
CURRENCY_PLACES = Decimal("0.01")

ZERO = Decimal("0.00")
ONE = Decimal("1.00")

# Anything the public API accepts where a monetary amount is expected.
Amount = Union[Decimal, float, int, str]


def to_decimal(value: Union[float, int, str, Decimal, None]) -> Decimal:
    """Convert a numeric value to Decimal.

    Floats are converted via their (rounded) string representation to avoid
    binary floating point artifacts such as ``0.1 -> 0.1000000000000000055``.

    Args:
        value: Numeric value to convert. None is converted to zero.

    Returns:
        Decimal representation of the value.

    Raises:
        decimal.InvalidOperation: If a string cannot be parsed as a number.

    Example:
        >>> to_decimal(1234.56)
        Decimal('1234.56')
        >>> to_decimal(None)
        Decimal('0.00')
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean values are not valid monetary amounts")
    if isinstance(value, float):
        # Round to reasonable precision first to avoid artifacts like 0.1 -> 0.10000000000000001
        return Decimal(str(round(value, 10)))
    return Decimal(value)


def quantize_currency(value: Union[Decimal, float, int]) -> Decimal:
    """Quantize a value to currency precision (2 decimal places).

    Rounds using ROUND_HALF_UP, the usual convention for financial figures.

    Args:
        value: Numeric value to quantize.

    Returns:
        Decimal rounded to 2 decimal places.

    Example:
        >>> quantize_currency(Decimal("1234.567"))
        Decimal('1234.57')
        >>> quantize_currency(1234.565)
        Decimal('1234.57')
    """
    if not isinstance(value, Decimal):
        value = to_decimal(value)
    return value.quantize(CURRENCY_PLACES, rounding=ROUND_HALF_UP)
