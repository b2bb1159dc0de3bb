"""
amount.py — Decimal glue between user input, Money and minor units

All monetary arithmetic goes through decimal.Decimal. Floats are accepted at
the boundary only and are converted through their shortest repr, so
``99.995`` behaves like the literal ``"99.995"`` instead of the binary value
``99.99499999...``.
"""

from __future__ import annotations
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from fractions import Fraction
from typing import Union
import math

from .errors import InvalidAmountError


# Minimum significant digits for intermediate results (mul, div, convert)
DECIMAL_PRECISION = 50

# Commercial rounding: 0.5 -> 1, -0.5 -> -1
ROUNDING = ROUND_HALF_UP

AmountLike = Union[str, int, float, Decimal, Fraction]


def _width(values: tuple) -> int:
    """Digits needed to hold any sum or product of ``values`` exactly."""
    if not values:
        return 0
    top = max(max(v.adjusted() for v in values), 0)
    bottom = min(min(v.as_tuple().exponent for v in values), 0)
    return top - bottom + 1 + sum(len(v.as_tuple().digits) for v in values)


def decimal_context(*operands: Decimal, places: int = 0):
    """
    Local decimal context with the library's rounding.

    Precision is DECIMAL_PRECISION widened by the size of ``operands`` and
    by ``places`` result decimals, so sums and products of the operands are
    exact and quotients keep DECIMAL_PRECISION digits beyond them.
    """
    prec = DECIMAL_PRECISION + _width(operands) + places
    return localcontext(Context(prec=prec, rounding=ROUNDING))


def to_decimal(value: AmountLike) -> Decimal:
    """
    Converts a user-supplied amount to a finite Decimal.

    Raises:
        InvalidAmountError: for bool, NaN, infinities, unparsable strings
            or unsupported types.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidAmountError(f"Invalid amount {value!r}")
        result = Decimal(repr(value))
    elif isinstance(value, Fraction):
        with decimal_context():
            result = Decimal(value.numerator) / Decimal(value.denominator)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidAmountError(f"Invalid amount {value!r}") from None
    else:
        raise InvalidAmountError(
            f"Invalid amount of type {type(value).__name__}: {value!r}"
        )

    if not result.is_finite():
        raise InvalidAmountError(f"Invalid amount {value!r}")
    return result


def quantize(value: Decimal, exponent: int) -> Decimal:
    """
    Rounds half up to exactly ``exponent`` decimal places.

    Raises:
        InvalidAmountError: the result exceeds the decimal module's limits
            (exponents beyond the context's Emin/Emax).
    """
    try:
        with decimal_context(value, places=exponent):
            result = value.quantize(Decimal(1).scaleb(-exponent), rounding=ROUNDING)
    except InvalidOperation:
        raise InvalidAmountError(
            f"Amount {value} cannot be represented with {exponent} decimals"
        ) from None
    # -0.00 and 0.00 compare equal but print differently
    if result.is_zero():
        return result.copy_abs()
    return result


def to_minor_units(amount: Decimal, exponent: int) -> int:
    """
    Integer count of minor units: ``round(amount * 10**exponent)``.

    Exact for amounts already quantized to ``exponent`` places.
    """
    quantized = quantize(amount, exponent)
    with decimal_context(quantized, places=exponent):
        return int(quantized.scaleb(exponent))


def from_minor_units(units: int, exponent: int) -> Decimal:
    """Inverse of to_minor_units, at exactly ``exponent`` decimal places."""
    value = Decimal(units)
    with decimal_context(value, places=exponent):
        return quantize(value.scaleb(-exponent), exponent)


def format_fixed(amount: Decimal, exponent: int) -> str:
    """Fixed-point string with exactly ``exponent`` decimals, never scientific."""
    return f"{quantize(amount, exponent):f}"
