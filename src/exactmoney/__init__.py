"""
exactmoney — Currency-safe money with exact allocation

Decimal amounts that never drift, currencies that never mix, and an
allocation method that never loses or invents a cent.

================================================================================
QUICK START
================================================================================

    from exactmoney import Money, Currency

    total = Money("10.00", "EUR")

    # Split by ratios (sum ALWAYS equals the original)
    parts = total.allocate({"A": 3, "B": 3, "C": 3})
    # A=3.34, B=3.33, C=3.33

    # Remainders follow rounding rules, not position
    Money("1.00", "EUR").allocate({0: 1, 1: 2})
    # {0: 0.33, 1: 0.67}

    # Custom precision, e.g. sub-cent accumulation buckets
    eur4 = Currency.value_of({"code": "EUR", "exponent": 4})
    Money("0.12345", eur4)            # 0.1235 EUR

    # Mixing currencies is an error
    total.plus(Money("1.00", "USD"))  # CurrencyError

The library logs through the standard logging module under the
"exactmoney" logger and is silent unless the application configures it.

================================================================================
"""

import logging

from .core import Money
from .currency import (
    Currency,
    CurrencyRegistry,
    DEFAULT_EXPONENT,
    default_registry,
    EUR,
    USD,
    FIM,
    DKK,
    JPY,
)
from .allocation import allocate_minor_units
from .errors import (
    MoneyError,
    InvalidCurrencyError,
    CurrencyError,
    InvalidAmountError,
    AllocationError,
    NoRatiosError,
    InvalidRatioError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Core
    "Money",
    "Currency",
    "CurrencyRegistry",
    "DEFAULT_EXPONENT",
    "default_registry",
    "allocate_minor_units",
    # Predefined currencies
    "EUR",
    "USD",
    "FIM",
    "DKK",
    "JPY",
    # Errors
    "MoneyError",
    "InvalidCurrencyError",
    "CurrencyError",
    "InvalidAmountError",
    "AllocationError",
    "NoRatiosError",
    "InvalidRatioError",
]
