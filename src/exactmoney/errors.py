"""
errors.py — Error taxonomy for exactmoney

Every error is raised synchronously to the caller. Nothing here is retried
or recovered: a value library has no I/O to retry against.

    MoneyError
    ├── InvalidCurrencyError   (ValueError)  bad currency input
    ├── CurrencyError          (TypeError)   mixed or missing currency
    ├── InvalidAmountError     (ValueError)  unparsable or unrepresentable amount
    └── AllocationError        (ValueError)
        ├── NoRatiosError                    nothing to allocate against
        └── InvalidRatioError                negative or non-numeric ratio

Operand types that are not money at all raise plain TypeError, like any
Python operator would: Money + 1, Money < 2, Money * Money and
Money.value_of("2.50 EUR"). CurrencyError is a TypeError too, so a single
``except TypeError`` catches both.
"""


class MoneyError(Exception):
    """Base class for all exactmoney errors."""


class InvalidCurrencyError(MoneyError, ValueError):
    """Currency input is None or malformed."""


class CurrencyError(MoneyError, TypeError):
    """Two Money operands have different currencies, or a currency is missing."""


class InvalidAmountError(MoneyError, ValueError):
    """Amount cannot be represented as a finite decimal."""


class AllocationError(MoneyError, ValueError):
    """Allocation preconditions are not met."""


class NoRatiosError(AllocationError):
    def __init__(self, message: str = "No ratios defined"):
        super().__init__(message)


class InvalidRatioError(AllocationError):
    pass
