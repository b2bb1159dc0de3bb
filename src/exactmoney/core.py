"""
core.py — Money value object

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   decimal.Decimal, always quantized to currency.exponent places on
   construction (ROUND_HALF_UP). Never float.

2. CURRENCY SAFETY
   plus/minus/comparisons between different currencies raise CurrencyError.
   Same code with a different exponent is a different currency.

3. IMMUTABILITY
   Frozen dataclass. Every operation returns a new instance.

4. EXACT ALLOCATION
   allocate(ratios) works on integer minor units and guarantees
   sum(parts) == original. See allocation.py.

5. SERIALIZATION
   to_json() -> {"amount": "<fixed string>", "currency": <code | definition>}
   The amount is a string, never a float.

================================================================================
USAGE
================================================================================

    from exactmoney import Money

    price = Money("10.00", "EUR")
    shares = price.allocate({"A": 5, "B": 2})
    # {"A": Money('7.14', 'EUR'), "B": Money('2.86', 'EUR')}

    price.plus(Money("1.00", "USD"))   # CurrencyError

================================================================================
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Hashable, Optional, TypeVar, Union

from .allocation import RatioLike, allocate_minor_units
from .amount import (
    AmountLike,
    decimal_context,
    format_fixed,
    from_minor_units,
    quantize,
    to_decimal,
    to_minor_units,
)
from .currency import Currency, CurrencyLike, CurrencyRegistry
from .errors import CurrencyError, InvalidAmountError


K = TypeVar("K", bound=Hashable)
MoneyLike = Union["Money", Mapping]

_SCALARS = (int, float, Decimal, Fraction)


@dataclass(frozen=True, slots=True, eq=False)
class Money:
    """
    An amount of money in a specific currency.

    INVARIANTS:
    1. amount has exactly currency.exponent decimal places
    2. currency is a Currency instance
    3. arithmetic between different currencies raises CurrencyError
    4. sum(allocate(ratios).values()) == self

    Adapted from Fowler's Money pattern (Patterns of Enterprise Application
    Architecture, pp. 488-495), with a remainder policy that follows
    rounding rules instead of favouring the first buckets.
    """
    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        currency = self.currency
        if currency is None or (not isinstance(currency, Currency) and not currency):
            raise CurrencyError("Undefined currency")
        if not isinstance(currency, Currency):
            currency = Currency.value_of(currency)

        object.__setattr__(self, "currency", currency)
        object.__setattr__(
            self, "amount", quantize(to_decimal(self.amount), currency.exponent)
        )

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def of(
        cls,
        amount: AmountLike,
        currency: CurrencyLike,
        registry: Optional[CurrencyRegistry] = None,
    ) -> Money:
        """Like Money(amount, currency), resolving the currency in ``registry``."""
        if currency is None:
            raise CurrencyError("Undefined currency")
        return cls(amount, Currency.value_of(currency, registry))

    @classmethod
    def of_minor(
        cls,
        minor_units: int,
        currency: CurrencyLike,
        registry: Optional[CurrencyRegistry] = None,
    ) -> Money:
        """From an integer count of minor units (cents, etc.)."""
        if currency is None:
            raise CurrencyError("Undefined currency")
        resolved = Currency.value_of(currency, registry)
        return cls(from_minor_units(minor_units, resolved.exponent), resolved)

    @classmethod
    def zero(cls, currency: CurrencyLike) -> Money:
        """Zero in the given currency. Handy as the start value for sum()."""
        return cls(0, currency)

    @classmethod
    def value_of(
        cls,
        value: MoneyLike,
        registry: Optional[CurrencyRegistry] = None,
    ) -> Money:
        """
        Money passes through; {"amount", "currency"} mappings are built.
        """
        if isinstance(value, Money):
            return value
        if isinstance(value, Mapping):
            return cls.of(value.get("amount"), value.get("currency"), registry)
        raise TypeError(f"Cannot build Money from {type(value).__name__}")

    @classmethod
    def from_json(
        cls,
        data: Mapping,
        registry: Optional[CurrencyRegistry] = None,
    ) -> Money:
        """Inverse of to_json()."""
        if "amount" not in data:
            raise InvalidAmountError(f"Missing amount in {dict(data)!r}")
        return cls.value_of(data, registry)

    # -------------------------------------------------------------------------
    # Allocation
    # -------------------------------------------------------------------------

    def allocate(self, ratios: Mapping[K, RatioLike]) -> dict[K, Money]:
        """
        Allocates the amount by the given ratios.

        No minor unit is lost or created: the parts always sum to self.

        Args:
            ratios: non-negative ratios, keyed like the result

        Raises:
            NoRatiosError: ratios empty, or all zero while self is not zero
            InvalidRatioError: negative or non-numeric ratio
        """
        allocations = allocate_minor_units(self.minor_units, ratios)
        return {
            key: self._with_amount(from_minor_units(units, self.currency.exponent))
            for key, units in allocations.items()
        }

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def plus(self, value: MoneyLike) -> Money:
        another = Money.value_of(value)
        self._check_same_currency(another)
        with decimal_context(self.amount, another.amount):
            return self._with_amount(self.amount + another.amount)

    def minus(self, value: MoneyLike) -> Money:
        another = Money.value_of(value)
        self._check_same_currency(another)
        with decimal_context(self.amount, another.amount):
            return self._with_amount(self.amount - another.amount)

    def mul(self, multiplier: AmountLike) -> Money:
        """Multiplies by a scalar, rounding half up to the currency exponent."""
        factor = to_decimal(multiplier)
        with decimal_context(self.amount, factor):
            return self._with_amount(self.amount * factor)

    def div(self, divisor: AmountLike) -> Money:
        """
        Divides by a scalar, rounding half up to the currency exponent.

        Raises:
            ZeroDivisionError: divisor is zero
        """
        value = to_decimal(divisor)
        with decimal_context(self.amount, value, places=self.currency.exponent):
            return self._with_amount(self.amount / value)

    def convert_to(
        self,
        currency: CurrencyLike,
        rate: AmountLike,
        registry: Optional[CurrencyRegistry] = None,
    ) -> Money:
        """
        Converts with the given exchange rate.

        The product is rounded to THIS currency's exponent first, then the
        target currency rounds it again to its own exponent.
        """
        factor = to_decimal(rate)
        with decimal_context(self.amount, factor):
            converted = quantize(self.amount * factor, self.currency.exponent)
        return Money.of(converted, currency, registry)

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            raise TypeError(f"Unsupported operation: Money + {type(other).__name__}")
        return self.plus(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            raise TypeError(f"Unsupported operation: Money - {type(other).__name__}")
        return self.minus(other)

    def __mul__(self, factor: AmountLike) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, _SCALARS):
            return NotImplemented
        return self.mul(factor)

    def __rmul__(self, factor: AmountLike) -> Money:
        return self.__mul__(factor)

    def __truediv__(self, divisor: AmountLike) -> Money:
        if isinstance(divisor, bool) or not isinstance(divisor, _SCALARS):
            return NotImplemented
        return self.div(divisor)

    def __neg__(self) -> Money:
        return self._with_amount(-self.amount)

    def __abs__(self) -> Money:
        return self._with_amount(abs(self.amount))

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def equals(self, other: object) -> bool:
        """
        True iff amount and currency both match. Never raises.

        Accepted variants:
            Money    compared on amount and currency
            Mapping  {"amount", "currency"}, amount compared unrounded
        Anything else, None included, is not equal.
        """
        if isinstance(other, Money):
            return self.amount == other.amount and self.currency == other.currency
        if isinstance(other, Mapping):
            if not self.currency.equals(other.get("currency")):
                return False
            try:
                return self.amount == to_decimal(other.get("amount"))
            except InvalidAmountError:
                return False
        return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Money):
            return self.equals(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.amount, self.currency))

    def __lt__(self, other: Money) -> bool:
        self._check_comparable(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._check_comparable(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._check_comparable(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._check_comparable(other)
        return self.amount >= other.amount

    def is_zero(self) -> bool:
        return self.amount.is_zero()

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_negative(self) -> bool:
        return self.amount < 0

    # -------------------------------------------------------------------------
    # Properties and output
    # -------------------------------------------------------------------------

    @property
    def minor_units(self) -> int:
        """Amount as an integer count of minor units."""
        return to_minor_units(self.amount, self.currency.exponent)

    def get_amount(self) -> str:
        """Fixed-point amount, e.g. '7.00', '120', '15.00000000'."""
        return format_fixed(self.amount, self.currency.exponent)

    def to_float(self) -> float:
        """
        Amount as float.

        WARNING: for display and plotting only, never for further arithmetic.
        """
        return float(self.amount)

    def format_amount(
        self,
        decimal_separator: str = ",",
        group_separator: str = "\xa0",
        minus_sign: str = "−",
    ) -> str:
        """
        Amount without currency, digits grouped by thousands.

        Defaults follow Finnish conventions: 2 310,14 and −1,00.
        """
        integer, _, decimals = format_fixed(
            abs(self.amount), self.currency.exponent
        ).partition(".")
        grouped = f"{int(integer):,}".replace(",", group_separator)

        sign = minus_sign if self.is_negative() else ""
        if decimals:
            return f"{sign}{grouped}{decimal_separator}{decimals}"
        return f"{sign}{grouped}"

    def to_json(self, registry: Optional[CurrencyRegistry] = None) -> dict:
        """
        Serializes for persistence/transport.

        Format: {"amount": "7.00", "currency": "EUR"}
                {"amount": "120", "currency": {"code": "XTS", "exponent": 0}}
        """
        return {
            "amount": self.get_amount(),
            "currency": self.currency.to_json(registry),
        }

    def __str__(self) -> str:
        return f"{self.get_amount()} {self.currency}"

    def __repr__(self) -> str:
        return f"Money('{self.get_amount()}', {self.currency.code!r})"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check_same_currency(self, another: Money) -> None:
        if self.currency != another.currency:
            raise CurrencyError(
                f"Expected a money object with currency {self.currency} "
                f"but got {another.currency}"
            )

    def _check_comparable(self, other: object) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot compare Money with {type(other).__name__}")
        self._check_same_currency(other)

    def _with_amount(self, amount: Decimal) -> Money:
        """New Money with the given amount, retaining the currency."""
        return Money(amount, self.currency)
