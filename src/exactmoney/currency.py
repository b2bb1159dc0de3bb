"""
currency.py — Currency value object and interning registry

================================================================================
DESIGN
================================================================================

A Currency is a code plus an exponent (number of minor-unit decimals).
Two currencies are equal iff BOTH match: EUR/2 and EUR/3 are distinct, which
lets callers keep sub-cent accumulation buckets next to regular EUR amounts.

Instances are interned by a CurrencyRegistry keyed on (code, exponent).
Interning is an optimisation only; equality is always value-based.

    from exactmoney.currency import Currency

    eur = Currency.value_of("EUR")                          # EUR, exponent 2
    xts = Currency.value_of({"code": "XTS", "exponent": 8})  # custom precision

================================================================================
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterable, Optional, Union
import logging
import threading

from .errors import InvalidCurrencyError


logger = logging.getLogger(__name__)

# Exponent implied by a bare currency code
DEFAULT_EXPONENT = 2

CurrencyDefinition = Mapping
CurrencyLike = Union["Currency", str, CurrencyDefinition]


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 style currency.

    Attributes:
        code: identifier, usually a three-letter ISO 4217 code
        exponent: digits after the decimal separator (2 for cents, 0 for JPY)
    """
    code: str
    exponent: int = DEFAULT_EXPONENT

    def __post_init__(self) -> None:
        if not isinstance(self.code, str) or not self.code:
            raise InvalidCurrencyError(f"Invalid currency code {self.code!r}")
        if (
            isinstance(self.exponent, bool)
            or not isinstance(self.exponent, int)
            or self.exponent < 0
        ):
            raise InvalidCurrencyError(
                f"Invalid exponent {self.exponent!r} for currency {self.code}"
            )

    @property
    def multiplier(self) -> int:
        """Major -> minor unit conversion factor."""
        return 10 ** self.exponent

    @classmethod
    def value_of(
        cls,
        value: CurrencyLike,
        registry: Optional[CurrencyRegistry] = None,
    ) -> Currency:
        """Resolves a code, a {code, exponent} mapping or a Currency."""
        return (registry or default_registry).value_of(value)

    @classmethod
    def from_json(
        cls,
        value: Union[str, CurrencyDefinition],
        registry: Optional[CurrencyRegistry] = None,
    ) -> Currency:
        return cls.value_of(value, registry)

    def equals(
        self,
        other: object,
        registry: Optional[CurrencyRegistry] = None,
    ) -> bool:
        """
        Value equality against any currency-like input. Never raises.

        Accepted variants:
            Currency  compared on code and exponent
            str       resolved like Currency.value_of(code) would resolve it
            Mapping   compared on its "code" and "exponent" entries
        Anything else, None included, is not equal.
        """
        if isinstance(other, Currency):
            return self.code == other.code and self.exponent == other.exponent
        if isinstance(other, str):
            if not other:
                return False
            resolved = (registry or default_registry).resolve_code(other)
            return self.equals(resolved)
        if isinstance(other, Mapping):
            exponent = other.get("exponent")
            return (
                self.code == other.get("code")
                and not isinstance(exponent, bool)
                and self.exponent == exponent
            )
        return False

    def to_json(
        self, registry: Optional[CurrencyRegistry] = None
    ) -> Union[str, dict]:
        """
        Bare code when the code alone resolves back to this currency,
        otherwise the full definition. Never drops a custom exponent.
        """
        if (registry or default_registry).resolve_code(self.code) == self:
            return self.code
        return {"code": self.code, "exponent": self.exponent}

    def __str__(self) -> str:
        return self.code


class CurrencyRegistry:
    """
    Interning store for Currency instances.

    Holds two tables:
    - interned currencies keyed by (code, exponent)
    - code bindings for predefined currencies whose exponent differs from
      DEFAULT_EXPONENT (e.g. JPY -> 0), used when resolving a bare code

    Insert-if-absent is atomic, so concurrent first use of a currency
    returns one shared instance. Registries are independent; pass one
    explicitly where the process-wide default is not wanted.
    """

    def __init__(self, currencies: Iterable[Currency] = ()):
        self._lock = threading.Lock()
        self._interned: dict[tuple[str, int], Currency] = {}
        self._by_code: dict[str, Currency] = {}
        for currency in currencies:
            self.register(currency)

    def register(self, currency: Currency) -> Currency:
        """Binds ``currency.code`` to this currency and interns it."""
        with self._lock:
            interned = self._interned.setdefault(
                (currency.code, currency.exponent), currency
            )
            self._by_code[currency.code] = interned
        return interned

    def get(self, code: str) -> Optional[Currency]:
        """The currency bound to ``code`` by register(), if any."""
        return self._by_code.get(code)

    def resolve_code(self, code: str) -> Currency:
        """
        What a bare code means in this registry, without interning.

        Registered code -> that currency; otherwise DEFAULT_EXPONENT.
        """
        bound = self._by_code.get(code)
        if bound is not None:
            return bound
        return Currency(code, DEFAULT_EXPONENT)

    def intern(self, currency: Currency) -> Currency:
        """Returns the shared instance equal to ``currency``."""
        key = (currency.code, currency.exponent)
        existing = self._interned.get(key)
        if existing is not None:
            return existing
        with self._lock:
            existing = self._interned.setdefault(key, currency)
        if existing is currency:
            logger.debug("Interned currency %s/%d", currency.code, currency.exponent)
        return existing

    def value_of(self, value: CurrencyLike) -> Currency:
        """
        Resolves currency input.

        Raises:
            InvalidCurrencyError: on None, malformed definitions or
                unsupported input types.
        """
        if value is None:
            raise InvalidCurrencyError(f"Invalid currency '{value}'")
        if isinstance(value, Currency):
            return self.intern(value)
        if isinstance(value, str):
            return self.intern(self.resolve_code(value))
        if isinstance(value, Mapping):
            if "code" not in value or "exponent" not in value:
                raise InvalidCurrencyError(
                    f"Currency definition needs code and exponent, got {dict(value)!r}"
                )
            return self.intern(Currency(value["code"], value["exponent"]))
        raise InvalidCurrencyError(
            f"Invalid currency of type {type(value).__name__}: {value!r}"
        )

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, Currency):
            return False
        return (value.code, value.exponent) in self._interned

    def __len__(self) -> int:
        return len(self._interned)


# ==============================================================================
# PREDEFINED CURRENCIES
# ==============================================================================

EUR = Currency("EUR", 2)
USD = Currency("USD", 2)
FIM = Currency("FIM", 2)
DKK = Currency("DKK", 2)
JPY = Currency("JPY", 0)

# Process-wide registry, built once at import time
default_registry = CurrencyRegistry([EUR, USD, FIM, DKK, JPY])
