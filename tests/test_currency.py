"""
test_currency.py — Test suite for Currency and CurrencyRegistry
"""

import logging
import threading

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from exactmoney import (
    Currency,
    CurrencyRegistry,
    DEFAULT_EXPONENT,
    default_registry,
    EUR,
    JPY,
    InvalidCurrencyError,
)


# ==============================================================================
# UNIT TESTS: value_of
# ==============================================================================

class TestValueOf:
    """Test for Currency.value_of()."""

    def test_code_string(self):
        assert Currency.value_of("EUR") == EUR

    def test_code_string_returns_predefined_instance(self):
        assert Currency.value_of("EUR") is EUR

    def test_unknown_code_defaults_to_two_decimals(self):
        currency = Currency.value_of("XTS")

        assert currency.code == "XTS"
        assert currency.exponent == DEFAULT_EXPONENT == 2

    def test_predefined_code_keeps_its_exponent(self):
        assert Currency.value_of("JPY").exponent == 0

    def test_custom_definition(self):
        currency = Currency.value_of({"code": "XTS", "exponent": 8})

        assert currency.code == "XTS"
        assert currency.exponent == 8

    def test_different_exponents_with_same_code(self):
        eur2 = Currency.value_of({"code": "EUR", "exponent": 2})
        eur3 = Currency.value_of({"code": "EUR", "exponent": 3})

        assert eur2.exponent == 2
        assert eur3.exponent == 3
        assert eur2 != eur3

    def test_currency_instance_passes_through_as_interned(self):
        assert Currency.value_of(Currency("EUR", 2)) is EUR

    def test_raises_on_none(self):
        with pytest.raises(InvalidCurrencyError):
            Currency.value_of(None)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            {"code": "XTS"},
            {"exponent": 2},
            {"code": "XTS", "exponent": -1},
            {"code": "XTS", "exponent": 1.5},
            {"code": "XTS", "exponent": True},
            {"code": 978, "exponent": 2},
            42,
            ["EUR", 2],
        ],
    )
    def test_raises_on_malformed_input(self, value):
        with pytest.raises(InvalidCurrencyError):
            Currency.value_of(value)

    def test_invalid_currency_error_is_value_error(self):
        with pytest.raises(ValueError):
            Currency.value_of(None)


# ==============================================================================
# UNIT TESTS: equals
# ==============================================================================

class TestEquals:
    """Test for Currency.equals() and ==."""

    currency = Currency.value_of({"code": "XTS", "exponent": 2})

    def test_code_and_exponent_equal(self):
        assert self.currency.equals(Currency.value_of({"code": "XTS", "exponent": 2}))

    def test_code_not_equal(self):
        assert not self.currency.equals(Currency.value_of({"code": "EUR", "exponent": 2}))

    def test_exponent_not_equal(self):
        assert not self.currency.equals(Currency.value_of({"code": "XTS", "exponent": 3}))

    def test_none(self):
        assert not self.currency.equals(None)

    def test_code_string_resolved_like_value_of(self):
        assert self.currency.equals("XTS")
        assert JPY.equals("JPY")
        assert not Currency("JPY", 2).equals("JPY")

    def test_mapping(self):
        assert self.currency.equals({"code": "XTS", "exponent": 2})
        assert not self.currency.equals({"code": "XTS", "exponent": 3})
        assert not self.currency.equals({"code": "XTS"})

    @pytest.mark.parametrize("value", ["", 2, 2.0, ("XTS", 2), object()])
    def test_other_types_are_not_equal(self, value):
        assert not self.currency.equals(value)

    def test_equality_does_not_depend_on_interning(self):
        registry = CurrencyRegistry()
        local = registry.value_of({"code": "EUR", "exponent": 2})

        assert local is not EUR
        assert local == EUR
        assert hash(local) == hash(EUR)


# ==============================================================================
# UNIT TESTS: Serialization
# ==============================================================================

class TestSerialization:
    """Test for str() and to_json()."""

    def test_str_is_code(self):
        assert str(Currency.value_of("XTS")) == "XTS"

    def test_to_json_predefined(self):
        assert EUR.to_json() == "EUR"
        assert JPY.to_json() == "JPY"

    def test_to_json_default_exponent_custom_code(self):
        assert Currency.value_of({"code": "XTS", "exponent": 2}).to_json() == "XTS"

    def test_to_json_custom_exponent(self):
        currency = Currency.value_of({"code": "XTS", "exponent": 0})

        assert currency.to_json() == {"code": "XTS", "exponent": 0}

    def test_to_json_never_drops_exponent(self):
        assert Currency("EUR", 3).to_json() == {"code": "EUR", "exponent": 3}
        assert Currency("JPY", 2).to_json() == {"code": "JPY", "exponent": 2}

    @given(
        code=st.sampled_from(["EUR", "USD", "JPY", "XTS", "BTC"]),
        exponent=st.integers(min_value=0, max_value=18),
    )
    @settings(max_examples=200)
    def test_json_round_trip(self, code: str, exponent: int):
        currency = Currency(code, exponent)

        assert Currency.from_json(currency.to_json()) == currency


# ==============================================================================
# UNIT TESTS: Registry
# ==============================================================================

class TestCurrencyRegistry:
    """Test for the interning store."""

    def test_interns_by_code_and_exponent(self):
        registry = CurrencyRegistry()

        first = registry.value_of({"code": "XTS", "exponent": 4})
        second = registry.value_of({"code": "XTS", "exponent": 4})

        assert first is second
        assert len(registry) == 1

    def test_code_string_and_definition_share_instance(self):
        registry = CurrencyRegistry()

        assert registry.value_of("XTS") is registry.value_of({"code": "XTS", "exponent": 2})

    def test_register_binds_code(self):
        registry = CurrencyRegistry()
        kwd = registry.register(Currency("KWD", 3))

        assert registry.get("KWD") is kwd
        assert registry.value_of("KWD").exponent == 3
        assert kwd.to_json(registry) == "KWD"

    def test_registries_are_independent(self):
        registry = CurrencyRegistry([Currency("XTS", 5)])

        assert Currency.value_of("XTS", registry).exponent == 5
        assert Currency.value_of("XTS").exponent == 2

    def test_resolve_code_does_not_intern(self):
        registry = CurrencyRegistry()

        registry.resolve_code("XTS")

        assert len(registry) == 0

    def test_contains(self):
        assert EUR in default_registry
        assert "EUR" not in default_registry

    def test_concurrent_first_use_returns_one_instance(self):
        registry = CurrencyRegistry()
        barrier = threading.Barrier(16)
        results = []

        def worker():
            barrier.wait()
            results.append(registry.value_of({"code": "XRC", "exponent": 6}))

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 16
        assert all(r is results[0] for r in results)
        assert len(registry) == 1

    def test_logs_first_creation(self, caplog):
        caplog.set_level(logging.DEBUG, logger="exactmoney.currency")
        registry = CurrencyRegistry()

        registry.value_of({"code": "XLG", "exponent": 1})
        registry.value_of({"code": "XLG", "exponent": 1})

        assert caplog.text.count("Interned currency XLG/1") == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
