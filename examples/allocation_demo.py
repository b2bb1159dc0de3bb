#!/usr/bin/env python3
"""
allocation_demo.py — Splitting money without losing a cent

================================================================================
THE BUG
================================================================================

    >>> [round(10.00 * r / 9, 2) for r in (3, 3, 3)]
    [3.33, 3.33, 3.33]       # 9.99, one cent gone

Rounding each share on its own loses or invents cents. Fowler's fix puts
the leftover on the first bucket, which over years of allocations piles
cents onto the oldest buckets.

================================================================================
THE FIX
================================================================================

    from exactmoney import Money

    Money("10.00", "EUR").allocate({"A": 3, "B": 3, "C": 3})
    # A=3.34, B=3.33, C=3.33  (sum is exactly 10.00)

Leftover cents go first to the buckets whose share rounds up, then in
order. The sum is always the original amount.

================================================================================
"""

import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from exactmoney import Money, Currency, CurrencyError, NoRatiosError


def demonstrate_bug():
    """Show what naive rounding does."""
    print("=" * 60)
    print("THE BUG")
    print("=" * 60)
    print()
    shares = [round(10.00 * r / 9, 2) for r in (3, 3, 3)]
    print(">>> [round(10.00 * r / 9, 2) for r in (3, 3, 3)]")
    print(f"{shares}")
    print(f"Sum: {sum(shares):.2f}")
    print()


def demonstrate_allocation():
    """Show the allocation policy on the load-bearing cases."""
    print("=" * 60)
    print("ALLOCATION")
    print("=" * 60)
    print()

    cases = [
        (Money("10.00", "EUR"), {"A": 5, "B": 2}),
        (Money("10.00", "EUR"), {"A": 3, "B": 3, "C": 3}),
        (Money("1.00", "EUR"), {0: 1, 1: 2}),
        (Money("0.05", "EUR"), {0: 3, 1: 7}),
        (Money("1.00", "EUR"), {0: 0, 1: 1, 2: 2}),
    ]

    for money, ratios in cases:
        parts = money.allocate(ratios)
        total = sum(parts.values(), Money.zero(money.currency))
        rendered = ", ".join(f"{key}={part.get_amount()}" for key, part in parts.items())
        print(f"{money} by {ratios}")
        print(f"  -> {rendered}   (sum {total})")
    print()

    print(">>> Money('1.00', 'EUR').allocate({0: 0})")
    try:
        Money("1.00", "EUR").allocate({0: 0})
    except NoRatiosError as e:
        print(f"NoRatiosError: {e}")
    print()


def demonstrate_accumulation():
    """Sub-cent buckets: same code, higher exponent, distinct currency."""
    print("=" * 60)
    print("SUB-CENT ACCUMULATION")
    print("=" * 60)
    print()

    eur4 = Currency.value_of({"code": "EUR", "exponent": 4})
    monthly_interest = Money("0.0123", eur4)
    yearly = monthly_interest.mul(12)
    print(f"Monthly interest: {monthly_interest}")
    print(f"Yearly:           {yearly}")
    print(f"Booked:           {yearly.convert_to('EUR', 1)}")
    print()

    print(">>> Money('1.00', 'EUR').plus(yearly)")
    try:
        Money("1.00", "EUR").plus(yearly)
    except CurrencyError as e:
        print(f"CurrencyError: {e}")
    print()


def demonstrate_serialization():
    """Show the wire format."""
    print("=" * 60)
    print("SERIALIZATION")
    print("=" * 60)
    print()

    for money in (Money("7", "EUR"), Money(120, {"code": "XTS", "exponent": 0})):
        data = money.to_json()
        print(f"{money!r:32} -> {data}")
        assert Money.from_json(data) == money
    print()


def main():
    """Run all demonstrations."""
    if "-v" in sys.argv:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s")

    demonstrate_bug()
    demonstrate_allocation()
    demonstrate_accumulation()
    demonstrate_serialization()


if __name__ == "__main__":
    main()
