"""
allocation.py — Exact proportional allocation of integer minor units

================================================================================
ALGORITHM
================================================================================

Input:  total (int, minor units), ratios {key: non-negative number}
Output: {key: int} with sum(output) == total

1. share[k] = total * ratio[k] / sum(ratios)       exact Fraction
2. result[k] = floor(share[k])
   leftover  = total - sum(result)                  0 <= leftover < #keys
3. First pass, insertion order: keys whose share rounds half up above the
   floor get one unit each while leftover > 0.
4. Second pass, insertion order: remaining units go one by one to keys
   with a non-zero ratio.

Fowler's classical version skips step 3 and always puts leftovers on the
first keys. Over many periods that piles cents on the oldest buckets.
Step 3 places a unit where it would land if each share were rounded on its
own:

    100 split 1:2   ->  33 / 67     (Fowler: 34 / 66)
    5   split 3:7   ->   2 /  3     (1.5 and 3.5 both round up, one unit left)
    1000 split 3:3:3 -> 334 / 333 / 333

Shares are Fractions, so the tie-break never depends on float error even
for very large totals.

================================================================================
"""

from __future__ import annotations
from decimal import Decimal
from fractions import Fraction
from typing import Hashable, Mapping, TypeVar, Union
import logging
import math

from .errors import InvalidRatioError, NoRatiosError


logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
RatioLike = Union[int, float, Decimal, Fraction]

_HALF = Fraction(1, 2)


def round_half_up(value: Fraction) -> int:
    """Rounds to the nearest integer, ties toward +infinity."""
    return math.floor(value + _HALF)


def _to_fraction(key: Hashable, ratio: RatioLike) -> Fraction:
    if isinstance(ratio, bool):
        raise InvalidRatioError(f"Invalid ratio {ratio!r} for key {key!r}")

    if isinstance(ratio, (int, Fraction)):
        value = Fraction(ratio)
    elif isinstance(ratio, float):
        if not math.isfinite(ratio):
            raise InvalidRatioError(f"Invalid ratio {ratio!r} for key {key!r}")
        value = Fraction(repr(ratio))
    elif isinstance(ratio, Decimal):
        if not ratio.is_finite():
            raise InvalidRatioError(f"Invalid ratio {ratio!r} for key {key!r}")
        value = Fraction(ratio)
    else:
        raise InvalidRatioError(
            f"Ratio for key {key!r} must be a number, got {type(ratio).__name__}"
        )

    if value < 0:
        raise InvalidRatioError(f"Negative ratio {ratio!r} for key {key!r}")
    return value


def allocate_minor_units(total: int, ratios: Mapping[K, RatioLike]) -> dict[K, int]:
    """
    Splits ``total`` minor units proportionally to ``ratios``.

    The result has the same keys in the same order and sums to ``total``.
    Zero ratios receive exactly zero. If every ratio is zero and ``total``
    is zero, every key receives zero.

    Raises:
        NoRatiosError: ratios empty, or all zero while total != 0
        InvalidRatioError: negative, non-finite or non-numeric ratio
    """
    if not ratios:
        raise NoRatiosError()

    weights = {key: _to_fraction(key, ratio) for key, ratio in ratios.items()}
    sum_of_ratios = sum(weights.values(), Fraction(0))

    if sum_of_ratios == 0:
        if total != 0:
            raise NoRatiosError()
        return {key: 0 for key in weights}

    results: dict[K, int] = {}
    rounds_up: list[K] = []
    leftover = total

    for key, weight in weights.items():
        share = total * weight / sum_of_ratios
        floor = math.floor(share)
        results[key] = floor
        if round_half_up(share) > floor:
            rounds_up.append(key)
        leftover -= floor

    logger.debug(
        "Allocating %d minor units over %d keys: %d left after flooring, %d round up",
        total, len(results), leftover, len(rounds_up),
    )

    for key in rounds_up:
        if leftover == 0:
            break
        results[key] += 1
        leftover -= 1

    # Ties and all-down roundings, e.g. 100 split 1:1:1
    if leftover > 0:
        for key, weight in weights.items():
            if leftover == 0:
                break
            if weight:
                results[key] += 1
                leftover -= 1

    return results
