"""
Values -- Decimal amount helpers.

Responsibility:
    Coerces every monetary amount that enters the engine into ``Decimal``
    and provides the exact-cents rounding used by payout reconciliation.
    Amounts are scalar values in a single currency; there is no currency
    tag and no conversion.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted through ``str()`` so
      ``10.1`` becomes ``Decimal("10.1")``, never the binary expansion.
    - Cents rounding is ROUND_HALF_UP to two places.

Failure modes:
    - ValueError when a value cannot be read as a number (e.g. "abc",
      None, NaN).
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """
    Convert an amount to Decimal.

    Preconditions:
        value is a Decimal, int, float or numeric string.  ``bool`` is
        rejected because ``True`` is not an amount.

    Raises:
        ValueError: if the value is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Not an amount: {value!r}") from None
    else:
        raise ValueError(f"Not an amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return result


def sum_amounts(values: Iterable[Decimal]) -> Decimal:
    """Sum Decimal amounts; an empty iterable sums to ``Decimal("0")``."""
    return sum(values, ZERO)


def quantize_cents(amount: Decimal) -> Decimal:
    """Round to whole cents (half-up)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
