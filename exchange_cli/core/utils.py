"""Utility helpers for the exchange CLI.

Amount parsing, amount rendering for request paths, and output formatting.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from .exceptions import InputError

# Decimal exponent bounds of an IEEE-754 double (max ~1.8e308, min ~4.9e-324)
MAX_AMOUNT_EXPONENT = 308
MIN_AMOUNT_EXPONENT = -324


def _check_range(dec: Decimal) -> None:
    if not dec.is_finite():
        raise InputError("'amount' must be a finite number")
    if not dec:
        return
    if dec.adjusted() > MAX_AMOUNT_EXPONENT or math.isinf(float(dec)):
        raise InputError("'amount' is too large")
    if dec.adjusted() < MIN_AMOUNT_EXPONENT:
        raise InputError("'amount' is too small")


def parse_amount(value: Any) -> Decimal:
    """Parse a user-supplied amount into a finite, non-negative Decimal.

    Raises:
        InputError: when parsing fails, the amount is negative/not finite,
            or it is beyond the range of a double
    """
    try:
        amt = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InputError(f"'amount' must be a number, got {value!r}") from exc
    _check_range(amt)
    if amt < 0:
        raise InputError("'amount' must not be negative")
    return amt


def format_amount(amount: Decimal | float | int) -> str:
    """Render an amount as a plain decimal string for a request path.

    Floats go through their shortest round-trip repr, so 0.00025 stays
    0.00025 and 3.26e11 is written out in full without an exponent.
    Trailing zeros are dropped: 100.0 -> "100".
    """
    if isinstance(amount, bool):
        raise InputError("'amount' must be a number")
    dec = amount if isinstance(amount, Decimal) else Decimal(repr(amount))
    _check_range(dec)
    if dec == 0:
        return "0"
    text = format(dec, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def format_money(value: float, decimals: int = 4, grouping: bool = True) -> str:
    """Format monetary value with fixed decimals and optional thousands sep."""
    fmt = f"{{:,.{decimals}f}}" if grouping else f"{{:.{decimals}f}}"
    return fmt.format(float(value))
