"""
Value Parsing and Formatting Utilities

Turns loosely-typed form values ("$1,250,000", "2.5", 3) into numbers and
back into display strings for the rendered site.
"""

import re
from typing import Any, Union

Number = Union[int, float]

_NUMBER_NOISE = re.compile(r"[$,\s]")


def parse_number(value: Any, strict: bool = False) -> Number:
    """Parse a form value into an int (when integral) or float.

    Handles:
    - 500000, 2.5
    - "$1,250,000"
    - "2,000"
    - "" / None (returns 0)

    Args:
        value: Raw form value.
        strict: Raise ValueError instead of returning 0 for unparsable text.

    Example:
        >>> parse_number("$1,250,000")
        1250000
        >>> parse_number("2.5")
        2.5
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        raw = value
    else:
        raw = _NUMBER_NOISE.sub("", str(value))
        if not raw:
            return 0
    try:
        number = float(raw)
    except OverflowError:
        # ints too large for a float
        number = float("inf")
    except ValueError:
        if strict:
            raise
        return 0
    if number != number or number in (float("inf"), float("-inf")):
        if strict:
            raise ValueError(f"Not a finite number: {value!r}")
        return 0
    return int(number) if number.is_integer() else number


def format_price(price: Union[int, float, None]) -> str:
    """Format a price value as a string.

    Example:
        >>> format_price(1500000)
        "$1,500,000"
        >>> format_price(1499.5)
        "$1,499.50"
    """
    if price is None:
        return "-"
    if float(price).is_integer():
        return f"${int(price):,}"
    return f"${price:,.2f}"


def format_count(value: Union[int, float, None]) -> str:
    """Format a bed/bath count, keeping half values ("2.5") intact."""
    if value is None:
        return "-"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_area(value: Union[int, float, None]) -> str:
    """Format square footage with thousands separators."""
    if value is None:
        return "-"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"
