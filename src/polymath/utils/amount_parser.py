"""Amount parsing utilities."""

import math
import re
from typing import Any, Optional


def parse_amount(amount_str: str) -> float:
    """Parse an amount string into a float.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-$123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Parsed amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥,\s]", "", amount_str)

    try:
        amount = float(amount_str)
    except ValueError as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not math.isfinite(amount):
        raise ValueError(f"Amount '{amount_str}' is not a finite number")
    return -amount if is_negative else amount


def coerce_number(value: Any) -> float:
    """Coerce user or stored input to a number, defaulting to zero.

    Numbers pass through, strings go through parse_amount, and anything
    else (None, booleans, unparseable text, NaN) becomes 0.0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        try:
            return parse_amount(value)
        except ValueError:
            return 0.0
    return 0.0


def coerce_optional_number(value: Any) -> Optional[float]:
    """Like coerce_number, but keeps an absent value absent."""
    if value is None:
        return None
    return coerce_number(value)
