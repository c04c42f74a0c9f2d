"""Number parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from salarizare.domain.entities import VariableValue


def parse_number(number_str: str) -> Decimal:
    """Parse a number string into a Decimal.

    Handles various formats:
    - "4050"
    - "607.5" or "607,5" (a lone comma is a decimal separator)
    - "4.050,50" or "4,050.50" (the last separator is the decimal one)
    - "40 lei", "40 RON"
    - "(123.45)" (negative in parentheses)

    Args:
        number_str: Number string

    Returns:
        Decimal value

    Raises:
        ValueError: If the string is empty, not a number, or not finite
    """
    if number_str is None or not str(number_str).strip():
        raise ValueError("Empty number string")

    text = str(number_str).strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    text = re.sub(r"(?i)\s*(lei|ron)$", "", text)
    text = text.replace(" ", "")

    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif text.count(",") == 1:
        text = text.replace(",", ".")

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse number '{number_str}'")
    if not value.is_finite():
        raise ValueError(f"Could not parse number '{number_str}'")
    return -value if is_negative else value


def parse_number_or_zero(number_str: str) -> Decimal:
    """Parse a number, treating empty or unparsable input as 0."""
    try:
        return parse_number(number_str)
    except ValueError:
        return Decimal(0)


def coerce_variable(value: str) -> VariableValue:
    """Convert a raw transaction variable to a number when it parses as one.

    Anything that is not a number (e.g. a currency code "EUR") is kept as the
    stripped string.
    """
    text = value.strip()
    try:
        return parse_number(text)
    except ValueError:
        return text
