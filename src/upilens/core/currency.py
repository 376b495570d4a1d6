#!/usr/bin/env python3
"""
Currency Parsing and Formatting Utilities

Amount handling for UPI export data. All amounts are carried as integer minor
units (paise for INR, cents for USD) to avoid floating-point drift.

Export Amount Formats:
- Google Pay CSV: "₹1,250.00", "INR 1,250.00", "USD 2.99"
- BHIM HTML/XML: plain decimals, sometimes with thousands separators ("5,541.80")
- Cashback CSV: bare decimal with the currency in a separate column

Key Principles:
- Never use floating-point arithmetic for currency values
- Unparseable amounts raise ValueError; callers decide to skip the record
- Conversion to the reporting currency uses a fixed approximate rate
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

INR = "INR"
USD = "USD"
SUPPORTED_CURRENCIES = (INR, USD)

# Approximate rate; market-accurate conversion is not a goal
USD_TO_INR_RATE = Decimal("83")

_CURRENCY_MARKERS: list[tuple[str, str]] = [
    ("₹", INR),
    ("INR", INR),
    ("Rs.", INR),
    ("Rs", INR),
    ("US$", USD),
    ("USD", USD),
    ("$", USD),
]

_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def split_currency_marker(amount_str: str, default: str = INR) -> tuple[str, str]:
    """
    Separate a currency marker from an amount string.

    Args:
        amount_str: Raw amount such as "₹1,250.00" or "USD 2.99"
        default: Currency code to assume when no marker is present

    Returns:
        Tuple of (currency code, remaining numeric text)

    Example:
        split_currency_marker("INR 1,250.00") -> ("INR", "1,250.00")
    """
    text = amount_str.strip()
    for marker, code in _CURRENCY_MARKERS:
        if marker in text:
            return code, text.replace(marker, "", 1).strip()
    return default, text


def parse_decimal_amount(amount_str: str) -> Decimal:
    """
    Parse a plain decimal amount string, tolerating thousands separators.

    Args:
        amount_str: Numeric text like "5,541.80", "-12", "1 234.5"

    Returns:
        Decimal value

    Raises:
        ValueError: If the text is empty or not a finite decimal number
    """
    clean = str(amount_str).replace(",", "").replace("\xa0", "").replace(" ", "").strip()
    if not clean or not _NUMBER_PATTERN.match(clean):
        raise ValueError(f"Unparseable amount: {amount_str!r}")
    try:
        value = Decimal(clean)
    except InvalidOperation as e:
        raise ValueError(f"Unparseable amount: {amount_str!r}") from e
    if not value.is_finite():
        raise ValueError(f"Non-finite amount: {amount_str!r}")
    return value


def decimal_to_minor_units(value: Decimal) -> int:
    """
    Convert a Decimal major-unit amount to integer minor units.

    Example:
        decimal_to_minor_units(Decimal("12.345")) -> 1235
    """
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_amount_to_minor_units(amount_str: str, default_currency: str = INR) -> tuple[int, str]:
    """
    Parse an amount string with optional currency marker.

    Args:
        amount_str: Raw amount text from an export
        default_currency: Currency assumed when the text carries no marker

    Returns:
        Tuple of (minor units, currency code)

    Raises:
        ValueError: If the numeric part cannot be parsed
    """
    code, numeric = split_currency_marker(amount_str, default=default_currency)
    return decimal_to_minor_units(parse_decimal_amount(numeric)), code


def minor_units_to_str(minor_units: int) -> str:
    """
    Convert minor units to a plain decimal string using integer arithmetic.

    Example:
        minor_units_to_str(125050) -> "1250.50"
    """
    is_negative = minor_units < 0
    abs_units = abs(int(minor_units))
    major, remainder = divmod(abs_units, 100)
    if is_negative:
        return f"-{major}.{remainder:02d}"
    return f"{major}.{remainder:02d}"


def format_minor_units(minor_units: int, currency: str = INR) -> str:
    """Format minor units with a currency symbol and thousands separators."""
    symbol = "₹" if currency == INR else "$"
    major, remainder = divmod(abs(int(minor_units)), 100)
    sign = "-" if minor_units < 0 else ""
    return f"{sign}{symbol}{major:,}.{remainder:02d}"


def normalize_currency_code(code: str | None, default: str = INR) -> str:
    """
    Normalize a currency column value to a supported code.

    Raises:
        ValueError: If the code is not INR or USD
    """
    if code is None or not str(code).strip():
        return default
    normalized = str(code).strip().upper()
    if normalized in ("₹", "RS", "RS."):
        normalized = INR
    if normalized not in SUPPORTED_CURRENCIES:
        raise ValueError(f"Unsupported currency: {code!r}")
    return normalized
