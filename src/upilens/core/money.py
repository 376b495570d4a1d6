#!/usr/bin/env python3
"""
Money Primitive Type

Immutable currency value wrapper that uses integer minor units internally.
Prevents floating-point errors and carries the export's currency code.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .currency import (
    INR,
    SUPPORTED_CURRENCIES,
    USD_TO_INR_RATE,
    decimal_to_minor_units,
    format_minor_units,
    minor_units_to_str,
    parse_amount_to_minor_units,
)


@dataclass(frozen=True)
class Money:
    """
    Immutable money value in minor units (paise for INR, cents for USD).

    Examples:
        >>> fare = Money.parse("₹1,250.50")
        >>> fare.minor_units
        125050
        >>> str(fare)
        '₹1,250.50'

        >>> app = Money.parse("USD 2.99")
        >>> app.to_inr().minor_units
        24817
    """

    minor_units: int
    currency: str = INR

    def __post_init__(self) -> None:
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency!r}")

    @classmethod
    def from_minor_units(cls, minor_units: int, currency: str = INR) -> "Money":
        """Create Money from minor units."""
        return cls(minor_units=minor_units, currency=currency)

    @classmethod
    def from_decimal(cls, value: Decimal, currency: str = INR) -> "Money":
        """Create Money from a major-unit Decimal."""
        return cls(minor_units=decimal_to_minor_units(value), currency=currency)

    @classmethod
    def parse(cls, amount_str: str, default_currency: str = INR) -> "Money":
        """
        Parse an export amount string such as '₹1,250.00', 'INR 12', 'USD 2.99' or '5541.80'.

        Raises:
            ValueError: If the amount cannot be parsed
        """
        minor_units, currency = parse_amount_to_minor_units(amount_str, default_currency)
        return cls(minor_units=minor_units, currency=currency)

    @property
    def value(self) -> Decimal:
        """Major-unit value as a Decimal."""
        return Decimal(self.minor_units) / 100

    def to_inr(self, rate: Decimal = USD_TO_INR_RATE) -> "Money":
        """Convert to INR using a fixed USD→INR rate."""
        if self.currency == INR:
            return self
        return Money.from_decimal(self.value * rate, INR)

    def abs(self) -> "Money":
        """Return absolute value of Money."""
        return Money(minor_units=abs(self.minor_units), currency=self.currency)

    def _check_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValueError(f"Cannot combine {self.currency} with {other.currency}")

    def __add__(self, other: "Money") -> "Money":
        self._check_same_currency(other)
        return Money(minor_units=self.minor_units + other.minor_units, currency=self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_same_currency(other)
        return Money(minor_units=self.minor_units - other.minor_units, currency=self.currency)

    def __lt__(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.minor_units < other.minor_units

    def __le__(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.minor_units <= other.minor_units

    def __gt__(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.minor_units > other.minor_units

    def __ge__(self, other: "Money") -> bool:
        self._check_same_currency(other)
        return self.minor_units >= other.minor_units

    def __str__(self) -> str:
        return format_minor_units(self.minor_units, self.currency)

    def __repr__(self) -> str:
        return f"Money(minor_units={self.minor_units}, currency={self.currency!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"value": minor_units_to_str(self.minor_units), "currency": self.currency}


def convert_to_inr(amount: Money, rate: Decimal = USD_TO_INR_RATE) -> Decimal:
    """
    Convert any supported amount to an INR Decimal for aggregation.

    Args:
        amount: Money in INR or USD
        rate: USD→INR rate (fixed approximation)

    Returns:
        INR value in major units
    """
    return amount.to_inr(rate).value
