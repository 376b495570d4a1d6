#!/usr/bin/env python3
"""
JSON Payload Parser

Shape-checked parsing of JSON payloads (Google Pay group expenses and voucher
rewards). Invalid JSON, or a top-level value of the wrong shape, fails the
payload; individual entries that do not fit the record shape are skipped.
"""

import json
import logging
import math
from collections.abc import Callable
from typing import Any, TypeVar

from ..core.dates import parse_timestamp
from ..core.errors import ParseWarning, SchemaParseError, WarningKind
from ..core.json_utils import loads_export_json
from ..core.models import (
    GroupExpense,
    GroupExpenseItem,
    GroupExpenseItemState,
    GroupExpenseState,
    ParserResult,
    SourceApp,
    Voucher,
)
from ..core.money import Money

logger = logging.getLogger(__name__)

R = TypeVar("R")

GROUP_EXPENSES_KEY = "Group_expenses"
VOUCHERS_KEY = "Vouchers"


def _require_str(entry: dict[str, Any], key: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{key}' must be a non-empty string")
    return value.strip()


def _optional_str(entry: dict[str, Any], key: str) -> str:
    value = entry.get(key)
    return value.strip() if isinstance(value, str) else ""


def _require_finite(value: float, key: str) -> None:
    # json accepts NaN and Infinity literals
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"'{key}' must be a finite number, got {value!r}")


def _parse_money(value: Any, key: str) -> Money:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"'{key}' is required")
    if isinstance(value, (int, float)):
        _require_finite(value, key)
        return Money.parse(repr(value))
    if isinstance(value, dict):
        # {"units": "120", "currency_code": "INR"} style amounts
        amount = value.get("value", value.get("units"))
        currency = value.get("currency", value.get("currency_code", "INR"))
        return Money.parse(str(amount), default_currency=str(currency).upper())
    return Money.parse(str(value))


def _parse_time(value: Any, key: str):
    if isinstance(value, bool) or value is None:
        raise ValueError(f"'{key}' is required")
    if isinstance(value, (int, float)):
        _require_finite(value, key)
        return parse_timestamp(str(int(value)))
    return parse_timestamp(str(value))


def group_expense_item_from_dict(entry: Any) -> GroupExpenseItem:
    """
    Build one group-expense share.

    Raises:
        ValueError: If the entry is not an object or a field is invalid
    """
    if not isinstance(entry, dict):
        raise ValueError("group expense item must be an object")
    return GroupExpenseItem(
        amount=_parse_money(entry.get("amount"), "amount"),
        state=GroupExpenseItemState(_require_str(entry, "state").upper()),
        payer=_require_str(entry, "payer"),
    )


def group_expense_from_dict(entry: Any, source_app: SourceApp) -> GroupExpense:
    """
    Build a GroupExpense from one JSON entry.

    Raises:
        ValueError: If the entry does not match the expected shape
    """
    if not isinstance(entry, dict):
        raise ValueError("group expense must be an object")

    raw_items = entry.get("items", [])
    if not isinstance(raw_items, list):
        raise ValueError("'items' must be a list")

    return GroupExpense(
        creation_time=_parse_time(entry.get("creation_time"), "creation_time"),
        creator=_require_str(entry, "creator"),
        group_name=_optional_str(entry, "group_name"),
        total_amount=_parse_money(entry.get("total_amount"), "total_amount"),
        state=GroupExpenseState(_require_str(entry, "state").upper()),
        title=_optional_str(entry, "title"),
        items=tuple(group_expense_item_from_dict(item) for item in raw_items),
        source_app=source_app,
    )


def voucher_from_dict(entry: Any, source_app: SourceApp) -> Voucher:
    """
    Build a Voucher from one JSON entry.

    Raises:
        ValueError: If the entry does not match the expected shape
    """
    if not isinstance(entry, dict):
        raise ValueError("voucher must be an object")
    return Voucher(
        code=_require_str(entry, "code"),
        details=_optional_str(entry, "details"),
        summary=_optional_str(entry, "summary"),
        expiry_date=_parse_time(entry.get("expiry_date"), "expiry_date"),
        source_app=source_app,
    )


def load_record_list(text: str, key: str, source: str) -> list[Any]:
    """
    Decode a payload and return its record array.

    Accepts either ``{key: [...]}`` or a bare ``[...]``.

    Raises:
        SchemaParseError: If the JSON is invalid or has the wrong top-level shape
    """
    try:
        payload = loads_export_json(text)
    except json.JSONDecodeError as e:
        raise SchemaParseError(f"{source}: invalid JSON: {e}") from e

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        records = payload.get(key, [])
        if not isinstance(records, list):
            raise SchemaParseError(f"{source}: '{key}' must be a list")
        return records
    raise SchemaParseError(f"{source}: expected an object or array, got {type(payload).__name__}")


def _parse_entries(text: str, key: str, source: str, build: Callable[[Any], R]) -> ParserResult[R]:
    try:
        entries = load_record_list(text, key, source)
    except SchemaParseError as e:
        logger.warning("%s", e)
        return ParserResult(
            success=False,
            error=str(e),
            warnings=[ParseWarning(WarningKind.SCHEMA_PARSE_FAILURE, source, str(e))],
        )

    records: list[R] = []
    warnings: list[ParseWarning] = []
    for index, entry in enumerate(entries):
        try:
            records.append(build(entry))
        except (ValueError, KeyError, TypeError, OverflowError) as e:
            logger.warning("Failed to parse entry %d in %s: %s", index, source, e)
            warnings.append(ParseWarning(WarningKind.ROW_PARSE_FAILURE, source, str(e), row=index))

    logger.info("Parsed %d of %d entr(ies) from %s", len(records), len(entries), source)
    return ParserResult(success=True, data=records, warnings=warnings)


def parse_group_expenses_json(
    text: str, source_app: SourceApp, source: str = "group_expenses"
) -> ParserResult[GroupExpense]:
    """Parse a group expenses JSON payload."""
    return _parse_entries(text, GROUP_EXPENSES_KEY, source, lambda e: group_expense_from_dict(e, source_app))


def parse_voucher_rewards_json(
    text: str, source_app: SourceApp, source: str = "voucher_rewards"
) -> ParserResult[Voucher]:
    """Parse a voucher rewards JSON payload (``)]}'`` guard tolerated)."""
    return _parse_entries(text, VOUCHERS_KEY, source, lambda e: voucher_from_dict(e, source_app))
