#!/usr/bin/env python3
"""
CSV Payload Parser

Header-driven parsing of CSV payloads (Google Pay transactions and cashback
rewards) into domain records. A missing required header fails the payload;
an individual row that cannot be parsed is skipped with a warning.
"""

import io
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import pandas as pd

from ..classifier import TransactionClassifier
from ..core.currency import normalize_currency_code
from ..core.dates import parse_timestamp
from ..core.errors import ParseWarning, SchemaParseError, WarningKind
from ..core.models import CashbackReward, ParserResult, SourceApp, Transaction
from ..core.money import Money

logger = logging.getLogger(__name__)

R = TypeVar("R")

TRANSACTION_REQUIRED_COLUMNS = ("Time", "Transaction ID", "Amount")

CASHBACK_REQUIRED_COLUMNS = ("Date", "Amount")


def read_csv_frame(text: str, source: str, required_columns: tuple[str, ...]) -> tuple[pd.DataFrame, list[ParseWarning]]:
    """
    Load CSV text into a string-typed DataFrame.

    Lines with the wrong number of fields are dropped and reported.

    Raises:
        SchemaParseError: If the payload is empty, unreadable, or lacks a required header
    """
    warnings: list[ParseWarning] = []

    def _on_bad_line(fields: list[str]) -> None:
        warnings.append(
            ParseWarning(WarningKind.ROW_PARSE_FAILURE, source, f"Malformed line skipped: {fields!r}")
        )
        return None

    try:
        df = pd.read_csv(
            io.StringIO(text.lstrip("\ufeff")),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            skip_blank_lines=True,
            index_col=False,
            engine="python",
            on_bad_lines=_on_bad_line,
        )
    except pd.errors.EmptyDataError as e:
        raise SchemaParseError(f"{source}: CSV payload is empty") from e
    except pd.errors.ParserError as e:
        raise SchemaParseError(f"{source}: CSV payload is unreadable: {e}") from e

    df.columns = [str(column).strip() for column in df.columns]
    missing = [column for column in required_columns if column not in df.columns]
    if missing:
        raise SchemaParseError(f"{source}: missing required column(s): {', '.join(missing)}")

    return df, warnings


def _cell(row: dict[str, Any], column: str) -> str:
    value = row.get(column)
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def _required_cell(row: dict[str, Any], column: str) -> str:
    value = _cell(row, column)
    if not value:
        raise ValueError(f"{column} is required but was empty")
    return value


def _optional_cell(row: dict[str, Any], column: str) -> str:
    return _cell(row, column)


def transaction_from_csv_row(
    row: dict[str, Any], source_app: SourceApp, classifier: TransactionClassifier
) -> Transaction:
    """
    Create a Transaction from one transactions-CSV row.

    Raises:
        ValueError: If the time, id or amount is missing or unparseable
    """
    description = _optional_cell(row, "Description")
    return Transaction(
        time=parse_timestamp(_required_cell(row, "Time")),
        id=_required_cell(row, "Transaction ID"),
        description=description,
        product=_optional_cell(row, "Product"),
        method=_optional_cell(row, "Payment method"),
        status=_optional_cell(row, "Status"),
        amount=Money.parse(_required_cell(row, "Amount")),
        source_app=source_app,
        category=classifier.classify(description),
    )


def cashback_from_csv_row(row: dict[str, Any], source_app: SourceApp) -> CashbackReward:
    """
    Create a CashbackReward from one cashback-CSV row.

    Raises:
        ValueError: If the date or amount is missing or unparseable
    """
    currency = normalize_currency_code(_optional_cell(row, "Currency"))
    return CashbackReward(
        date=parse_timestamp(_required_cell(row, "Date")),
        amount=Money.parse(_required_cell(row, "Amount"), default_currency=currency),
        description=_optional_cell(row, "Description"),
        source_app=source_app,
    )


def _parse_rows(
    text: str,
    source: str,
    required_columns: tuple[str, ...],
    build: Callable[[dict[str, Any]], R],
) -> ParserResult[R]:
    try:
        df, warnings = read_csv_frame(text, source, required_columns)
    except SchemaParseError as e:
        logger.warning("%s", e)
        return ParserResult(
            success=False,
            error=str(e),
            warnings=[ParseWarning(WarningKind.SCHEMA_PARSE_FAILURE, source, str(e))],
        )

    records: list[R] = []
    for index, row in df.iterrows():
        # Header is line 1
        line_number = int(index) + 2
        try:
            records.append(build(row.to_dict()))
        except (ValueError, KeyError, TypeError, OverflowError) as e:
            logger.warning("Failed to parse row %d in %s: %s", line_number, source, e)
            warnings.append(ParseWarning(WarningKind.ROW_PARSE_FAILURE, source, str(e), row=line_number))

    logger.info("Parsed %d of %d row(s) from %s", len(records), len(df), source)
    return ParserResult(success=True, data=records, warnings=warnings)


def parse_transactions_csv(
    text: str,
    source_app: SourceApp,
    classifier: TransactionClassifier | None = None,
    source: str = "transactions",
) -> ParserResult[Transaction]:
    """
    Parse a transactions CSV payload.

    Args:
        text: CSV text with a header row
        source_app: App tag stamped on every record
        classifier: Category classifier (built-in table if None)
        source: Label used in warnings

    Returns:
        ParserResult whose data holds one Transaction per parseable row
    """
    classifier = classifier or TransactionClassifier()
    return _parse_rows(
        text,
        source,
        TRANSACTION_REQUIRED_COLUMNS,
        lambda row: transaction_from_csv_row(row, source_app, classifier),
    )


def parse_cashback_rewards_csv(
    text: str, source_app: SourceApp, source: str = "cashback_rewards"
) -> ParserResult[CashbackReward]:
    """
    Parse a cashback rewards CSV payload.

    Returns:
        ParserResult whose data holds one CashbackReward per parseable row
    """
    return _parse_rows(
        text,
        source,
        CASHBACK_REQUIRED_COLUMNS,
        lambda row: cashback_from_csv_row(row, source_app),
    )
