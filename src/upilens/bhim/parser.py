#!/usr/bin/env python3
"""
BHIM Statement Parser

BHIM statements come in two HTML variants:

- Structured: an <UPITransactions> XML document embedded in a script
  variable. Only completed debits (DrCr=DR, Status=SUCCESS) are spend.
- Legacy: a single 11-column table
  Date | Time | Bank Name | Account Number | Sender | Receiver |
  Payment ID | Pay/Collect | Amount | DR/CR | Status

A page may carry markers for both; the structured variant wins.
"""

import logging
from datetime import datetime

from ..classifier import TransactionClassifier
from ..core.dates import parse_day_month_year, parse_timestamp
from ..core.errors import ParseWarning, SchemaParseError, WarningKind
from ..core.models import ParserResult, SourceApp, Transaction
from ..core.money import Money
from ..dedup import dedupe_by_id
from ..parsers.html_parser import parse_html_table
from ..parsers.xml_parser import extract_embedded_xml, parse_upi_transactions_xml

logger = logging.getLogger(__name__)

PRODUCT_NAME = "BHIM"

STRUCTURED_MARKERS = ("UPITransactions", "BHIM")
LEGACY_MARKERS = ("Bank Name", "Payment ID", "Pay/Collect", "DR/CR")

LEGACY_COLUMN_COUNT = 11

DEBIT = "DR"
SUCCESS = "SUCCESS"


def is_structured_statement(text: str) -> bool:
    return all(marker in text for marker in STRUCTURED_MARKERS)


def is_legacy_statement(text: str) -> bool:
    return all(marker in text for marker in LEGACY_MARKERS)


def statement_time(date_str: str, time_str: str) -> datetime:
    """
    Combine a statement's separate date and time columns.

    DD/MM/YYYY is tried first; anything else (ISO dates, month names) goes
    through the general timestamp parser.

    Raises:
        ValueError: If the date cannot be parsed
    """
    try:
        return parse_day_month_year(date_str, time_str)
    except ValueError:
        return parse_timestamp(f"{date_str} {time_str}".strip())


def describe(pay_collect: str, dr_cr: str, sender: str, receiver: str) -> str:
    """
    Build the description used for classification and display.

    Example:
        describe("PAY", "DR", "Me", "Swiggy") -> "PAY - To Swiggy"
    """
    if dr_cr.upper() == DEBIT:
        return f"{pay_collect} - To {receiver}"
    return f"{pay_collect} - From {sender}"


def build_transaction(
    *,
    date_str: str,
    time_str: str,
    payment_id: str,
    amount_str: str,
    dr_cr: str,
    status: str,
    pay_collect: str,
    sender: str,
    receiver: str,
    bank_name: str,
    account_number: str,
    classifier: TransactionClassifier,
) -> Transaction:
    """
    Create a Transaction from statement fields.

    Raises:
        ValueError: If the date, amount or payment ID is unusable
    """
    if not payment_id:
        raise ValueError("Payment ID is required but was empty")

    description = describe(pay_collect, dr_cr, sender, receiver)
    return Transaction(
        time=statement_time(date_str, time_str),
        id=payment_id,
        description=description,
        product=PRODUCT_NAME,
        method=f"{bank_name} ({account_number})",
        status=status,
        amount=Money.parse(amount_str or "0"),
        source_app=SourceApp.BHIM,
        category=classifier.classify(description),
    )


def transaction_from_xml_attributes(attrs: dict[str, str], classifier: TransactionClassifier) -> Transaction:
    """Map one <Transaction> element's attributes to a Transaction."""
    return build_transaction(
        date_str=attrs.get("Date", ""),
        time_str=attrs.get("Time", ""),
        payment_id=attrs.get("PaymentID", ""),
        amount_str=attrs.get("Amount", ""),
        dr_cr=attrs.get("DrCr", ""),
        status=attrs.get("Status", ""),
        pay_collect=attrs.get("PayCollect", ""),
        sender=attrs.get("PayerName", ""),
        receiver=attrs.get("PayeeName", ""),
        bank_name=attrs.get("BankName", ""),
        account_number=attrs.get("AccountNumber", ""),
        classifier=classifier,
    )


def transaction_from_table_row(cells: list[str], classifier: TransactionClassifier) -> Transaction:
    """Map one 11-cell legacy table row to a Transaction."""
    (
        date_str,
        time_str,
        bank_name,
        account_number,
        sender,
        receiver,
        payment_id,
        pay_collect,
        amount_str,
        dr_cr,
        status,
    ) = cells[:LEGACY_COLUMN_COUNT]
    return build_transaction(
        date_str=date_str,
        time_str=time_str,
        payment_id=payment_id,
        amount_str=amount_str,
        dr_cr=dr_cr,
        status=status,
        pay_collect=pay_collect,
        sender=sender,
        receiver=receiver,
        bank_name=bank_name,
        account_number=account_number,
        classifier=classifier,
    )


def is_completed_debit(attrs: dict[str, str]) -> bool:
    return attrs.get("DrCr", "").upper() == DEBIT and attrs.get("Status", "").upper() == SUCCESS


def parse_structured_statement(
    html: str, classifier: TransactionClassifier, source: str = "statement_html"
) -> ParserResult[Transaction]:
    """
    Parse the embedded-XML statement variant.

    Credits and non-SUCCESS rows are excluded; repeated payment IDs keep the
    first occurrence. Malformed XML fails the payload.
    """
    try:
        rows = parse_upi_transactions_xml(extract_embedded_xml(html))
    except SchemaParseError as e:
        logger.warning("%s: %s", source, e)
        return ParserResult(
            success=False,
            error=str(e),
            warnings=[ParseWarning(WarningKind.SCHEMA_PARSE_FAILURE, source, str(e))],
        )

    debits = [attrs for attrs in rows if is_completed_debit(attrs)]
    logger.debug("Kept %d of %d XML row(s) as completed debits", len(debits), len(rows))

    transactions: list[Transaction] = []
    warnings: list[ParseWarning] = []
    for index, attrs in enumerate(debits):
        try:
            transactions.append(transaction_from_xml_attributes(attrs, classifier))
        except ValueError as e:
            logger.warning("Failed to parse BHIM XML row %s: %s", attrs.get("PaymentID", index), e)
            warnings.append(ParseWarning(WarningKind.ROW_PARSE_FAILURE, source, str(e), row=index))

    transactions = dedupe_by_id(transactions)
    logger.info("Parsed %d BHIM transaction(s) from embedded XML", len(transactions))
    return ParserResult(success=True, data=transactions, warnings=warnings)


def parse_legacy_statement(
    html: str, classifier: TransactionClassifier, source: str = "statement_html"
) -> ParserResult[Transaction]:
    """
    Parse the legacy table statement variant.

    Rows with fewer than 11 cells are skipped. Every direction and status is
    kept; repeated payment IDs keep the first occurrence.
    """
    transactions: list[Transaction] = []
    warnings: list[ParseWarning] = []

    # Row numbers count the skipped header as row 1
    for row_number, cells in enumerate(parse_html_table(html), start=2):
        if len(cells) < LEGACY_COLUMN_COUNT:
            logger.debug("Skipping BHIM table row %d with %d cell(s)", row_number, len(cells))
            continue
        try:
            transactions.append(transaction_from_table_row(cells, classifier))
        except ValueError as e:
            logger.warning("Failed to parse BHIM table row %d: %s", row_number, e)
            warnings.append(ParseWarning(WarningKind.ROW_PARSE_FAILURE, source, str(e), row=row_number))

    transactions = dedupe_by_id(transactions)
    logger.info("Parsed %d BHIM transaction(s) from statement table", len(transactions))
    return ParserResult(success=True, data=transactions, warnings=warnings)


def parse_statement(
    html: str, classifier: TransactionClassifier, source: str = "statement_html"
) -> ParserResult[Transaction]:
    """
    Dispatch to the statement variant, richest first.

    Returns:
        ParserResult; a failure when neither variant's markers are present
    """
    if is_structured_statement(html):
        return parse_structured_statement(html, classifier, source)
    if is_legacy_statement(html):
        return parse_legacy_statement(html, classifier, source)

    error = "Unrecognized BHIM statement layout"
    logger.warning("%s: %s", source, error)
    return ParserResult(
        success=False,
        error=error,
        warnings=[ParseWarning(WarningKind.SCHEMA_PARSE_FAILURE, source, error)],
    )
