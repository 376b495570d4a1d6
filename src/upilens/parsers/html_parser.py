#!/usr/bin/env python3
"""
HTML Payload Parser

Two HTML shapes occur in UPI exports:

1. Statement tables (BHIM legacy export): one <table> whose rows map cells to
   fields by position. parse_html_table() returns the raw cell text; callers
   turn rows into records.
2. Google Takeout "My Activity" pages: a sequence of outer-cell blocks, each
   holding an action line, a timestamp line and a products caption.
"""

import logging
import re
from dataclasses import replace

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..classifier import TransactionClassifier
from ..core.dates import parse_timestamp
from ..core.errors import ParseWarning, WarningKind
from ..core.models import ActivityRecord, ActivityType, ParserResult, SourceApp
from ..core.money import Money

logger = logging.getLogger(__name__)

# Action verb -> activity type, matched on the first word of the action line
_VERB_TYPES = {
    "paid": ActivityType.PAID,
    "sent": ActivityType.SENT,
    "received": ActivityType.RECEIVED,
    "requested": ActivityType.REQUEST,
}

_AMOUNT_PATTERN = re.compile(r"(₹|INR|Rs\.?|US\$|USD|\$)\s?([\d,]+(?:\.\d+)?)")
_RECIPIENT_PATTERN = re.compile(r"\bto\s+(.+?)(?:\s+using\b|\s+via\b|\s+for\b|$)")
_SENDER_PATTERN = re.compile(r"\bfrom\s+(.+?)(?:\s+using\b|\s+via\b|\s+for\b|$)")


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def _cell_text(cell: Tag) -> str:
    return cell.get_text(" ", strip=True)


def parse_html_table(html: str, skip_header: bool = True) -> list[list[str]]:
    """
    Extract the cell text of every row in the first table of a document.

    Args:
        html: HTML document text
        skip_header: Drop the first row

    Returns:
        One list of stripped cell strings per row (possibly empty). Rows keep
        their natural width; column-count checks are the caller's concern.
    """
    table = _soup(html).find("table")
    if table is None:
        logger.warning("No table found in HTML payload")
        return []

    rows = table.find_all("tr")
    if skip_header:
        rows = rows[1:]

    return [[_cell_text(cell) for cell in row.find_all(["td", "th"])] for row in rows]


def _is_classed(tag: Tag, class_name: str) -> bool:
    return class_name in (tag.get("class") or [])


def _activity_blocks(soup: BeautifulSoup) -> list[Tag]:
    return soup.find_all("div", class_="outer-cell")


def _body_lines(block: Tag) -> list[str]:
    for cell in block.find_all("div", class_="content-cell"):
        if _is_classed(cell, "mdl-typography--caption") or _is_classed(cell, "mdl-typography--text-right"):
            continue
        return list(cell.stripped_strings)
    return []


def _products(block: Tag) -> tuple[str, ...]:
    caption = block.find("div", class_="mdl-typography--caption")
    if caption is None:
        return ()

    products: list[str] = []
    in_products = False
    for text in caption.stripped_strings:
        if text.endswith(":"):
            in_products = text == "Products:"
            continue
        if in_products:
            products.append(text)
    return tuple(products)


def _title(block: Tag) -> str:
    header = block.find("div", class_="header-cell")
    return _cell_text(header) if header is not None else ""


def _split_action_and_time(lines: list[str]) -> tuple[str, str | None]:
    # Timestamp is the last body line that parses; everything before it is the action
    for index in range(len(lines) - 1, -1, -1):
        try:
            parse_timestamp(lines[index])
        except ValueError:
            continue
        return " ".join(lines[:index]), lines[index]
    return " ".join(lines), None


def activity_type_from_action(action: str) -> ActivityType:
    """Map an action line's leading verb to an ActivityType."""
    words = action.split(maxsplit=1)
    if not words:
        return ActivityType.OTHER
    return _VERB_TYPES.get(words[0].lower(), ActivityType.OTHER)


def amount_from_action(action: str) -> Money | None:
    """Extract the first currency-marked amount from an action line."""
    match = _AMOUNT_PATTERN.search(action)
    if not match:
        return None
    try:
        return Money.parse(f"{match.group(1)}{match.group(2)}")
    except ValueError:
        return None


def _party(pattern: re.Pattern, action: str) -> str | None:
    match = pattern.search(action)
    return match.group(1).strip() if match else None


def activity_from_block(
    block: Tag, source_app: SourceApp, classifier: TransactionClassifier
) -> ActivityRecord | None:
    """
    Build one ActivityRecord from an outer-cell block.

    Returns:
        The record, or None when the block has no parseable timestamp
    """
    action, time_text = _split_action_and_time(_body_lines(block))
    if time_text is None:
        return None

    transaction_type = activity_type_from_action(action)
    amount = amount_from_action(action)
    record = ActivityRecord(
        title=_title(block) or action,
        time=parse_timestamp(time_text),
        source_app=source_app,
        description=action or None,
        products=_products(block),
        transaction_type=transaction_type,
        amount=amount,
        recipient=_party(_RECIPIENT_PATTERN, action),
        sender=_party(_SENDER_PATTERN, action),
    )
    if record.is_spend:
        return replace(record, category=classifier.classify(action))
    return record


def parse_my_activity_html(
    html: str,
    source_app: SourceApp,
    classifier: TransactionClassifier | None = None,
    source: str = "activity_log",
) -> ParserResult[ActivityRecord]:
    """
    Parse a Google Takeout "My Activity" HTML page.

    Args:
        html: Page text
        source_app: App tag stamped on every record
        classifier: Category classifier for spend entries (built-in table if None)
        source: Label used in warnings

    Returns:
        ParserResult with one ActivityRecord per block that carries a timestamp
    """
    classifier = classifier or TransactionClassifier()
    blocks = _activity_blocks(_soup(html))

    records: list[ActivityRecord] = []
    warnings: list[ParseWarning] = []
    skipped = 0
    for index, block in enumerate(blocks):
        try:
            record = activity_from_block(block, source_app, classifier)
        except ValueError as e:
            logger.warning("Failed to parse activity block %d: %s", index, e)
            warnings.append(ParseWarning(WarningKind.ROW_PARSE_FAILURE, source, str(e), row=index))
            continue
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug("Skipped %d activity block(s) without a timestamp", skipped)
    logger.info("Parsed %d of %d activity block(s) from %s", len(records), len(blocks), source)
    return ParserResult(success=True, data=records, warnings=warnings)
