#!/usr/bin/env python3
"""
Embedded XML Parser

The structured BHIM statement ships its data as an XML document assigned to a
JavaScript variable inside the HTML page:

    <script>
      var upiTransactions = '<UPITransactions><Transaction PaymentID="..." .../></UPITransactions>';
    </script>

Fields live in attributes of fixed-tag elements, not in text nodes.
"""

import logging
import re

from lxml import etree

from ..core.errors import SchemaParseError

logger = logging.getLogger(__name__)

ROOT_TAG = "UPITransactions"
TRANSACTION_TAG = "Transaction"

_SCRIPT_VARIABLE = re.compile(
    r"""(?:var|let|const)\s+\w+\s*=\s*(?P<quote>['"`])(?P<body>\s*<UPITransactions\b.*?)(?P=quote)\s*;""",
    re.DOTALL,
)
_BARE_DOCUMENT = re.compile(r"<UPITransactions\b.*?</UPITransactions>", re.DOTALL)


def _unescape_js_string(body: str) -> str:
    return body.replace("\\'", "'").replace('\\"', '"').replace("\\n", "\n").replace("\\/", "/")


def extract_embedded_xml(html: str) -> str:
    """
    Pull the UPITransactions XML document out of an HTML page.

    A script variable assignment is preferred; a bare document anywhere in the
    page is accepted as a fallback.

    Raises:
        SchemaParseError: If no embedded document is present
    """
    match = _SCRIPT_VARIABLE.search(html)
    if match:
        return _unescape_js_string(match.group("body")).strip()

    match = _BARE_DOCUMENT.search(html)
    if match:
        return match.group(0)

    raise SchemaParseError(f"No embedded <{ROOT_TAG}> document found")


def parse_upi_transactions_xml(xml_text: str) -> list[dict[str, str]]:
    """
    Read every Transaction element's attributes.

    Args:
        xml_text: XML document rooted at <UPITransactions>

    Returns:
        One attribute mapping per Transaction element, in document order

    Raises:
        SchemaParseError: If the document is malformed or has the wrong root
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_text.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as e:
        raise SchemaParseError(f"Malformed embedded XML: {e}") from e

    if root.tag != ROOT_TAG:
        raise SchemaParseError(f"Unexpected XML root <{root.tag}>, expected <{ROOT_TAG}>")

    elements = root.iter(TRANSACTION_TAG)
    rows = [{key: value.strip() for key, value in element.attrib.items()} for element in elements]
    logger.debug("Read %d <%s> element(s)", len(rows), TRANSACTION_TAG)
    return rows
