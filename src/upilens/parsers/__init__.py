"""
Format Parsers

Each parser turns one raw payload into typed records. Row-level problems are
reported as warnings and skipped; a structurally invalid payload fails.
"""

from .csv_parser import parse_cashback_rewards_csv, parse_transactions_csv, read_csv_frame
from .html_parser import parse_html_table, parse_my_activity_html
from .json_parser import parse_group_expenses_json, parse_voucher_rewards_json
from .xml_parser import extract_embedded_xml, parse_upi_transactions_xml

__all__ = [
    "extract_embedded_xml",
    "parse_cashback_rewards_csv",
    "parse_group_expenses_json",
    "parse_html_table",
    "parse_my_activity_html",
    "parse_transactions_csv",
    "parse_upi_transactions_xml",
    "parse_voucher_rewards_json",
    "read_csv_frame",
]
