#!/usr/bin/env python3
"""
Unit tests for HTML payload parsing.
"""

from datetime import datetime

import pytest

from tests.fixtures.bhim_samples import LEGACY_HTML
from tests.fixtures.googlepay_samples import MY_ACTIVITY_HTML
from upilens.core.models import ActivityType, SourceApp, TransactionCategory
from upilens.core.money import Money
from upilens.parsers import parse_html_table, parse_my_activity_html
from upilens.parsers.html_parser import activity_type_from_action, amount_from_action


@pytest.mark.unit
class TestParseHtmlTable:
    """Test generic table extraction."""

    def test_header_skipped(self):
        rows = parse_html_table(LEGACY_HTML)

        assert len(rows) == 6
        assert rows[0][0] == "15/03/2024"
        assert rows[0][6] == "400112233445"

    def test_header_kept_when_requested(self):
        rows = parse_html_table(LEGACY_HTML, skip_header=False)
        assert rows[0][:3] == ["Date", "Time", "Bank Name"]

    def test_rows_keep_natural_width(self):
        rows = parse_html_table(LEGACY_HTML)
        assert [len(row) for row in rows] == [11, 11, 11, 11, 3, 11]

    def test_no_table(self):
        assert parse_html_table("<html><body><p>nothing</p></body></html>") == []

    def test_nested_markup_flattened(self):
        html = "<table><tr><th>A</th></tr><tr><td><b>Paid</b> <i>to</i> Swiggy</td></tr></table>"
        assert parse_html_table(html) == [["Paid to Swiggy"]]


@pytest.mark.unit
class TestParseMyActivity:
    """Test Takeout My Activity pages."""

    @pytest.fixture
    def activities(self):
        result = parse_my_activity_html(MY_ACTIVITY_HTML, SourceApp.GOOGLE_PAY)
        assert result.success
        return result.data

    def test_blocks_without_timestamp_skipped(self, activities):
        assert len(activities) == 5

    def test_payment_block(self, activities):
        paid = activities[0]

        assert paid.title == "Google Pay"
        assert paid.time == datetime(2024, 3, 9, 18, 51, 23)
        assert paid.description == "Paid ₹250.00 to Swiggy using Bank Account XXXX1234"
        assert paid.transaction_type == ActivityType.PAID
        assert paid.amount == Money(25000, "INR")
        assert paid.recipient == "Swiggy"
        assert paid.sender is None
        assert paid.products == ("Google Pay",)
        assert paid.category == TransactionCategory.FOOD
        assert paid.is_spend

    def test_received_block(self, activities):
        received = activities[1]

        assert received.transaction_type == ActivityType.RECEIVED
        assert received.sender == "Ravi Kumar"
        assert received.recipient is None
        assert not received.is_spend
        assert received.category is None

    def test_sent_block_classified(self, activities):
        sent = activities[2]

        assert sent.transaction_type == ActivityType.SENT
        assert sent.amount == Money(120000, "INR")
        assert sent.recipient == "Irctc"
        assert sent.category == TransactionCategory.TRAVEL_TRANSPORT

    def test_request_block(self, activities):
        assert activities[3].transaction_type == ActivityType.REQUEST
        assert activities[3].sender == "Asha"

    def test_non_payment_block(self, activities):
        """Test an entry without an amount is kept but is not spend."""
        other = activities[4]

        assert other.transaction_type == ActivityType.OTHER
        assert other.amount is None
        assert not other.is_spend
        assert other.time == datetime(2023, 12, 31, 23, 59)

    def test_page_without_blocks(self):
        result = parse_my_activity_html("<html><body></body></html>", SourceApp.GOOGLE_PAY)
        assert result.success
        assert result.data == []


@pytest.mark.unit
class TestActionHelpers:
    """Test action-line helpers."""

    @pytest.mark.parametrize(
        "action,expected",
        [
            ("Paid ₹1 to X", ActivityType.PAID),
            ("sent ₹1 to X", ActivityType.SENT),
            ("Received ₹1 from X", ActivityType.RECEIVED),
            ("Requested ₹1 from X", ActivityType.REQUEST),
            ("Searched for chai", ActivityType.OTHER),
            ("", ActivityType.OTHER),
        ],
    )
    def test_activity_type(self, action, expected):
        assert activity_type_from_action(action) == expected

    def test_amount_with_rs_marker(self):
        assert amount_from_action("Paid Rs. 1,500.75 to Landlord") == Money(150075, "INR")

    def test_amount_usd(self):
        assert amount_from_action("Paid USD 4.99 to Google") == Money(499, "USD")

    def test_no_amount(self):
        assert amount_from_action("Used Google Pay") is None
