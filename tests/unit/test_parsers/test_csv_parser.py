#!/usr/bin/env python3
"""
Unit tests for CSV payload parsing.
"""

from datetime import datetime

import pytest

from tests.fixtures.googlepay_samples import CASHBACK_CSV, TRANSACTIONS_CSV, TRANSACTIONS_CSV_WITH_BAD_ROWS
from upilens.core.errors import SchemaParseError, WarningKind
from upilens.core.models import SourceApp, TransactionCategory
from upilens.core.money import Money
from upilens.parsers import parse_cashback_rewards_csv, parse_transactions_csv, read_csv_frame


@pytest.mark.unit
class TestParseTransactionsCsv:
    """Test the transactions CSV parser."""

    def test_all_rows_parsed(self):
        """Test the parser itself does not deduplicate."""
        result = parse_transactions_csv(TRANSACTIONS_CSV, SourceApp.GOOGLE_PAY)

        assert result.success
        assert [t.id for t in result.data] == ["GPAY-0001", "GPAY-0002", "GPAY-0003", "GPAY-0001"]
        assert result.warnings == []

    def test_fields_mapped(self):
        first = parse_transactions_csv(TRANSACTIONS_CSV, SourceApp.GOOGLE_PAY).data[0]

        assert first.time == datetime(2024, 3, 9, 18, 51)
        assert first.description == "Paid to Swiggy"
        assert first.product == "Google Pay"
        assert first.method == "State Bank of India ••1234"
        assert first.status == "Completed"
        assert first.amount == Money.parse("₹250.00")
        assert first.source_app == SourceApp.GOOGLE_PAY
        assert first.category == TransactionCategory.FOOD

    def test_quoted_thousands_separator(self):
        second = parse_transactions_csv(TRANSACTIONS_CSV, SourceApp.GOOGLE_PAY).data[1]
        assert second.amount.minor_units == 118050
        assert second.category == TransactionCategory.TRAVEL_TRANSPORT

    def test_usd_amount_keeps_currency(self):
        third = parse_transactions_csv(TRANSACTIONS_CSV, SourceApp.GOOGLE_PAY).data[2]
        assert third.amount == Money(299, "USD")

    def test_bad_rows_skipped_with_warnings(self):
        """Test unparseable rows are reported and the rest survive."""
        result = parse_transactions_csv(TRANSACTIONS_CSV_WITH_BAD_ROWS, SourceApp.GOOGLE_PAY)

        assert result.success
        assert [t.id for t in result.data] == ["GPAY-0001", "GPAY-0007"]
        assert [w.row for w in result.warnings] == [3, 4, 5]
        assert all(w.kind == WarningKind.ROW_PARSE_FAILURE for w in result.warnings)
        assert all(w.source == "transactions" for w in result.warnings)

    def test_missing_required_header_fails_payload(self):
        result = parse_transactions_csv("Date,Description\n2024-01-01,Tea\n", SourceApp.GOOGLE_PAY)

        assert not result.success
        assert "Time" in result.error
        assert result.warnings[0].kind == WarningKind.SCHEMA_PARSE_FAILURE

    def test_empty_payload_fails(self):
        result = parse_transactions_csv("", SourceApp.GOOGLE_PAY)
        assert not result.success
        assert "empty" in result.error

    def test_header_only_is_empty_success(self):
        result = parse_transactions_csv("Time,Transaction ID,Amount\n", SourceApp.GOOGLE_PAY)
        assert result.success
        assert result.data == []

    def test_source_app_is_stamped(self):
        result = parse_transactions_csv(TRANSACTIONS_CSV, SourceApp.BHIM)
        assert {t.source_app for t in result.data} == {SourceApp.BHIM}


@pytest.mark.unit
class TestParseCashbackCsv:
    """Test the cashback rewards CSV parser."""

    def test_rows_parsed(self):
        result = parse_cashback_rewards_csv(CASHBACK_CSV, SourceApp.GOOGLE_PAY)

        assert result.success
        assert len(result.data) == 2
        first = result.data[0]
        assert first.date == datetime(2024, 3, 10)
        assert first.amount == Money(2500, "INR")
        assert first.currency == "INR"
        assert first.description == "Scratch card reward"

    def test_currency_column_applied(self):
        result = parse_cashback_rewards_csv("Date,Currency,Amount\n2024-01-01,USD,1.50\n", SourceApp.GOOGLE_PAY)
        assert result.data[0].amount == Money(150, "USD")


@pytest.mark.unit
class TestReadCsvFrame:
    """Test the shared DataFrame loader."""

    def test_bom_and_padding_in_header(self):
        df, warnings = read_csv_frame("\ufeffTime , Amount\nx,1\n", "test", ("Time", "Amount"))
        assert list(df.columns) == ["Time", "Amount"]
        assert warnings == []

    def test_values_stay_strings(self):
        df, _ = read_csv_frame("Time,Amount\n0012,NA\n", "test", ("Time",))
        assert df.iloc[0]["Time"] == "0012"
        assert df.iloc[0]["Amount"] == "NA"

    def test_missing_column_raises(self):
        with pytest.raises(SchemaParseError, match="missing required column"):
            read_csv_frame("A,B\n1,2\n", "test", ("Time",))
