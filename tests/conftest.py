"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from upilens.core.models import SourceApp, Transaction, TransactionCategory
from upilens.core.money import Money


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture
def sample_transaction() -> Transaction:
    """Sample Google Pay transaction for testing."""
    return Transaction(
        time=datetime(2024, 3, 9, 18, 51, 23),
        id="GPAY-TEST-0001",
        description="Paid to Swiggy",
        product="Google Pay",
        method="State Bank of India ••1234",
        status="Completed",
        amount=Money.parse("₹250.00"),
        source_app=SourceApp.GOOGLE_PAY,
        category=TransactionCategory.FOOD,
    )


@pytest.fixture
def currency_test_cases() -> list[dict]:
    """Test cases for amount parsing."""
    return [
        {"input": "₹1,250.50", "minor_units": 125050, "currency": "INR"},
        {"input": "INR 12", "minor_units": 1200, "currency": "INR"},
        {"input": "Rs. 99.99", "minor_units": 9999, "currency": "INR"},
        {"input": "USD 2.99", "minor_units": 299, "currency": "USD"},
        {"input": "5,541.80", "minor_units": 554180, "currency": "INR"},
    ]


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests don't write into a real data directory
    monkeypatch.setenv("UPILENS_ENV", "test")
    monkeypatch.setenv("UPILENS_DATA_DIR", str(tmp_path / "upilens_data"))
    monkeypatch.delenv("UPILENS_CATEGORIES_FILE", raising=False)
    monkeypatch.delenv("UPILENS_DEFAULT_YEAR", raising=False)
    monkeypatch.delenv("UPILENS_DEFAULT_APPS", raising=False)
    monkeypatch.delenv("UPILENS_USD_TO_INR", raising=False)

    # Each test sees configuration built from its own environment
    from upilens.core import config as config_module

    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for currency handling and precision")
    config.addinivalue_line("markers", "googlepay: Tests for Google Pay Takeout ingestion")
    config.addinivalue_line("markers", "bhim: Tests for BHIM statement ingestion")
