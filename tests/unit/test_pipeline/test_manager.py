#!/usr/bin/env python3
"""
Unit tests for the multi-app manager.
"""

import pytest

from tests.fixtures.archives import build_encrypted_zip
from tests.fixtures.bhim_samples import LEGACY_HTML, build_encrypted_bhim_zip
from tests.fixtures.googlepay_samples import build_encrypted_takeout_zip, build_takeout_zip
from upilens.core.models import ExportFile, SourceApp
from upilens.manager import PASSWORD_REQUIRED_MESSAGE, UNRECOGNIZED_FILE_MESSAGE, MultiAppManager


@pytest.fixture
def manager():
    return MultiAppManager()


@pytest.mark.unit
class TestProcessFile:
    """Test turning one upload into raw app data."""

    def test_takeout(self, manager):
        processed = manager.process_file(ExportFile("takeout.zip", build_takeout_zip()))

        assert processed.success
        assert processed.app == SourceApp.GOOGLE_PAY
        assert processed.raw_data.app == SourceApp.GOOGLE_PAY
        assert processed.raw_data.raw.transactions is not None

    def test_bhim_html(self, manager):
        processed = manager.process_file(ExportFile("statement.html", LEGACY_HTML.encode("utf-8")))

        assert processed.success
        assert processed.raw_data.raw.statement_html == LEGACY_HTML

    def test_unrecognized(self, manager):
        processed = manager.process_file(ExportFile("notes.txt", b"hello"))

        assert not processed.success
        assert processed.app is None
        assert processed.error == UNRECOGNIZED_FILE_MESSAGE

    def test_password_required(self, manager):
        processed = manager.process_file(ExportFile("takeout.zip", build_encrypted_takeout_zip("s3cret")))

        assert not processed.success
        assert processed.requires_password
        assert processed.app == SourceApp.GOOGLE_PAY
        assert processed.error == PASSWORD_REQUIRED_MESSAGE

    def test_password_supplied(self, manager):
        data = build_encrypted_takeout_zip("s3cret")
        processed = manager.process_file(ExportFile("takeout.zip", data), password="s3cret")

        assert processed.success
        assert processed.raw_data.raw.present_roles()[0] == "transactions"

    def test_wrong_password(self, manager):
        data = build_encrypted_takeout_zip("s3cret")
        processed = manager.process_file(ExportFile("takeout.zip", data), password="nope")

        assert not processed.success
        assert "Incorrect password" in processed.error
        assert processed.requires_password

    def test_encrypted_bhim_archive(self, manager):
        """Test a locked archive with no stronger claimant is routed to BHIM."""
        data = build_encrypted_bhim_zip("1234")

        locked = manager.process_file(ExportFile("bhim.zip", data))
        unlocked = manager.process_file(ExportFile("bhim.zip", data), password="1234")

        assert locked.requires_password
        assert locked.app == SourceApp.BHIM
        assert unlocked.success
        assert unlocked.raw_data.raw.statement_html == LEGACY_HTML

    def test_aes_archive_reports_unsupported_method(self, manager):
        """Test the correct password on an AES-labelled member is not blamed."""
        data = build_encrypted_zip({"BHIM_Statement.html": LEGACY_HTML}, "1234", compress_type=99)

        processed = manager.process_file(ExportFile("statement.zip", data), password="1234")

        assert not processed.success
        assert processed.app == SourceApp.BHIM
        assert "Unsupported compression or encryption method" in processed.error
        assert "Incorrect password" not in processed.error


@pytest.mark.unit
class TestParseAllAppData:
    """Test merging the registry."""

    def test_registry_merged(self, manager):
        registry = {}
        for export_file in (
            ExportFile("takeout.zip", build_takeout_zip()),
            ExportFile("statement.html", LEGACY_HTML.encode("utf-8")),
        ):
            processed = manager.process_file(export_file)
            registry[processed.app] = processed.raw_data

        result = manager.parse_all_app_data(registry)

        assert result.success
        assert set(result.data.sources) == {SourceApp.GOOGLE_PAY, SourceApp.BHIM}
        assert len(result.data.transactions) == 6
