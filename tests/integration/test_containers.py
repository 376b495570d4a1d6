#!/usr/bin/env python3
"""
Integration tests for export containers.

Builds archives on disk and runs them through detection and extraction the
way an uploaded file would be handled.
"""

import pytest

from tests.fixtures.bhim_samples import STRUCTURED_HTML, build_bhim_zip
from tests.fixtures.googlepay_samples import VOUCHERS_JSON, build_encrypted_takeout_zip, build_takeout_zip
from upilens.core.container import ZipContainer
from upilens.core.models import ExportFile, SourceApp
from upilens.detector import AppDetector


@pytest.mark.integration
class TestTakeoutArchiveOnDisk:
    """Test Takeout archives read back from disk."""

    def test_detect_and_extract(self, temp_dir):
        path = temp_dir / "takeout-20240310T000000Z-001.zip"
        path.write_bytes(build_takeout_zip())

        export_file = ExportFile.from_path(path)
        detected = AppDetector().require_app(export_file)
        raw = detected.adapter.extract(export_file)

        assert detected.app == SourceApp.GOOGLE_PAY
        assert raw.voucher_rewards == VOUCHERS_JSON
        assert raw.statement_html is None

    def test_members_listed_without_directories(self, temp_dir):
        path = temp_dir / "takeout.zip"
        path.write_bytes(build_takeout_zip(include=("activity_log",)))

        with ZipContainer.open(ExportFile.from_path(path)) as container:
            assert sorted(container.names) == [
                "Takeout/Google Pay/My Activity/My Activity.html",
                "Takeout/archive_browser.html",
            ]

    def test_encrypted_round_trip(self, temp_dir):
        path = temp_dir / "takeout.zip"
        path.write_bytes(build_encrypted_takeout_zip("correct horse", include=("voucher_rewards",)))

        export_file = ExportFile.from_path(path)
        detected = AppDetector().require_app(export_file)

        assert detected.requires_password
        assert detected.adapter.extract(export_file, password="correct horse").voucher_rewards == VOUCHERS_JSON


@pytest.mark.integration
class TestBhimArchiveOnDisk:
    """Test BHIM statements zipped on disk."""

    def test_structured_statement_in_zip(self, temp_dir):
        path = temp_dir / "bhim_history.zip"
        path.write_bytes(build_bhim_zip(STRUCTURED_HTML))

        export_file = ExportFile.from_path(path)
        detected = AppDetector().require_app(export_file)
        result = detected.adapter.parse(detected.adapter.extract(export_file))

        assert detected.app == SourceApp.BHIM
        assert [t.id for t in result.data.transactions] == ["500100200301", "500100200305"]
