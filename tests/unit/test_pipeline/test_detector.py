#!/usr/bin/env python3
"""
Unit tests for app detection.
"""

import pytest

from tests.fixtures.bhim_samples import LEGACY_HTML, build_bhim_zip
from tests.fixtures.googlepay_samples import build_takeout_zip
from upilens.adapters import AppAdapter
from upilens.bhim import BhimAdapter
from upilens.core.errors import DetectionMissError
from upilens.core.models import DetectionResult, ExportFile, ParseResult, RawPayloads, SourceApp
from upilens.detector import AppDetector, default_adapters
from upilens.googlepay import GooglePayAdapter


class _FixedAdapter(AppAdapter):
    """Adapter that claims everything at a fixed confidence."""

    def __init__(self, app_id, confidence):
        super().__init__()
        self.app_id = app_id
        self.confidence = confidence

    def detect(self, export_file, content=None):
        return DetectionResult(can_handle=True, confidence=self.confidence)

    def extract(self, export_file, password=None):
        return RawPayloads()

    def parse(self, raw):
        return ParseResult(success=False, error="not implemented")


@pytest.mark.unit
class TestAppDetector:
    """Test adapter selection."""

    def test_default_registry(self):
        detector = AppDetector()
        assert detector.supported_apps == [SourceApp.GOOGLE_PAY, SourceApp.BHIM]
        assert [type(a) for a in default_adapters()] == [GooglePayAdapter, BhimAdapter]

    def test_takeout_zip(self):
        detected = AppDetector().detect_app(ExportFile("takeout.zip", build_takeout_zip()))

        assert detected.app == SourceApp.GOOGLE_PAY
        assert detected.confidence == 0.95
        assert not detected.requires_password

    def test_bhim_html(self):
        detected = AppDetector().detect_app(ExportFile("statement.html", LEGACY_HTML.encode("utf-8")))
        assert detected.app == SourceApp.BHIM

    def test_bhim_zip(self):
        detected = AppDetector().detect_app(ExportFile("statement.zip", build_bhim_zip()))
        assert detected.app == SourceApp.BHIM

    def test_unrecognized_file(self):
        assert AppDetector().detect_app(ExportFile("notes.txt", b"hello")) is None

    def test_require_app_raises(self):
        with pytest.raises(DetectionMissError, match="notes.txt"):
            AppDetector().require_app(ExportFile("notes.txt", b"hello"))

    def test_highest_confidence_wins(self):
        low = _FixedAdapter(SourceApp.GOOGLE_PAY, 0.4)
        high = _FixedAdapter(SourceApp.BHIM, 0.8)

        detected = AppDetector([low, high]).detect_app(ExportFile("x.zip", b""))

        assert detected.adapter is high

    def test_tie_goes_to_first_registered(self):
        first = _FixedAdapter(SourceApp.GOOGLE_PAY, 0.9)
        second = _FixedAdapter(SourceApp.BHIM, 0.9)

        detected = AppDetector([first, second]).detect_app(ExportFile("x.zip", b""))

        assert detected.adapter is first

    def test_register_appends(self):
        detector = AppDetector([])
        adapter = _FixedAdapter(SourceApp.BHIM, 0.5)
        detector.register(adapter)

        assert detector.get_adapter(SourceApp.BHIM) is adapter
        assert detector.get_adapter(SourceApp.GOOGLE_PAY) is None

    def test_detect_all_reports_every_adapter(self):
        results = AppDetector().detect_all(ExportFile("notes.txt", b"hello"))

        assert len(results) == 2
        assert not any(result.can_handle for _, result in results)
