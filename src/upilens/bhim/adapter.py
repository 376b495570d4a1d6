#!/usr/bin/env python3
"""
BHIM Adapter

Handles BHIM statement exports delivered as a bare HTML page or as a ZIP
holding one. The page is kept whole as the statement_html payload; the
variant (structured XML or legacy table) is decided at parse time.
"""

import logging

from ..adapters.base import AppAdapter, FileFormat
from ..core.container import ZipContainer
from ..core.errors import DecryptionError, ExtractionError, PasswordRequiredError, PayloadMissingError
from ..core.models import DetectionResult, ExportFile, ParseResult, RawPayloads, SourceApp
from .parser import is_legacy_statement, is_structured_statement, parse_statement

logger = logging.getLogger(__name__)

STRUCTURED_CONFIDENCE = 0.95
LEGACY_CONFIDENCE = 0.9
# An encrypted archive cannot be sniffed; claim it weakly so a stronger match wins
ENCRYPTED_ARCHIVE_CONFIDENCE = 0.5


def _is_html_member(name: str) -> bool:
    return name.lower().endswith((".html", ".htm"))


class BhimAdapter(AppAdapter):
    """Adapter for BHIM statement exports."""

    app_id = SourceApp.BHIM
    supported_formats = (FileFormat.HTML, FileFormat.ZIP)

    def detect(self, export_file: ExportFile, content: str | None = None) -> DetectionResult:
        if export_file.is_zip:
            return self._detect_archive(export_file)
        if export_file.is_html:
            return self._detect_text(content if content is not None else export_file.text())
        return DetectionResult.no_match()

    def _detect_archive(self, export_file: ExportFile) -> DetectionResult:
        try:
            with ZipContainer.open(export_file) as container:
                member = container.find_member(_is_html_member)
                if member is None:
                    return DetectionResult.no_match()
                try:
                    text = container.read_text(member)
                except PasswordRequiredError:
                    return DetectionResult(
                        can_handle=True,
                        confidence=ENCRYPTED_ARCHIVE_CONFIDENCE,
                        requires_password=True,
                    )
                return self._detect_text(text)
        except ExtractionError as e:
            logger.debug("BHIM detection skipped %s: %s", export_file.name, e)
            return DetectionResult.no_match()

    def _detect_text(self, text: str) -> DetectionResult:
        if is_structured_statement(text):
            return DetectionResult(can_handle=True, confidence=STRUCTURED_CONFIDENCE)
        if is_legacy_statement(text):
            return DetectionResult(can_handle=True, confidence=LEGACY_CONFIDENCE)
        return DetectionResult.no_match()

    def extract(self, export_file: ExportFile, password: str | None = None) -> RawPayloads:
        if not export_file.is_zip:
            return RawPayloads(statement_html=export_file.text())

        with ZipContainer.open(export_file) as container:
            member = container.find_member(_is_html_member)
            if member is None:
                raise PayloadMissingError(f"No HTML statement found in {export_file.name}")
            try:
                html = container.read_text(member, password)
            except DecryptionError:
                logger.error("Could not decrypt %s", export_file.name)
                raise

        logger.info("Extracted BHIM statement %s from %s", member, export_file.name)
        return RawPayloads(statement_html=html)

    def parse(self, raw: RawPayloads) -> ParseResult:
        if raw.statement_html is None:
            return self.missing_payload_result("No BHIM statement HTML to parse")

        result = parse_statement(raw.statement_html, self.classifier)
        if not result.success:
            return ParseResult(success=False, error=result.error, warnings=result.warnings)

        data = self.new_parsed_data()
        data.transactions.extend(result.data)
        return ParseResult(success=True, data=data, warnings=result.warnings)
