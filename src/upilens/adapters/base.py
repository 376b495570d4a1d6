#!/usr/bin/env python3
"""
App Adapter Contract

Every supported UPI app is one AppAdapter subclass. The detector consults an
ordered list of adapters; adding an app means adding a subclass and
registering it, never changing the orchestrator.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from ..classifier import TransactionClassifier
from ..core.errors import ParseWarning, WarningKind
from ..core.models import DetectionResult, ExportFile, ParsedData, ParseResult, RawPayloads, SourceApp

logger = logging.getLogger(__name__)


class FileFormat(Enum):
    """Physical file formats an adapter accepts."""

    ZIP = "zip"
    CSV = "csv"
    JSON = "json"
    HTML = "html"


class AppAdapter(ABC):
    """
    Abstract base class for per-app export adapters.

    Subclasses set ``app_id`` and ``supported_formats`` and implement
    detect/extract/parse. ``validate`` has a default policy that subclasses
    may tighten.
    """

    app_id: SourceApp
    supported_formats: tuple[FileFormat, ...] = ()

    def __init__(self, classifier: TransactionClassifier | None = None):
        """
        Initialize adapter.

        Args:
            classifier: Category classifier for parsed transactions (built-in table if None)
        """
        self.classifier = classifier or TransactionClassifier()

    @property
    def display_name(self) -> str:
        return self.app_id.value

    @abstractmethod
    def detect(self, export_file: ExportFile, content: str | None = None) -> DetectionResult:
        """
        Decide whether this adapter claims a file.

        Must not raise for unrecognized or unreadable content; returns
        DetectionResult.no_match() instead.

        Args:
            export_file: Uploaded file
            content: Pre-read text of the file, when the caller already has it
        """
        pass

    @abstractmethod
    def extract(self, export_file: ExportFile, password: str | None = None) -> RawPayloads:
        """
        Pull raw payloads out of a file.

        Raises:
            ExtractionError: Container cannot be opened
            PasswordRequiredError: Encrypted and no password given
            DecryptionError: Password does not decrypt the container
            PayloadMissingError: No payload this adapter understands is present
        """
        pass

    @abstractmethod
    def parse(self, raw: RawPayloads) -> ParseResult:
        """
        Turn raw payloads into a partial ParsedData.

        Row- and payload-level problems are returned as warnings, never raised.
        """
        pass

    def validate(self, data: ParsedData) -> bool:
        """At least one of transactions, activities or group expenses must be non-empty."""
        return bool(data.transactions or data.activities or data.group_expenses)

    def new_parsed_data(self) -> ParsedData:
        """Empty partial result tagged with this adapter's app."""
        data = ParsedData()
        data.add_source(self.app_id)
        return data

    def missing_payload_result(self, message: str) -> ParseResult:
        """Failure result for raw payloads holding nothing this adapter can parse."""
        logger.warning("%s: %s", self.display_name, message)
        return ParseResult(
            success=False,
            error=message,
            warnings=[ParseWarning(WarningKind.PAYLOAD_MISSING, self.display_name, message)],
        )
