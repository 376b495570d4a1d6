#!/usr/bin/env python3
"""
App Detection

Asks every registered adapter whether it claims an uploaded file and picks
the highest-confidence positive answer. Ties go to the adapter registered
first.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .adapters.base import AppAdapter
from .bhim.adapter import BhimAdapter
from .classifier import TransactionClassifier
from .core.errors import DetectionMissError
from .core.models import DetectionResult, ExportFile, SourceApp
from .googlepay.adapter import GooglePayAdapter

logger = logging.getLogger(__name__)


def default_adapters(classifier: TransactionClassifier | None = None) -> list[AppAdapter]:
    """Adapters for every supported app, in registration order."""
    return [GooglePayAdapter(classifier), BhimAdapter(classifier)]


@dataclass(frozen=True)
class DetectedApp:
    """The adapter that claimed a file and how strongly."""

    adapter: AppAdapter
    confidence: float
    requires_password: bool = False

    @property
    def app(self) -> SourceApp:
        return self.adapter.app_id


class AppDetector:
    """Ordered adapter registry with best-match detection."""

    def __init__(self, adapters: Iterable[AppAdapter] | None = None):
        self._adapters: list[AppAdapter] = list(adapters) if adapters is not None else default_adapters()

    @property
    def adapters(self) -> list[AppAdapter]:
        return list(self._adapters)

    @property
    def supported_apps(self) -> list[SourceApp]:
        return [adapter.app_id for adapter in self._adapters]

    def register(self, adapter: AppAdapter) -> None:
        """Append an adapter; it loses ties to everything registered before it."""
        self._adapters.append(adapter)

    def get_adapter(self, app: SourceApp) -> AppAdapter | None:
        """Return the first registered adapter for an app."""
        for adapter in self._adapters:
            if adapter.app_id == app:
                return adapter
        return None

    def detect_all(self, export_file: ExportFile, content: str | None = None) -> list[tuple[AppAdapter, DetectionResult]]:
        """Every adapter's answer, in registration order."""
        results = []
        for adapter in self._adapters:
            result = adapter.detect(export_file, content)
            logger.debug(
                "%s detection for %s: can_handle=%s confidence=%.2f",
                adapter.display_name,
                export_file.name,
                result.can_handle,
                result.confidence,
            )
            results.append((adapter, result))
        return results

    def detect_app(self, export_file: ExportFile, content: str | None = None) -> DetectedApp | None:
        """
        Choose the adapter that claims a file.

        Args:
            export_file: Uploaded file
            content: Pre-read text of the file, if available

        Returns:
            DetectedApp for the best positive match, or None when nothing claims it
        """
        best: DetectedApp | None = None
        for adapter, result in self.detect_all(export_file, content):
            if not result.can_handle:
                continue
            # Strictly greater keeps the earlier adapter on ties
            if best is None or result.confidence > best.confidence:
                best = DetectedApp(adapter, result.confidence, result.requires_password)

        if best is None:
            logger.info("No adapter recognized %s", export_file.name)
        else:
            logger.info("Detected %s for %s (confidence %.2f)", best.app.value, export_file.name, best.confidence)
        return best

    def require_app(self, export_file: ExportFile, content: str | None = None) -> DetectedApp:
        """
        Like detect_app(), but an unrecognized file is an error.

        Raises:
            DetectionMissError: If no adapter claims the file
        """
        detected = self.detect_app(export_file, content)
        if detected is None:
            raise DetectionMissError(f"Unrecognized file: {export_file.name}")
        return detected
