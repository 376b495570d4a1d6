#!/usr/bin/env python3
"""
Multi-App Manager

Entry point for callers that hold a per-app registry of uploaded exports:
process_file() turns one upload into AppRawData, parse_all_app_data() merges
the registry into one dataset.
"""

import logging
from collections.abc import Mapping

from .core.errors import PasswordRequiredError, UpiLensError
from .core.models import AppRawData, ExportFile, MergeResult, ProcessResult, SourceApp
from .detector import AppDetector
from .merger import merge_all

logger = logging.getLogger(__name__)

UNRECOGNIZED_FILE_MESSAGE = "Could not detect UPI app from file. Please ensure it is a valid export."
PASSWORD_REQUIRED_MESSAGE = "This file requires a password."


class MultiAppManager:
    """Detection, extraction and merging over an injected adapter registry."""

    def __init__(self, detector: AppDetector | None = None):
        self.detector = detector or AppDetector()

    def process_file(self, export_file: ExportFile, password: str | None = None) -> ProcessResult:
        """
        Detect the app that produced a file and extract its raw payloads.

        Args:
            export_file: Uploaded file
            password: Secret for encrypted containers

        Returns:
            ProcessResult carrying AppRawData on success. Unrecognized files,
            missing passwords and extraction errors are failures, not exceptions.
        """
        detected = self.detector.detect_app(export_file)
        if detected is None:
            return ProcessResult(success=False, error=UNRECOGNIZED_FILE_MESSAGE)

        if detected.requires_password and not password:
            return ProcessResult(
                success=False,
                app=detected.app,
                error=PASSWORD_REQUIRED_MESSAGE,
                requires_password=True,
            )

        try:
            raw = detected.adapter.extract(export_file, password)
        except PasswordRequiredError:
            return ProcessResult(
                success=False,
                app=detected.app,
                error=PASSWORD_REQUIRED_MESSAGE,
                requires_password=True,
            )
        except UpiLensError as e:
            logger.error("Failed to extract %s: %s", export_file.name, e)
            return ProcessResult(
                success=False,
                app=detected.app,
                error=str(e),
                requires_password=detected.requires_password,
            )

        return ProcessResult(
            success=True,
            app=detected.app,
            raw_data=AppRawData(app=detected.app, raw=raw),
        )

    def parse_all_app_data(self, raw_by_app: Mapping[SourceApp, AppRawData]) -> MergeResult:
        """Merge every app's raw payloads into one dataset."""
        return merge_all(raw_by_app, self.detector)
