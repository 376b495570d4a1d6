#!/usr/bin/env python3
"""
Multi-Source Merger

Folds every app's parsed payloads into one ParsedData. A failing app is
recorded and skipped; the merge fails only when every app fails.
"""

import logging
from collections.abc import Mapping

from .core.errors import ParseWarning, WarningKind
from .core.models import AppRawData, MergeResult, ParsedData, RawPayloads, SourceApp
from .detector import AppDetector

logger = logging.getLogger(__name__)


def sort_newest_first(data: ParsedData) -> None:
    """
    Order transactions, activities and group expenses by descending time.

    The sort is stable, so equal timestamps keep insertion order.
    """
    data.transactions.sort(key=lambda t: t.time, reverse=True)
    data.activities.sort(key=lambda a: a.time, reverse=True)
    data.group_expenses.sort(key=lambda g: g.creation_time, reverse=True)


def merge_all(
    raw_by_app: Mapping[SourceApp, RawPayloads | AppRawData],
    detector: AppDetector | None = None,
) -> MergeResult:
    """
    Parse and merge raw payloads for several apps.

    The mapping is copied before iteration; the caller's registry is never
    mutated.

    Args:
        raw_by_app: Raw payloads keyed by app
        detector: Adapter registry used to resolve each app (defaults to all adapters)

    Returns:
        MergeResult; success unless every app failed. An empty mapping merges
        to empty data.
    """
    snapshot = dict(raw_by_app)
    detector = detector or AppDetector()

    merged = ParsedData()
    warnings: list[ParseWarning] = []
    failed_apps: list[SourceApp] = []
    errors: list[str] = []

    for app, entry in snapshot.items():
        raw = entry.raw if isinstance(entry, AppRawData) else entry

        adapter = detector.get_adapter(app)
        if adapter is None:
            message = f"No adapter registered for {app.value}"
            logger.warning(message)
            warnings.append(ParseWarning(WarningKind.PER_APP_MERGE_FAILURE, app.value, message))
            failed_apps.append(app)
            errors.append(message)
            continue

        try:
            result = adapter.parse(raw)
        except Exception as e:
            message = f"{type(e).__name__}: {e}"
            logger.exception("Unexpected error parsing %s", app.value)
            warnings.append(ParseWarning(WarningKind.PER_APP_MERGE_FAILURE, app.value, message))
            failed_apps.append(app)
            errors.append(f"{app.value}: {message}")
            continue
        warnings.extend(result.warnings)

        if not result.success or result.data is None:
            message = result.error or f"Failed to parse {app.value}"
            logger.warning("Excluding %s from merge: %s", app.value, message)
            warnings.append(ParseWarning(WarningKind.PER_APP_MERGE_FAILURE, app.value, message))
            failed_apps.append(app)
            errors.append(f"{app.value}: {message}")
            continue

        if not adapter.validate(result.data):
            message = f"{app.value} produced no transactions, activities or group expenses"
            logger.warning(message)
            warnings.append(ParseWarning(WarningKind.VALIDATION_FAILURE, app.value, message))

        merged.extend(result.data)
        merged.add_source(app)

    if snapshot and len(failed_apps) == len(snapshot):
        error = "All apps failed to parse: " + "; ".join(errors)
        logger.error(error)
        return MergeResult(success=False, error=error, warnings=warnings, failed_apps=failed_apps)

    sort_newest_first(merged)
    logger.info("Merged %d app(s): %s", len(merged.sources), merged.counts())
    return MergeResult(success=True, data=merged, warnings=warnings, failed_apps=failed_apps)
