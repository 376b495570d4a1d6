#!/usr/bin/env python3
"""
Error Taxonomy and Warning Channel

Structural failures are raised as exceptions and surface to the caller.
Row-level and single-payload failures are absorbed where they happen and
reported as ParseWarning entries alongside the primary result.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class UpiLensError(Exception):
    """Base class for all ingestion errors."""

    pass


class DetectionMissError(UpiLensError):
    """Raised when no registered adapter claims a file."""

    pass


class PasswordRequiredError(UpiLensError):
    """Raised when a container needs a password that was not supplied."""

    pass


class ExtractionError(UpiLensError):
    """Raised when a container cannot be opened or read."""

    pass


class DecryptionError(ExtractionError):
    """Raised when the supplied password does not decrypt the container."""

    pass


class PayloadMissingError(UpiLensError):
    """Raised when a container holds none of the payloads an adapter needs."""

    pass


class SchemaParseError(UpiLensError):
    """Raised when a whole payload is structurally invalid (bad JSON/XML/header)."""

    pass


class MergeError(UpiLensError):
    """Raised when every app in a merge fails to parse."""

    pass


class WarningKind(Enum):
    """Kinds of recoverable problems reported on the warning channel."""

    ROW_PARSE_FAILURE = "row_parse_failure"
    SCHEMA_PARSE_FAILURE = "schema_parse_failure"
    PAYLOAD_MISSING = "payload_missing"
    PER_APP_MERGE_FAILURE = "per_app_merge_failure"
    VALIDATION_FAILURE = "validation_failure"


@dataclass(frozen=True)
class ParseWarning:
    """A single recoverable diagnostic emitted during extraction, parsing or merging."""

    kind: WarningKind
    source: str
    message: str
    row: int | None = None

    def __str__(self) -> str:
        location = f"{self.source}#{self.row}" if self.row is not None else self.source
        return f"[{self.kind.value}] {location}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "source": self.source,
            "message": self.message,
            "row": self.row,
        }
