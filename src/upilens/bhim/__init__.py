"""
BHIM Package

Adapter and statement parsing for BHIM transaction history exports.
"""

from .adapter import LEGACY_CONFIDENCE, STRUCTURED_CONFIDENCE, BhimAdapter
from .parser import is_legacy_statement, is_structured_statement, parse_statement

__all__ = [
    "LEGACY_CONFIDENCE",
    "STRUCTURED_CONFIDENCE",
    "BhimAdapter",
    "is_legacy_statement",
    "is_structured_statement",
    "parse_statement",
]
