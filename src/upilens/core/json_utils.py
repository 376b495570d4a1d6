#!/usr/bin/env python3
"""
JSON Utilities Module

JSON writing for CLI results and decoding for export payloads.
"""

import json
from pathlib import Path
from typing import Any

from .container import strip_xssi_prefix


def write_json(filepath: str | Path, data: Any, ensure_ascii: bool = False, sort_keys: bool = False) -> None:
    """
    Write data to a JSON file with standard pretty-printing.

    Args:
        filepath: Path to the JSON file
        data: Data to write to the file
        ensure_ascii: If True, escape non-ASCII characters (default: False)
        sort_keys: If True, sort dictionary keys (default: False)
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=ensure_ascii, sort_keys=sort_keys)


def loads_export_json(text: str) -> Any:
    """
    Decode an export JSON payload, ignoring a leading ``)]}'`` guard.

    Raises:
        json.JSONDecodeError: If the remaining text is not valid JSON
    """
    return json.loads(strip_xssi_prefix(text))
