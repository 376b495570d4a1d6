#!/usr/bin/env python3
"""
Record Deduplication

Removes repeats of the same underlying record emitted within one parse pass,
keyed by the record's natural identifier (payment / transaction ID). Applied
per export variant, never across apps.
"""

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

logger = logging.getLogger(__name__)

R = TypeVar("R")


def dedupe_by_id(records: Iterable[R], key: Callable[[R], str | None] = lambda r: r.id) -> list[R]:
    """
    Keep the first occurrence of each identifier, preserving order.

    Records whose identifier is empty or None have no natural key and are
    all kept.

    Args:
        records: Candidate records in emission order
        key: Function returning a record's identifier

    Returns:
        New list without repeated identifiers
    """
    seen: set[str] = set()
    unique: list[R] = []
    dropped = 0

    for record in records:
        identifier = key(record)
        if not identifier:
            unique.append(record)
            continue
        if identifier in seen:
            dropped += 1
            continue
        seen.add(identifier)
        unique.append(record)

    if dropped:
        logger.info("Dropped %d duplicate record(s)", dropped)

    return unique
