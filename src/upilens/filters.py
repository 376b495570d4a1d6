#!/usr/bin/env python3
"""
Year and App Filters

Both filters return a new ParsedData and never mutate their input. The
sentinel "all" passes a collection through unchanged.

Year attribution per collection:
- transactions, activities: time
- group expenses: creation_time
- cashback rewards: date
- vouchers: expiry_date
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TypeVar

from .core.config import ALL
from .core.models import ParsedData, SourceApp

logger = logging.getLogger(__name__)

R = TypeVar("R")

YearFilter = int | str
AppFilter = SourceApp | str


def normalize_year(year: YearFilter | None) -> YearFilter:
    """
    Resolve a year selection to an int or the "all" sentinel.

    Raises:
        ValueError: If the year is neither "all" nor numeric
    """
    if year is None or isinstance(year, int):
        return ALL if year is None else year
    value = str(year).strip().lower()
    return ALL if value == ALL else int(value)


def normalize_app(app: AppFilter) -> AppFilter:
    """
    Resolve an app selection to a SourceApp or the "all" sentinel.

    Raises:
        ValueError: If the app id is unknown
    """
    if isinstance(app, SourceApp):
        return app
    value = str(app).strip().lower()
    return ALL if value == ALL else SourceApp(value)


@dataclass(frozen=True)
class FilterContext:
    """Combined year and app selection."""

    year: YearFilter = ALL
    apps: tuple[AppFilter, ...] = field(default=(ALL,))

    @classmethod
    def from_values(cls, year: str | int | None = None, apps: Iterable[str] | None = None) -> "FilterContext":
        """
        Build a context from user-supplied strings.

        Args:
            year: "all", a year like "2024", or None for "all"
            apps: App ids like "googlepay", or "all"; None or empty means all

        Raises:
            ValueError: If the year is not numeric or an app id is unknown
        """
        parsed_apps = tuple(normalize_app(app) for app in apps or ())
        return cls(year=normalize_year(year), apps=parsed_apps or (ALL,))

    @property
    def is_identity(self) -> bool:
        return self.year == ALL and ALL in self.apps


def _filter_year(records: list[R], year: YearFilter, date_of: Callable[[R], datetime]) -> list[R]:
    if year == ALL:
        return list(records)
    return [record for record in records if date_of(record).year == year]


def _filter_apps(records: list[R], apps: tuple[AppFilter, ...]) -> list[R]:
    if ALL in apps:
        return list(records)
    return [record for record in records if record.source_app in apps]


def filter_by_year(data: ParsedData, year: YearFilter) -> ParsedData:
    """
    Keep records whose attributed date falls in the given year.

    The year may be an int, a numeric string such as "2024", or "all".
    """
    year = normalize_year(year)
    return ParsedData(
        transactions=_filter_year(data.transactions, year, lambda t: t.time),
        group_expenses=_filter_year(data.group_expenses, year, lambda g: g.creation_time),
        cashback_rewards=_filter_year(data.cashback_rewards, year, lambda c: c.date),
        voucher_rewards=_filter_year(data.voucher_rewards, year, lambda v: v.expiry_date),
        activities=_filter_year(data.activities, year, lambda a: a.time),
        sources=list(data.sources),
    )


def filter_by_app(data: ParsedData, apps: Iterable[AppFilter]) -> ParsedData:
    """Keep records whose source app is selected (SourceApp members or app ids)."""
    selected = tuple(normalize_app(app) for app in apps) or (ALL,)
    return ParsedData(
        transactions=_filter_apps(data.transactions, selected),
        group_expenses=_filter_apps(data.group_expenses, selected),
        cashback_rewards=_filter_apps(data.cashback_rewards, selected),
        voucher_rewards=_filter_apps(data.voucher_rewards, selected),
        activities=_filter_apps(data.activities, selected),
        sources=list(data.sources),
    )


def apply_filters(data: ParsedData, context: FilterContext) -> ParsedData:
    """Year filter first, then app filter."""
    filtered = filter_by_app(filter_by_year(data, context.year), context.apps)
    logger.debug("Applied filters year=%s apps=%s: %s", context.year, context.apps, filtered.counts())
    return filtered


def get_unique_apps(data: ParsedData) -> set[SourceApp]:
    """Apps that contributed at least one record to any collection."""
    apps: set[SourceApp] = set()
    for collection in (
        data.transactions,
        data.activities,
        data.group_expenses,
        data.cashback_rewards,
        data.voucher_rewards,
    ):
        apps.update(record.source_app for record in collection)
    return apps
