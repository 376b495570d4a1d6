#!/usr/bin/env python3
"""
Google Pay Adapter

Handles Google Takeout ZIP exports. Each logical role (transactions, group
expenses, cashback, vouchers, activity log) is optional; whatever is present
is parsed independently so one bad payload never hides the others.
"""

import logging
from collections.abc import Callable
from typing import Any

from ..adapters.base import AppAdapter, FileFormat
from ..core.container import RolePath, ZipContainer, extract_roles
from ..core.errors import ExtractionError, PayloadMissingError
from ..core.models import DetectionResult, ExportFile, ParsedData, ParseResult, ParserResult, RawPayloads, SourceApp
from ..dedup import dedupe_by_id
from ..parsers.csv_parser import parse_cashback_rewards_csv, parse_transactions_csv
from ..parsers.html_parser import parse_my_activity_html
from ..parsers.json_parser import parse_group_expenses_json, parse_voucher_rewards_json

logger = logging.getLogger(__name__)

DETECTION_CONFIDENCE = 0.95

TRANSACTIONS_FRAGMENT = "Google transactions/transactions_"
GOOGLE_PAY_FRAGMENT = "Google Pay/"

ROLE_PATHS = (
    RolePath("transactions", contains=TRANSACTIONS_FRAGMENT, extension=".csv"),
    RolePath("group_expenses", suffixes=("Google Pay/Group expenses/Group expenses.json",)),
    RolePath("cashback_rewards", suffixes=("Google Pay/Rewards earned/Cashback rewards.csv",)),
    RolePath("voucher_rewards", suffixes=("Google Pay/Rewards earned/Voucher rewards.json",), strip_xssi=True),
    RolePath("activity_log", suffixes=("Google Pay/My Activity/My Activity.html",)),
)

GOOGLE_PAY_ROLES = tuple(role_path.role for role_path in ROLE_PATHS)


class GooglePayAdapter(AppAdapter):
    """Adapter for Google Pay Takeout archives."""

    app_id = SourceApp.GOOGLE_PAY
    supported_formats = (FileFormat.ZIP,)

    def detect(self, export_file: ExportFile, content: str | None = None) -> DetectionResult:
        if not export_file.is_zip:
            return DetectionResult.no_match()

        try:
            with ZipContainer.open(export_file) as container:
                claimed = container.any_member_contains(TRANSACTIONS_FRAGMENT) or container.any_member_contains(
                    GOOGLE_PAY_FRAGMENT
                )
                if not claimed:
                    return DetectionResult.no_match()
                return DetectionResult(
                    can_handle=True,
                    confidence=DETECTION_CONFIDENCE,
                    requires_password=container.is_encrypted,
                )
        except ExtractionError as e:
            logger.debug("Google Pay detection skipped %s: %s", export_file.name, e)
            return DetectionResult.no_match()

    def extract(self, export_file: ExportFile, password: str | None = None) -> RawPayloads:
        raw = extract_roles(export_file, ROLE_PATHS, password)
        if raw.is_empty:
            raise PayloadMissingError(f"No Google Pay data found in {export_file.name}")
        return raw

    def parse(self, raw: RawPayloads) -> ParseResult:
        present = [role for role in GOOGLE_PAY_ROLES if getattr(raw, role) is not None]
        if not present:
            return self.missing_payload_result("No Google Pay payloads to parse")

        data = self.new_parsed_data()
        warnings = []
        failures: list[str] = []

        # role -> (payload parser, collector into the partial result)
        parsers: dict[str, tuple[Callable[[str], ParserResult[Any]], Callable[[ParsedData, list], None]]] = {
            "transactions": (
                lambda text: parse_transactions_csv(text, self.app_id, self.classifier),
                lambda d, records: d.transactions.extend(dedupe_by_id(records)),
            ),
            "group_expenses": (
                lambda text: parse_group_expenses_json(text, self.app_id),
                lambda d, records: d.group_expenses.extend(records),
            ),
            "cashback_rewards": (
                lambda text: parse_cashback_rewards_csv(text, self.app_id),
                lambda d, records: d.cashback_rewards.extend(records),
            ),
            "voucher_rewards": (
                lambda text: parse_voucher_rewards_json(text, self.app_id),
                lambda d, records: d.voucher_rewards.extend(records),
            ),
            "activity_log": (
                lambda text: parse_my_activity_html(text, self.app_id, self.classifier),
                lambda d, records: d.activities.extend(records),
            ),
        }

        for role in present:
            parse_payload, collect = parsers[role]
            result = parse_payload(getattr(raw, role))
            warnings.extend(result.warnings)
            if not result.success:
                failures.append(f"{role}: {result.error}")
                continue
            collect(data, result.data)

        if len(failures) == len(present):
            error = "All Google Pay payloads failed to parse: " + "; ".join(failures)
            logger.error(error)
            return ParseResult(success=False, error=error, warnings=warnings)

        logger.info("Parsed Google Pay export: %s", data.counts())
        return ParseResult(success=True, data=data, warnings=warnings)
