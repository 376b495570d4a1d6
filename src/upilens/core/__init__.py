"""
Core Utilities Package

Shared business logic, data models, and utilities used across all app adapters.

This package provides:
- Currency handling with integer minor units for precision
- Timestamp parsing for every export encoding, normalized to IST
- The unified record model (transactions, group expenses, rewards, activities)
- ZIP container extraction by logical role
- Error taxonomy and the structured warning channel
- Configuration management for environment-specific settings
"""

from .config import (
    ALL,
    Config,
    Environment,
    get_config,
    reload_config,
)
from .container import RolePath, ZipContainer, extract_roles, strip_xssi_prefix
from .currency import INR, USD, USD_TO_INR_RATE, parse_decimal_amount
from .dates import IST, parse_day_month_year, parse_timestamp
from .errors import (
    DecryptionError,
    DetectionMissError,
    ExtractionError,
    MergeError,
    ParseWarning,
    PasswordRequiredError,
    PayloadMissingError,
    SchemaParseError,
    UpiLensError,
    WarningKind,
)
from .models import (
    ActivityRecord,
    ActivityType,
    AppRawData,
    CashbackReward,
    DetectionResult,
    ExportFile,
    GroupExpense,
    GroupExpenseItem,
    GroupExpenseItemState,
    GroupExpenseState,
    MergeResult,
    ParsedData,
    ParseResult,
    ParserResult,
    ProcessResult,
    RawPayloads,
    SourceApp,
    Transaction,
    TransactionCategory,
    Voucher,
)
from .money import Money, convert_to_inr

__all__ = [
    "ALL",
    "INR",
    "IST",
    "USD",
    "USD_TO_INR_RATE",
    # Data models
    "ActivityRecord",
    "ActivityType",
    "AppRawData",
    "CashbackReward",
    # Configuration
    "Config",
    "DecryptionError",
    "DetectionMissError",
    "DetectionResult",
    "Environment",
    "ExportFile",
    "ExtractionError",
    "GroupExpense",
    "GroupExpenseItem",
    "GroupExpenseItemState",
    "GroupExpenseState",
    "MergeError",
    "MergeResult",
    "Money",
    "ParseResult",
    "ParseWarning",
    "ParsedData",
    "ParserResult",
    "PasswordRequiredError",
    "PayloadMissingError",
    "ProcessResult",
    "RawPayloads",
    "RolePath",
    "SchemaParseError",
    "SourceApp",
    "Transaction",
    "TransactionCategory",
    "UpiLensError",
    "Voucher",
    "WarningKind",
    "ZipContainer",
    "convert_to_inr",
    "extract_roles",
    "get_config",
    "parse_day_month_year",
    "parse_decimal_amount",
    "parse_timestamp",
    "reload_config",
    "strip_xssi_prefix",
]
