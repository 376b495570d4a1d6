"""
UPI Lens - UPI Export Ingestion and Normalization

Turns the exports produced by UPI payment apps into one unified, classified,
time-ordered dataset.

Key Features:
- Google Pay Takeout archives (transactions, group expenses, rewards, activity)
- BHIM statements in both the structured XML and the legacy table layout
- Password-protected ZIP containers
- Keyword classification into spending categories
- Multi-app merging with year and app filters

Domain Packages:
- core: Money, timestamps, data models, containers, errors, configuration
- parsers: CSV, JSON, HTML and embedded-XML payload parsers
- adapters: The per-app adapter contract
- googlepay, bhim: Adapters for each supported app
- cli: Command-line interface

Example Usage:
    from upilens import ExportFile, MultiAppManager

    manager = MultiAppManager()
    processed = manager.process_file(ExportFile.from_path("takeout.zip"))
    merged = manager.parse_all_app_data({processed.app: processed.raw_data})
"""

__version__ = "0.1.0"
__author__ = "UPI Lens Developers"

from .classifier import TransactionClassifier, classify
from .core.config import Environment, get_config
from .core.models import ExportFile, ParsedData, SourceApp, Transaction, TransactionCategory
from .detector import AppDetector, default_adapters
from .filters import FilterContext, apply_filters
from .manager import MultiAppManager
from .merger import merge_all

__all__ = [
    # Models
    "ExportFile",
    "ParsedData",
    "SourceApp",
    "Transaction",
    "TransactionCategory",
    # Pipeline
    "AppDetector",
    "MultiAppManager",
    "TransactionClassifier",
    "apply_filters",
    "classify",
    "default_adapters",
    "merge_all",
    "FilterContext",
    # Configuration
    "Environment",
    "get_config",
]
