#!/usr/bin/env python3
"""
Configuration Management for UPI Lens

Handles environment-based configuration with defaults and validation.
Supports multiple environments (development, test, production).
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .currency import USD_TO_INR_RATE

# Load environment variables from .env file
load_dotenv()

ALL = "all"


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class IngestConfig:
    """Parsing and normalization settings."""

    usd_to_inr_rate: Decimal = USD_TO_INR_RATE
    categories_file: Path | None = None


@dataclass
class FilterConfig:
    """Default filter applied by the CLI when none is given."""

    default_year: str = ALL
    default_apps: list = field(default_factory=lambda: [ALL])


@dataclass
class Config:
    """
    Main configuration class.

    Loads configuration from environment variables with defaults and
    validation for each environment type.
    """

    environment: Environment

    # Core directories
    data_dir: Path
    output_dir: Path

    # Component configurations
    ingest: IngestConfig
    filters: FilterConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("UPILENS_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_upilens"
            base_dir = Path(os.getenv("UPILENS_DATA_DIR", str(default_test_dir)))
        else:
            base_dir = Path(os.getenv("UPILENS_DATA_DIR", "./data")).expanduser().resolve()

        data_dir = base_dir
        # Created on first save, not at load time
        output_dir = data_dir / "exports"

        categories_file = os.getenv("UPILENS_CATEGORIES_FILE")

        ingest = IngestConfig(
            usd_to_inr_rate=_parse_decimal(os.getenv("UPILENS_USD_TO_INR", str(USD_TO_INR_RATE))),
            categories_file=Path(categories_file).expanduser() if categories_file else None,
        )

        filters = FilterConfig(
            default_year=os.getenv("UPILENS_DEFAULT_YEAR", ALL).strip().lower(),
            default_apps=_parse_list(os.getenv("UPILENS_DEFAULT_APPS", ALL)) or [ALL],
        )

        return cls(
            environment=env,
            data_dir=data_dir,
            output_dir=output_dir,
            ingest=ingest,
            filters=filters,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if self.ingest.usd_to_inr_rate is None or self.ingest.usd_to_inr_rate <= 0:
            errors.append("UPILENS_USD_TO_INR must be a positive number")

        if self.ingest.categories_file is not None and not self.ingest.categories_file.exists():
            errors.append(f"UPILENS_CATEGORIES_FILE does not exist: {self.ingest.categories_file}")

        year = self.filters.default_year
        if year != ALL and not (year.isdigit() and len(year) == 4):
            errors.append(f"UPILENS_DEFAULT_YEAR must be 'all' or a four-digit year: {year}")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dict__") and not isinstance(field_value, (Path, Enum)):
                result[field_name] = {name: _jsonable(value) for name, value in field_value.__dict__.items()}
            else:
                result[field_name] = _jsonable(field_value)

        return result


def _jsonable(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    return value


def _parse_decimal(value: str) -> Decimal | None:
    try:
        return Decimal(value.strip())
    except (InvalidOperation, AttributeError):
        return None


def _parse_list(value: str, delimiter: str = ",") -> list:
    """Parse comma-separated string into list, handling empty values."""
    if not value:
        return []
    return [item.strip() for item in value.split(delimiter) if item.strip()]


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()
