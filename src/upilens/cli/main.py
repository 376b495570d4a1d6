#!/usr/bin/env python3
"""
Main CLI Entry Point for UPI Lens

Detects, ingests, merges and filters UPI app exports from the command line.
"""

import logging
import os
from datetime import datetime
from pathlib import Path

import click

from ..classifier import TransactionClassifier, load_keyword_table, summarize_by_category
from ..core.config import Config, get_config
from ..core.errors import DetectionMissError, MergeError
from ..core.json_utils import write_json
from ..core.models import AppRawData, ExportFile, SourceApp
from ..core.money import Money
from ..detector import AppDetector, default_adapters
from ..filters import FilterContext, apply_filters
from ..manager import MultiAppManager


def build_classifier(config: Config) -> TransactionClassifier:
    """Classifier over the configured keyword table, or the built-in one."""
    if config.ingest.categories_file is None:
        return TransactionClassifier()
    return TransactionClassifier(load_keyword_table(config.ingest.categories_file))


def build_detector(config: Config) -> AppDetector:
    return AppDetector(default_adapters(build_classifier(config)))


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    UPI Lens - UPI Export Ingestion

    Normalizes Google Pay and BHIM exports into one classified, time-ordered
    dataset.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["UPILENS_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("upilens").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = get_config()

    if verbose:
        click.echo(f"Environment: {ctx.obj['config'].environment.value}")
        click.echo(f"Data directory: {ctx.obj['config'].data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from upilens import __author__, __version__

    click.echo(f"UPI Lens v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Output Directory: {config_obj.output_dir}")
    click.echo(f"  USD to INR Rate: {config_obj.ingest.usd_to_inr_rate}")
    click.echo(f"  Categories File: {config_obj.ingest.categories_file or 'built-in'}")
    click.echo(f"  Default Year: {config_obj.filters.default_year}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def detect(ctx: click.Context, file: Path) -> None:
    """
    Identify which UPI app produced an export.

    Example:
      upilens detect takeout-20240309.zip
    """
    detector = build_detector(ctx.obj["config"])
    try:
        detected = detector.require_app(ExportFile.from_path(file))
    except DetectionMissError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"App: {detected.app.value}")
    click.echo(f"Confidence: {detected.confidence:.2f}")
    click.echo(f"Requires password: {'yes' if detected.requires_password else 'no'}")


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--password", help="Password for encrypted archives")
@click.option("--year", help="Year to keep, or 'all' (defaults to UPILENS_DEFAULT_YEAR)")
@click.option("--app", "apps", multiple=True, help="App to keep (googlepay, bhim or all); repeatable")
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), help="Write the filtered data as JSON")
@click.option("--save", is_flag=True, help="Also write the filtered data to a timestamped file in the output directory")
@click.pass_context
def ingest(
    ctx: click.Context,
    files: tuple[Path, ...],
    password: str | None,
    year: str | None,
    apps: tuple[str, ...],
    output: Path | None,
    save: bool,
) -> None:
    """
    Ingest one or more exports into a single merged dataset.

    A later file for the same app replaces an earlier one.

    Examples:
      upilens ingest takeout.zip bhim-statement.html
      upilens ingest takeout.zip --year 2024 --app googlepay --output 2024.json
      upilens ingest takeout.zip bhim-statement.html --save
    """
    config_obj = ctx.obj["config"]
    verbose = ctx.obj.get("verbose", False)

    try:
        context = FilterContext.from_values(
            year if year is not None else config_obj.filters.default_year,
            apps or config_obj.filters.default_apps,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    manager = MultiAppManager(build_detector(config_obj))
    registry: dict[SourceApp, AppRawData] = {}

    for path in files:
        processed = manager.process_file(ExportFile.from_path(path), password)
        if not processed.success or processed.raw_data is None:
            click.echo(f"❌ {path.name}: {processed.error}", err=True)
            continue
        if processed.app in registry:
            click.echo(f"Replacing earlier {processed.app.value} export with {path.name}")
        registry[processed.raw_data.app] = processed.raw_data
        click.echo(f"✅ {path.name}: {processed.raw_data.app.value}")

    if not registry:
        raise click.ClickException("No files could be processed")

    result = manager.parse_all_app_data(registry)
    try:
        data = result.unwrap()
    except MergeError as e:
        raise click.ClickException(str(e)) from e

    filtered = apply_filters(data, context)

    click.echo(f"\nSources: {', '.join(app.value for app in data.sources)}")
    for name, count in filtered.counts().items():
        click.echo(f"  {name.replace('_', ' ').title()}: {count}")

    if result.warnings:
        click.echo(f"Warnings: {len(result.warnings)}")
        if verbose:
            for warning in result.warnings:
                click.echo(f"  - {warning}")

    summary = summarize_by_category(filtered.transactions, config_obj.ingest.usd_to_inr_rate)
    if summary:
        click.echo("\nSpend by category:")
        for category, stats in summary.items():
            total = Money.from_decimal(stats["total"])
            click.echo(f"  {category.value}: {stats['count']} transaction(s), {total}")

    if output is not None:
        write_json(output, filtered.to_dict())
        click.echo(f"\nResults saved to: {output}")

    if save:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        saved_path = config_obj.output_dir / f"{timestamp}_ingest.json"
        write_json(saved_path, filtered.to_dict())
        click.echo(f"\nResults saved to: {saved_path}")


if __name__ == "__main__":
    main()
