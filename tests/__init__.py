"""
Test Suite for upilens

Test coverage for UPI export ingestion, parsing, merging and filtering.

Test Structure:
- fixtures/: Synthetic export payloads and archive builders
- unit/: Unit tests mirroring src/ package structure
- integration/: Containers on disk, configuration, CLI and full workflows

Test Categories:
- Core utilities (currency, money, dates, models, container)
- Payload parsers (CSV, JSON, HTML, XML)
- Google Pay and BHIM adapters
- Detection, merging, classification and filtering

Test Data:
All export payloads are synthetic. Real statements are never included in tests.
"""
