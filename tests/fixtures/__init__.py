"""
Test Fixtures and Utilities

Shared export payloads and archive builders for testing.

This module provides:
- Synthetic Google Pay Takeout payloads (googlepay_samples)
- Synthetic BHIM statements in both layouts (bhim_samples)
- In-memory ZIP builders, including password-protected archives (archives)

All test data is synthetic and does not contain real payment information.
"""
