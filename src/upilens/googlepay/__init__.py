"""
Google Pay Package

Adapter for Google Pay data delivered through Google Takeout.
"""

from .adapter import DETECTION_CONFIDENCE, ROLE_PATHS, GooglePayAdapter

__all__ = ["DETECTION_CONFIDENCE", "ROLE_PATHS", "GooglePayAdapter"]
