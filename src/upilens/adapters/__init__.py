"""
App Adapters

The uniform detect/extract/parse/validate contract implemented once per UPI app.
"""

from .base import AppAdapter, FileFormat

__all__ = ["AppAdapter", "FileFormat"]
