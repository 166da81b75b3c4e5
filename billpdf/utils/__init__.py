"""
Shared utilities for billpdf.

Common functionality used across contexts:
- Configuration loading
- Logging setup
- PDF inspection
- Timestamps
"""

from billpdf.utils.settings import Settings, load_settings
from billpdf.utils.timestamp import now, now_iso

__all__ = ["Settings", "load_settings", "now", "now_iso"]
