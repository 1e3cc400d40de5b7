"""
Exception hierarchy for SiftCore.

The extraction path itself never raises for any document shape; these
exceptions surface only from misuse of the public API (for example an invalid
configuration object handed to a constructor).
"""

from __future__ import annotations


class SiftError(Exception):
    """Base class for all SiftCore errors."""


class ConfigurationError(SiftError):
    """Raised when extraction options or settings are invalid."""
