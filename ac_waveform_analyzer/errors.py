"""Exception types raised by the analyzer.

All of them derive from :class:`ValueError` so callers that already guard
numeric input with ``except ValueError`` keep working.
"""

from __future__ import annotations


class WaveformError(ValueError):
    """Base class for every error raised by this package."""


class ConfigurationError(WaveformError):
    """A required setting is missing or invalid (e.g. samples per cycle)."""


class DomainError(WaveformError):
    """A quantity is mathematically undefined for the given input.

    Examples: RMS of an empty buffer, THD with a zero fundamental, an analysis
    window longer than the buffer.
    """
