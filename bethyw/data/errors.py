"""
Error taxonomy for the import/merge engine.
"""
from __future__ import annotations


class BethYwError(Exception):
    """Base class for every error raised while importing or querying data."""


class NotFoundError(BethYwError, LookupError):
    """Raised when a language, measure, area, year or dataset is absent."""


class MalformedInputError(BethYwError, ValueError):
    """Raised when a row is too short or a year/value token is not numeric."""


class InvalidStreamError(BethYwError, IOError):
    """Raised when a stream is closed, unreadable or empty."""


class UnsupportedFormatError(BethYwError, ValueError):
    """Raised when populate() is given a parser type it does not know."""
