"""Exceptions raised by the rerf package."""

from __future__ import annotations


class RerfError(Exception):
    """Base class for rerf errors."""


class InvalidLabelType(RerfError, TypeError):
    """Raised when the label vector is neither categorical nor numeric."""


class CategoricalMapError(RerfError, ValueError):
    """Raised when a categorical map source cannot be read or parsed."""
