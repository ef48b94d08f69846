"""Custom exception hierarchy for Schoolhouse."""

from __future__ import annotations


class SchoolhouseError(Exception):
    """Base exception for all Schoolhouse errors."""


class YearConfigurationError(SchoolhouseError):
    """Raised when a school year's sliding-scale bounds are malformed."""


class RecordNotFoundError(SchoolhouseError):
    """Raised when a year, family or contract does not exist."""


class ContractStateError(SchoolhouseError):
    """Raised when a contract operation is not allowed in its current state."""


class ContractPdfError(SchoolhouseError):
    """Raised when contract PDF rendering fails."""
