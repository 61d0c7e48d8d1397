"""Benchdb exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class BenchError(Exception):
    """Base exception for all benchdb failures."""


class BenchConfigError(BenchError):
    """Raised for invalid runtime configuration."""


class BenchImportError(BenchError):
    """Raised when an import payload is not a well-formed list of records."""


class BenchFieldParseError(BenchError):
    """Raised when one raw text field cannot be parsed.

    Stage processors absorb this error into per-call statistics, so a
    malformed run never blocks its siblings.

    Attributes:
        field_name: Raw run field that failed to parse.
        reason: Human-readable failure description.
    """

    def __init__(self, field_name: str, reason: str) -> None:
        super().__init__(f"Failed to parse field '{field_name}': {reason}")
        self.field_name = field_name
        self.reason = reason


class BenchStoreError(BenchError):
    """Raised for storage and transaction failures."""


class BenchValidationError(BenchError):
    """Raised for invalid operation arguments."""


class BenchRunSpecError(BenchError):
    """Raised for invalid or unsupported run-spec configuration."""
