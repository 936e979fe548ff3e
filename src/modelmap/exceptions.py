"""
modelmap exception hierarchy.

Graph-level problems (invalid wiring, cycles, degraded nodes) are never raised:
they come back as ``ValidationFailure`` values or rank markers. The exceptions
here cover the ambient layers around the graph.

Hierarchy::

    ModelMapError
    ├── ConfigurationError        - config loading, parsing, validation
    └── IngestionError            - a workbook could not be ingested
        ├── WorkbookReadError     - bytes could not be read from disk
        └── WorkbookParseError    - bytes are not a readable workbook
"""

from __future__ import annotations


class ModelMapError(Exception):
    """Base exception for all modelmap errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(ModelMapError):
    """Raised when configuration loading, parsing, or validation fails."""


# --- Ingestion ---------------------------------------------------------------


class IngestionError(ModelMapError):
    """Raised inside the ingestion adapter when a workbook cannot be ingested.

    ``parse_workbook`` converts these into ``IngestionResult.error``; they do
    not escape the adapter.
    """

    def __init__(self, filename: str, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message, details={"filename": filename})
        self.filename = filename
        if cause is not None:
            self.__cause__ = cause


class WorkbookReadError(IngestionError):
    """Raised when the file cannot be read from disk."""


class WorkbookParseError(IngestionError):
    """Raised when the file contents are not a readable workbook."""
