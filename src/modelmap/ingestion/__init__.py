"""
Spreadsheet ingestion adapter.
"""

from modelmap.ingestion.excel import (
    REQUIRED_SHEETS,
    IngestionResult,
    is_accepted_file,
    parse_workbook,
    parse_workbook_async,
    rejected_file_message,
)

__all__ = [
    "REQUIRED_SHEETS",
    "IngestionResult",
    "is_accepted_file",
    "parse_workbook",
    "parse_workbook_async",
    "rejected_file_message",
]
