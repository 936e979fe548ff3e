"""
Workbook ingestion.

Reads the ``variable_name`` column of the ``INPUTS`` and ``OUTPUTS`` sheets of
an Excel workbook. ``parse_workbook`` never raises: every failure comes back
as ``IngestionResult.error``.
"""

from __future__ import annotations

import asyncio
import io
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Union

import xlrd
from openpyxl import load_workbook

from modelmap.exceptions import IngestionError, WorkbookParseError, WorkbookReadError
from modelmap.utils.logging import get_logger

logger = get_logger("modelmap.ingestion")

REQUIRED_SHEETS = ("INPUTS", "OUTPUTS")
VARIABLE_COLUMN = "variable_name"
READ_FAILURE_MESSAGE = "Failed to read the file from disk."
# Compound-document header of legacy .xls workbooks
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

WorkbookSource = Union[str, Path, bytes, bytearray, BinaryIO]


@dataclass(frozen=True)
class IngestionResult:
    """Outcome of reading one workbook."""

    filename: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "inputs": list(self.inputs),
            "outputs": list(self.outputs),
            "error": self.error,
        }


def missing_sheets_message(missing: Iterable[str], found: Iterable[str]) -> str:
    found = list(found)
    found_list = ", ".join(found) if found else "(no sheets found)"
    return f"Required sheet(s) not found: {' and '.join(missing)}. Sheets in this file: {found_list}."


def _source_name(source: WorkbookSource, filename: str | None) -> str:
    if filename is not None:
        return filename
    if isinstance(source, (str, Path)):
        return Path(source).name
    name = getattr(source, "name", None)
    if isinstance(name, str):
        return Path(name).name
    return ""


def _read_bytes(source: WorkbookSource, filename: str) -> bytes:
    try:
        if isinstance(source, (str, Path)):
            return Path(source).read_bytes()
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)
        return source.read()
    except OSError as e:
        raise WorkbookReadError(filename, READ_FAILURE_MESSAGE, cause=e) from e


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _is_blank_row(row: Sequence[Any]) -> bool:
    return all(value is None or value == "" for value in row)


def _variable_names(rows: Iterable[Sequence[Any]]) -> list[str]:
    """
    Non-empty ``variable_name`` values of a sheet, in row order.

    The header is the first row holding any value, so blank rows above it
    are skipped.
    """
    rows = iter(rows)
    header = next((row for row in rows if not _is_blank_row(row)), None)
    if header is None:
        return []

    try:
        column = [None if h is None else str(h) for h in header].index(VARIABLE_COLUMN)
    except ValueError:
        return []

    names = []
    for row in rows:
        text = _cell_text(row[column] if column < len(row) else None)
        if text:
            names.append(text)
    return names


def _read_xlsx(data: bytes) -> tuple[list[str], dict[str, list[str]]]:
    """Sheet names and required-sheet variables of an Office Open XML workbook."""
    workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        found = list(workbook.sheetnames)
        variables = {
            name: _variable_names(workbook[name].iter_rows(values_only=True))
            for name in REQUIRED_SHEETS
            if name in found
        }
    finally:
        workbook.close()
    return found, variables


def _xls_value(cell) -> Any:
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value)
    return cell.value


def _read_xls(data: bytes) -> tuple[list[str], dict[str, list[str]]]:
    """Sheet names and required-sheet variables of a legacy BIFF (.xls) workbook."""
    book = xlrd.open_workbook(file_contents=data, on_demand=True)
    try:
        found = book.sheet_names()
        variables = {}
        for name in REQUIRED_SHEETS:
            if name in found:
                sheet = book.sheet_by_name(name)
                rows = ([_xls_value(cell) for cell in sheet.row(i)] for i in range(sheet.nrows))
                variables[name] = _variable_names(rows)
    finally:
        book.release_resources()
    return found, variables


def _parse(data: bytes, filename: str) -> IngestionResult:
    reader = _read_xls if data.startswith(OLE2_SIGNATURE) else _read_xlsx
    try:
        found, variables = reader(data)
    except Exception as e:
        raise WorkbookParseError(filename, f"Could not parse file: {e}", cause=e) from e

    missing = [name for name in REQUIRED_SHEETS if name not in found]
    if missing:
        return IngestionResult(filename=filename, error=missing_sheets_message(missing, found))

    return IngestionResult(
        filename=filename,
        inputs=tuple(variables["INPUTS"]),
        outputs=tuple(variables["OUTPUTS"]),
    )


def parse_workbook(source: WorkbookSource, filename: str | None = None) -> IngestionResult:
    """
    Extract input and output variable names from a workbook.

    Args:
        source: Path to the file, its raw bytes, or a binary file object
        filename: Name to report; defaults to the path or file object's name

    Returns:
        IngestionResult; ``error`` is set and the port lists are empty when
        the workbook could not be read or lacks a required sheet
    """
    name = _source_name(source, filename)
    try:
        result = _parse(_read_bytes(source, name), name)
    except IngestionError as e:
        logger.warning(f"Could not ingest '{name}': {e.message}")
        return IngestionResult(filename=name, error=e.message)

    if result.ok:
        logger.info(f"Ingested '{name}': {len(result.inputs)} input(s), {len(result.outputs)} output(s)")
    else:
        logger.warning(f"Could not ingest '{name}': {result.error}")
    return result


async def parse_workbook_async(source: WorkbookSource, filename: str | None = None) -> IngestionResult:
    """``parse_workbook`` run in a worker thread."""
    return await asyncio.to_thread(parse_workbook, source, filename)


def is_accepted_file(filename: str, extensions: Iterable[str]) -> bool:
    """True when ``filename`` ends with one of ``extensions`` (case-insensitive)."""
    lowered = filename.lower()
    return any(lowered.endswith(ext.lower()) for ext in extensions)


def rejected_file_message(extensions: Iterable[str]) -> str:
    return f"Only {' / '.join(extensions)} files are accepted."
