"""
Shared fixtures: workbook factory and global config reset.
"""

import pytest
import xlwt
from openpyxl import Workbook

from modelmap.config.singleton import GlobalConfig


@pytest.fixture(autouse=True)
def reset_global_config():
    GlobalConfig.reset_config()
    yield
    GlobalConfig.reset_config()


@pytest.fixture
def make_workbook(tmp_path):
    """Build an .xlsx file from ``{sheet_title: [row, ...]}``; returns its path."""

    def _make(name="model.xlsx", sheets=None):
        wb = Workbook()
        wb.remove(wb.active)
        for title, rows in (sheets or {}).items():
            ws = wb.create_sheet(title)
            for row in rows:
                ws.append(list(row))
        path = tmp_path / name
        wb.save(path)
        return path

    return _make


@pytest.fixture
def make_xls_workbook(tmp_path):
    """Build a legacy .xls file from ``{sheet_title: [row, ...]}``; returns its path."""

    def _make(name="model.xls", sheets=None):
        wb = xlwt.Workbook()
        for title, rows in (sheets or {}).items():
            ws = wb.add_sheet(title)
            for r, row in enumerate(rows):
                for c, value in enumerate(row):
                    ws.write(r, c, value)
        path = tmp_path / name
        wb.save(str(path))
        return path

    return _make


@pytest.fixture
def model_workbook(make_workbook):
    """Build a well-formed model workbook from input and output name lists."""

    def _make(name="model.xlsx", inputs=(), outputs=()):
        return make_workbook(
            name,
            {
                "INPUTS": [("variable_name", "description")] + [(v, "") for v in inputs],
                "OUTPUTS": [("variable_name", "description")] + [(v, "") for v in outputs],
            },
        )

    return _make
