"""
Tests for CLI commands.

Uses typer's CliRunner to invoke the app in-process.
"""

import json

from typer.testing import CliRunner

from modelmap.cli.main import app

runner = CliRunner()


class TestVersion:
    """Tests for --version flag."""

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "modelmap version" in result.output

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "modelmap version" in result.output


class TestHelp:
    """Tests for help output."""

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "inspect" in result.output

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "modelmap" in result.output.lower()

    def test_inspect_help(self):
        result = runner.invoke(app, ["inspect", "--help"])
        assert result.exit_code == 0


class TestInspect:
    """Tests for the inspect command."""

    def test_table_output(self, model_workbook, tmp_path):
        path = model_workbook("Revenue Model.xlsx", ["tax_rate"], ["gross_revenue", "ebitda"])
        result = runner.invoke(app, ["inspect", str(path), "-d", str(tmp_path)])

        assert result.exit_code == 0
        assert "Revenue Model.xlsx" in result.output
        assert "tax_rate" in result.output
        assert "ebitda" in result.output

    def test_json_output(self, model_workbook, tmp_path):
        path = model_workbook("m.xlsx", ["a", "a"], ["b"])
        result = runner.invoke(app, ["inspect", str(path), "--json", "-d", str(tmp_path)])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "filename": "m.xlsx",
            "inputs": ["a", "a"],
            "outputs": ["b"],
            "error": None,
        }

    def test_missing_sheet_exits_with_error(self, make_workbook, tmp_path):
        path = make_workbook("m.xlsx", {"INPUTS": [("variable_name",)]})
        result = runner.invoke(app, ["inspect", str(path), "--json", "-d", str(tmp_path)])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["error"] == (
            "Required sheet(s) not found: OUTPUTS. Sheets in this file: INPUTS."
        )

    def test_rejected_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        result = runner.invoke(app, ["inspect", str(path), "-d", str(tmp_path)])

        assert result.exit_code == 1
        assert "Only .xlsx / .xls files are accepted." in result.output

    def test_project_config_extensions(self, model_workbook, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "logging:\n  level: ERROR\ningestion:\n  accepted_extensions: ['.xlsm']\n"
        )
        path = model_workbook("m.xlsx", ["a"], ["b"])
        result = runner.invoke(app, ["inspect", str(path), "-d", str(tmp_path)])

        assert result.exit_code == 1
        assert "Only .xlsm files are accepted." in result.output

    def test_bad_project_config(self, model_workbook, tmp_path):
        (tmp_path / "config.yaml").write_text("logging: [unclosed\n")
        path = model_workbook("m.xlsx")
        result = runner.invoke(app, ["inspect", str(path), "-d", str(tmp_path)])

        assert result.exit_code == 2
