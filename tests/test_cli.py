"""Tests for the gridcalc command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from gridcalc import __version__
from gridcalc.cli import main
from gridcalc.logging.events import reset_sink


@pytest.fixture(autouse=True)
def _no_sink():
    reset_sink()
    yield
    reset_sink()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestEvalCommand:
    def test_arithmetic(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["eval", "=5+3*2"])
        assert result.exit_code == 0
        assert result.output == "11\n"

    def test_cell_options(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["eval", "=SUM(A1:A2)", "--cell", "A1=1", "--cell", "a2=2"])
        assert result.exit_code == 0
        assert result.output.strip() == "3"

    def test_cell_value_may_contain_equals(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["eval", "=A1", "--cell", "A1==x"])
        assert result.output.strip() == "=x"

    def test_cells_file(self, runner: CliRunner, tmp_path: Path) -> None:
        cells = tmp_path / "cells.yaml"
        cells.write_text("A1: Apple\nB1: 5\n")
        result = runner.invoke(main, ["eval", '=VLOOKUP("Apple",A1:B1,2)', "--cells", str(cells)])
        assert result.exit_code == 0
        assert result.output.strip() == "5"

    def test_cells_file_keys_case_insensitive(self, runner: CliRunner, tmp_path: Path) -> None:
        cells = tmp_path / "cells.yaml"
        cells.write_text("a1: 5\nb1: 7\n")
        result = runner.invoke(main, ["eval", "=SUM(A1:B1)", "--cells", str(cells)])
        assert result.output.strip() == "12"

    def test_bad_cell_option(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["eval", "=A1", "--cell", "A1"])
        assert result.exit_code != 0
        assert "Invalid --cell format" in result.output

    def test_error_sentinel(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["eval", "=1/0"])
        assert result.exit_code == 0
        assert result.output.strip() == "#ERROR"

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert __version__ in result.output


class TestSheetCommand:
    @pytest.fixture
    def sheet_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "budget.yaml"
        path.write_text(
            'A1: "4"\n'
            'A2: "6"\n'
            'A3: "=SUM(A1:A2)"\n'
            'B1: "=1/0"\n'
        )
        return path

    def test_table_output(self, runner: CliRunner, sheet_file: Path) -> None:
        result = runner.invoke(main, ["sheet", str(sheet_file)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "\t" + "\t".join("ABCDEFGHIJ")
        assert lines[1].split("\t")[:3] == ["1", "4", "#ERROR"]
        assert lines[3].split("\t")[:2] == ["3", "10"]

    def test_json_output(self, runner: CliRunner, sheet_file: Path) -> None:
        result = runner.invoke(main, ["sheet", str(sheet_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["values"] == {"A1": "4", "A2": "6", "A3": "10", "B1": "#ERROR"}

    def test_csv_output(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "quotes.yaml"
        path.write_text('A1: "a,b"\nB1: "say \\"hi\\""\n')
        project = tmp_path / "proj"
        project.mkdir()
        (project / "gridcalc.yaml").write_text("rows: 2\ncols: 2\n")
        result = runner.invoke(main, ["sheet", str(path), "--project", str(project), "--csv"])
        assert result.exit_code == 0
        assert result.output == '"a,b","say ""hi"""\n"",""\n'

    def test_project_config_and_logs(self, runner: CliRunner, sheet_file: Path, tmp_path: Path) -> None:
        project = tmp_path / "proj"
        project.mkdir()
        (project / "gridcalc.yaml").write_text("rows: 3\ncols: 2\n")
        result = runner.invoke(main, ["sheet", str(sheet_file), "--project", str(project), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["columns"] == ["A", "B"]

        log = (project / "logs" / "sheets" / "budget.ndjson").read_text().splitlines()
        types = [json.loads(line)["event_type"] for line in log]
        assert types.count("cell_updated") == 4
        assert types.count("formula_error") == 1
        assert types[-1] == "sheet_loaded"

    def test_cell_outside_grid(self, runner: CliRunner, sheet_file: Path, tmp_path: Path) -> None:
        project = tmp_path / "proj"
        project.mkdir()
        (project / "gridcalc.yaml").write_text("rows: 2\n")
        result = runner.invoke(main, ["sheet", str(sheet_file), "--project", str(project)])
        assert result.exit_code != 0
        assert "outside" in result.output

    def test_not_a_mapping(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("- A1\n")
        result = runner.invoke(main, ["sheet", str(path)])
        assert result.exit_code != 0
        assert "mapping" in result.output


class TestEventCommands:
    @pytest.fixture
    def project(self, runner: CliRunner, tmp_path: Path) -> Path:
        project = tmp_path / "proj"
        project.mkdir()
        sheet_file = tmp_path / "budget.yaml"
        sheet_file.write_text('A1: "2"\nA2: "=1/0"\n')
        result = runner.invoke(main, ["sheet", str(sheet_file), "--project", str(project)])
        assert result.exit_code == 0
        return project

    def test_events_newest_first(self, runner: CliRunner, project: Path) -> None:
        result = runner.invoke(main, ["events", str(project)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 4
        assert "sheet_loaded" in lines[0]
        assert "(formula_eval_error)" in lines[1]

    def test_events_filters(self, runner: CliRunner, project: Path) -> None:
        result = runner.invoke(main, ["events", str(project), "--level", "warning"])
        lines = result.output.splitlines()
        assert len(lines) == 1
        assert "WARNING" in lines[0]

        result = runner.invoke(main, ["events", str(project), "--ref", "a1"])
        lines = result.output.splitlines()
        assert len(lines) == 1
        assert "A1 updated" in lines[0]

        result = runner.invoke(main, ["events", str(project), "--type", "cell_updated", "--limit", "1"])
        assert len(result.output.splitlines()) == 1

    def test_events_empty(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["events", str(tmp_path)])
        assert result.exit_code == 0
        assert result.output.strip() == "No events found."

    def test_sheet_log(self, runner: CliRunner, project: Path) -> None:
        result = runner.invoke(main, ["sheet-log", str(project), "budget"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert "cell_updated" in lines[0]
        assert "sheet_loaded" in lines[-1]

    def test_sheet_log_unknown(self, runner: CliRunner, project: Path) -> None:
        result = runner.invoke(main, ["sheet-log", str(project), "other"])
        assert result.output.strip() == "No events found for sheet other."
