"""Tests for the gridcalc command line."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from gridcalc.cli import main, run_command
from gridcalc.sheet import Spreadsheet


class TestEval:
    def test_constant(self) -> None:
        result = CliRunner().invoke(main, ["eval", "=2+3*4"])
        assert result.exit_code == 0
        assert result.output.strip() == "14"

    def test_with_assignments(self) -> None:
        result = CliRunner().invoke(
            main, ["eval", "A1+A2*2", "--set", "A1=5", "--set", "A2=7"]
        )
        assert result.exit_code == 0
        assert result.output.strip() == "19"

    def test_error_code(self) -> None:
        result = CliRunner().invoke(main, ["eval", "=MIN(A1:A3)"])
        assert result.exit_code == 0
        assert result.output.strip() == "#ERR"

    def test_bad_set_format(self) -> None:
        result = CliRunner().invoke(main, ["eval", "=1", "--set", "A1"])
        assert result.exit_code != 0
        assert "ADDR=VALUE" in result.output

    def test_bad_set_address(self) -> None:
        result = CliRunner().invoke(main, ["eval", "=1", "--set", "A0=1"])
        assert result.exit_code != 0

    def test_bad_grid_size(self) -> None:
        result = CliRunner().invoke(main, ["eval", "=1", "--cols", "27"])
        assert result.exit_code != 0
        assert "out of bounds" in result.output

    def test_zero_cols_rejected(self) -> None:
        result = CliRunner().invoke(main, ["eval", "=1", "--cols", "0"])
        assert result.exit_code != 0
        assert "out of bounds" in result.output


class TestShow:
    def test_prints_grid(self, tmp_path: Path) -> None:
        src = tmp_path / "in.csv"
        src.write_text("5,=A1+7\n")
        result = CliRunner().invoke(main, ["show", str(src), "--rows", "1", "--cols", "2"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "      A  |   B  | ",
            " 1:    5 |   12 | ",
        ]

    def test_separator_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text(
            yaml.safe_dump({"rows": 1, "cols": 2, "csv_separator": ";"})
        )
        src = tmp_path / "in.csv"
        src.write_text("1;=A1*3\n")
        result = CliRunner().invoke(
            main, ["show", str(src), "--project-dir", str(tmp_path)]
        )
        assert result.exit_code == 0
        assert "   3 | " in result.output
        events = (tmp_path / "logs" / "events.ndjson").read_text().splitlines()
        assert any(json.loads(line)["event_type"] == "csv_imported" for line in events)

    def test_non_utf8_file(self, tmp_path: Path) -> None:
        src = tmp_path / "in.csv"
        src.write_bytes(b"\xff\xfe1,2\n")
        result = CliRunner().invoke(main, ["show", str(src)])
        assert result.exit_code == 1
        assert "Could not read" in result.output

    def test_zero_rows_rejected(self, tmp_path: Path) -> None:
        src = tmp_path / "in.csv"
        src.write_text("1\n")
        result = CliRunner().invoke(main, ["show", str(src), "--rows", "0"])
        assert result.exit_code != 0
        assert "out of bounds" in result.output


class TestInit:
    def test_writes_defaults(self, tmp_path: Path) -> None:
        target = tmp_path / "proj"
        result = CliRunner().invoke(main, ["init", str(target)])
        assert result.exit_code == 0
        cfg = yaml.safe_load((target / "gridcalc.yaml").read_text())
        assert cfg["rows"] == 10
        assert cfg["csv_separator"] == ","


class TestRepl:
    def test_session(self) -> None:
        session = "put A1 5\nput B1 =a1*2\nget B1\nsrc B1\nget A0\nbogus\nquit\n"
        result = CliRunner().invoke(main, ["repl", "--rows", "3", "--cols", "3"], input=session)
        assert result.exit_code == 0
        assert "B1 = 10" in result.output
        assert "=A1*2" in result.output
        assert "error: Address out of bounds" in result.output
        assert "unknown command 'bogus'" in result.output

    def test_eof_ends_session(self) -> None:
        result = CliRunner().invoke(main, ["repl"], input="put A1 1\n")
        assert result.exit_code == 0

    def test_save_and_load(self, tmp_path: Path) -> None:
        out = tmp_path / "g.csv"
        session = f"put A1 2\nput A2 =A1^3\nsave {out}\nquit\n"
        result = CliRunner().invoke(main, ["repl", "--rows", "2", "--cols", "1"], input=session)
        assert result.exit_code == 0
        assert out.read_text() == "2\n=A1^3\n"

        result = CliRunner().invoke(
            main,
            ["repl", "--rows", "2", "--cols", "1", "--load", str(out)],
            input="get A2\nexit\n",
        )
        assert result.exit_code == 0
        assert "8" in result.output


class TestRunCommand:
    def test_blank_line_continues(self) -> None:
        assert run_command(Spreadsheet(2, 2), "   \n") is True

    def test_quit_stops(self) -> None:
        assert run_command(Spreadsheet(2, 2), "QUIT") is False

    def test_put_empty_clears(self) -> None:
        sheet = Spreadsheet(2, 2)
        sheet.put("A1", "3")
        run_command(sheet, "put A1")
        assert sheet.get("A1") == ""

    def test_load_missing_file_reports(self, tmp_path: Path, capsys) -> None:
        assert run_command(Spreadsheet(2, 2), f"load {tmp_path / 'none.csv'}") is True
        assert "error:" in capsys.readouterr().out

    def test_load_non_utf8_file_reports(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "x.csv"
        src.write_bytes(b"\xff\xfe1,2\n")
        assert run_command(Spreadsheet(2, 2), f"load {src}") is True
        assert "error:" in capsys.readouterr().out
