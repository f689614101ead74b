"""Tests for the postfixcsv command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from postfixcsv import __version__
from postfixcsv.cli import main

SHEET_TEXT = "B1 B2 +,2 B2 3 * -,+\nA1,5,7 2 /\nC2 3 *,1 2,5 1 2 + 4 * + 3 -\n"
SHEET_RESULT = "-8,-13,#ERR\n-8,5,3.5\n10.5,#ERR,14"


@pytest.fixture
def sheet(tmp_path: Path) -> Path:
    path = tmp_path / "sheet.csv"
    path.write_text(SHEET_TEXT)
    return path


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    # Keep any postfixcsv.yaml in the real cwd out of the tests
    monkeypatch.chdir(tmp_path)
    return CliRunner()


class TestProcessCommand:
    def test_prints_result(self, runner: CliRunner, sheet: Path) -> None:
        result = runner.invoke(main, ["process", str(sheet)])
        assert result.exit_code == 0, result.output
        assert result.output == SHEET_RESULT + "\n"

    def test_separator_option(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "semi.csv"
        path.write_text("1 2 +;A1 A1 *\n")
        result = runner.invoke(main, ["process", str(path), "-s", ";"])
        assert result.exit_code == 0, result.output
        assert result.output == "3;9\n"

    def test_writes_out_file(self, runner: CliRunner, sheet: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.csv"
        result = runner.invoke(main, ["process", str(sheet), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.read_text() == SHEET_RESULT + "\n"
        assert "Wrote 3 row(s)" in result.output

    def test_refuses_to_overwrite(self, runner: CliRunner, sheet: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.csv"
        out.write_text("keep me")
        result = runner.invoke(main, ["process", str(sheet), "--out", str(out)])
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert out.read_text() == "keep me"

    def test_overwrite_flag(self, runner: CliRunner, sheet: Path, tmp_path: Path) -> None:
        out = tmp_path / "out.csv"
        out.write_text("old")
        result = runner.invoke(main, ["process", str(sheet), "-o", str(out), "-x"])
        assert result.exit_code == 0, result.output
        assert out.read_text() == SHEET_RESULT + "\n"

    def test_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "pipe.csv"
        path.write_text("1 2|A1 1 +")
        cfg = tmp_path / "conf.yaml"
        cfg.write_text("separator: '|'\nerror_token: BAD\n")
        result = runner.invoke(main, ["process", str(path), "--config", str(cfg)])
        assert result.exit_code == 0, result.output
        assert result.output == "BAD|BAD\n"

    def test_cli_separator_beats_config(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "s.csv"
        path.write_text("1,2")
        cfg = tmp_path / "conf.yaml"
        cfg.write_text("separator: '|'\n")
        result = runner.invoke(main, ["process", str(path), "--config", str(cfg), "-s", ","])
        assert result.output == "1,2\n"

    def test_invalid_config(self, runner: CliRunner, sheet: Path, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("max_depth: -1\n")
        result = runner.invoke(main, ["process", str(sheet), "--config", str(cfg)])
        assert result.exit_code == 1
        assert "max_depth" in result.output

    def test_malformed_config(self, runner: CliRunner, sheet: Path, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("separator: [unclosed\n")
        result = runner.invoke(main, ["process", str(sheet), "--config", str(cfg)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "invalid YAML" in result.output

    def test_unreadable_sheet_logged(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"caf\xe9,1")
        cfg = tmp_path / "conf.yaml"
        cfg.write_text(f"logging_dir: {tmp_path / 'logs'}\n")
        result = runner.invoke(main, ["process", str(path), "--config", str(cfg)])
        assert result.exit_code == 1
        (line,) = (tmp_path / "logs" / "events.ndjson").read_text().splitlines()
        event = json.loads(line)
        assert event["level"] == "error"
        assert event["event_type"] == "file_read"
        assert event["error_code"] == "UnicodeDecodeError"

    def test_empty_separator(self, runner: CliRunner, sheet: Path) -> None:
        result = runner.invoke(main, ["process", str(sheet), "-s", ""])
        assert result.exit_code == 1

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["process", str(tmp_path / "nope.csv")])
        assert result.exit_code == 2

    def test_preview(self, runner: CliRunner, sheet: Path) -> None:
        result = runner.invoke(main, ["process", str(sheet), "--preview"])
        assert result.exit_code == 0, result.output
        assert "-13" in result.output
        assert "10.5" in result.output

    def test_event_log(self, runner: CliRunner, sheet: Path, tmp_path: Path) -> None:
        cfg = tmp_path / "conf.yaml"
        cfg.write_text(f"logging_dir: {tmp_path / 'logs'}\n")
        result = runner.invoke(main, ["process", str(sheet), "--config", str(cfg)])
        assert result.exit_code == 0, result.output
        lines = (tmp_path / "logs" / "events.ndjson").read_text().splitlines()
        types = [json.loads(line)["event_type"] for line in lines]
        assert types[0] == "file_read"
        assert types[1] == "sheet_started"
        assert types[-1] == "sheet_completed"
        assert types.count("cell_error") == 2


class TestCellCommand:
    def test_value(self, runner: CliRunner, sheet: Path) -> None:
        result = runner.invoke(main, ["cell", str(sheet), "a3"])
        assert result.exit_code == 0, result.output
        assert "Cell:  A3" in result.output
        assert "Raw:   C2 3 *" in result.output
        assert "Value: 10.5" in result.output

    def test_error_kind_shown(self, runner: CliRunner, sheet: Path) -> None:
        result = runner.invoke(main, ["cell", str(sheet), "B3"])
        assert result.exit_code == 0, result.output
        assert "Value: #ERR" in result.output
        assert "too_many_operands" in result.output

    def test_not_a_label(self, runner: CliRunner, sheet: Path) -> None:
        result = runner.invoke(main, ["cell", str(sheet), "3B"])
        assert result.exit_code == 1
        assert "Not a cell label" in result.output

    def test_outside_sheet(self, runner: CliRunner, sheet: Path) -> None:
        result = runner.invoke(main, ["cell", str(sheet), "Z99"])
        assert result.exit_code == 1
        assert "outside the sheet" in result.output


class TestConvertCommand:
    def test_convert(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["convert", "(A1 + 2) * 3"])
        assert result.exit_code == 0, result.output
        assert result.output == "A1 2 + 3 *\n"

    def test_syntax_error(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["convert", "1 +"])
        assert result.exit_code == 1
        assert "Infix parse error" in result.output


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
