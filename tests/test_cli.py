from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

import pytest
from typer.testing import CliRunner

from cli.app import app
from services.processor import build_default_analyzer
from settings import get_settings

LOG_BODY = (
    "Date Time,Type,CPM\n"
    "5/31/2019 23:59,Every Minute,46\n"
    "6/1/2019 0:01,Every Minute,50\n"
    "6/1/2019 0:02,Every Minute,48\n"
    "6/2/2019 0:03,Every Minute,44\n"
)


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def configured_levels(monkeypatch) -> List[str]:
    levels: List[str] = []
    monkeypatch.setattr("cli.app.configure_logging", levels.append)
    get_settings.cache_clear()
    build_default_analyzer.cache_clear()
    yield levels
    get_settings.cache_clear()
    build_default_analyzer.cache_clear()


@pytest.fixture()
def log_file(tmp_path: Path) -> Path:
    path = tmp_path / "radiation.txt"
    path.write_text(LOG_BODY)
    return path


def test_analyze_prints_tables_and_summary(runner: CliRunner, log_file: Path) -> None:
    result = runner.invoke(app, ["analyze", str(log_file)])

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "-" * 30
    assert lines[1] == "Radiation samples with CPM >= (max - 5)"
    assert "| 5/31/2019 23:59      |  46 |" in lines
    assert "| 6/1/2019 0:01        |  50 |" in lines
    assert "| 6/2/2019 0:03        |  44 |" not in lines
    assert (
        "Most Likely Camping trip date: 2019-06-01, number of high counts that day : 2" in lines
    )
    assert "       Samples that day" in lines


def test_analyze_missing_file_exits_cleanly(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["analyze", str(tmp_path / "nope.txt")])

    assert result.exit_code == 0
    assert "Most Likely Camping trip date: none, number of high counts that day : 0" in result.stdout


def test_analyze_uses_configured_path_and_width(
    runner: CliRunner, log_file: Path, monkeypatch
) -> None:
    monkeypatch.setenv("CAMPTRIP_LOG_PATH", str(log_file))
    monkeypatch.setenv("CAMPTRIP_TABLE_WIDTH", "40")

    result = runner.invoke(app, ["analyze"])

    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "-" * 40


def test_analyze_margin_option_widens_threshold(runner: CliRunner, log_file: Path) -> None:
    result = runner.invoke(app, ["analyze", str(log_file), "--margin", "6"])

    assert result.exit_code == 0
    assert "Radiation samples with CPM >= (max - 6)" in result.stdout
    assert "| 6/2/2019 0:03        |  44 |" in result.stdout


def test_analyze_rejects_negative_margin(runner: CliRunner, log_file: Path) -> None:
    result = runner.invoke(app, ["analyze", str(log_file), "--margin", "-1"])

    assert result.exit_code != 0


def test_analyze_json_report(runner: CliRunner, log_file: Path) -> None:
    result = runner.invoke(app, ["analyze", str(log_file), "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["trip_date"] == "2019-06-01"
    assert payload["trip_high_count"] == 2
    assert payload["threshold"] == 45
    assert payload["trip_span_start"] == "2019-05-31"
    assert payload["trip_span_end"] == "2019-06-01"


def test_days_command_lists_breakdown_and_span(runner: CliRunner, log_file: Path) -> None:
    result = runner.invoke(app, ["days", str(log_file)])

    assert result.exit_code == 0
    assert "  - 2019-05-31: 1" in result.stdout
    assert "  - 2019-06-01: 2 *" in result.stdout
    assert "trip span: 2019-05-31 to 2019-06-01 (2 days)" in result.stdout


def test_malformed_date_is_reported_as_diagnostic(runner: CliRunner, tmp_path: Path, caplog) -> None:
    path = tmp_path / "radiation.txt"
    path.write_text("6/1/2019 0:01,X,50\n2019-05-32 00:11,X,49\n")

    with caplog.at_level(logging.WARNING):
        result = runner.invoke(app, ["analyze", str(path)])

    assert result.exit_code == 0
    assert "| 2019-05-32 00:11     |  49 |" in result.stdout
    assert "Skipping malformed date: 2019-05-32 00:11" in caplog.messages


def test_log_level_option_is_forwarded(
    runner: CliRunner, log_file: Path, configured_levels: List[str]
) -> None:
    result = runner.invoke(app, ["--log-level", "debug", "analyze", str(log_file)])

    assert result.exit_code == 0
    assert configured_levels == ["DEBUG"]


def test_log_level_defaults_to_settings(
    runner: CliRunner, log_file: Path, configured_levels: List[str], monkeypatch
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "error")

    result = runner.invoke(app, ["days", str(log_file)])

    assert result.exit_code == 0
    assert configured_levels == ["ERROR"]


def test_unknown_log_level_option_is_usage_error(
    runner: CliRunner, log_file: Path, configured_levels: List[str]
) -> None:
    result = runner.invoke(app, ["--log-level", "bogus", "analyze", str(log_file)])

    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)
    assert configured_levels == []


def test_unknown_log_level_env_still_runs(
    runner: CliRunner, log_file: Path, configured_levels: List[str], monkeypatch
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    result = runner.invoke(app, ["analyze", str(log_file)])

    assert result.exit_code == 0
    assert configured_levels == ["WARNING"]
