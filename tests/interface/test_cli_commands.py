"""Tests for CLI commands: help, check, romaji, srs, config, serve, study commands, and humanize_error."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from kanjisrs.domain.errors import UnauthorizedError
from kanjisrs.domain.models import Assignment, SRSStage
from kanjisrs.interface.cli import app, humanize_error

runner = CliRunner()


@pytest.fixture
def study_env(mock_home, data_dir, monkeypatch):
    """Isolated config: subject data from the fixture, progress db under the fake home."""
    monkeypatch.setenv("KANJISRS_DATA_DIR", str(data_dir))
    monkeypatch.delenv("KANJISRS_WANIKANI_API_KEY", raising=False)
    return mock_home


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "kanjisrs" in result.stdout
    assert "check" in result.stdout
    assert "review" in result.stdout


# --- Check ---


def test_check_reading_correct():
    result = runner.invoke(app, ["check", "reading", "コンピューター", "-a", "こんぴゅーたー"])
    assert result.exit_code == 0
    assert "correct" in result.stdout


def test_check_reading_alternate_json():
    result = runner.invoke(
        app, ["check", "reading", "ひと", "-a", "いち", "-a", "ひと", "--json"]
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "result": "acceptable_but_not_primary",
        "distance": None,
    }


def test_check_reading_invalid_exits_nonzero():
    result = runner.invoke(app, ["check", "reading", "hello", "-a", "こんにちは"])
    assert result.exit_code == 1
    assert "invalid_character_set" in result.stdout


def test_check_meaning_near_miss():
    result = runner.invoke(app, ["check", "meaning", "computer", "-a", "computerr", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"result": "almost_correct", "distance": 1}


def test_check_meaning_no_fuzzy():
    result = runner.invoke(
        app, ["check", "meaning", "computer", "-a", "computerr", "--no-fuzzy"]
    )
    assert result.exit_code == 1
    assert "incorrect" in result.stdout


# --- Romaji ---


def test_romaji_command():
    result = runner.invoke(app, ["romaji", "konpyu-ta-"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "こんぴゅーたー"


def test_romaji_pending():
    result = runner.invoke(app, ["romaji", "hon", "--pending"])
    assert result.stdout.strip() == "ほn"


# --- SRS ---


def test_srs_next_json():
    result = runner.invoke(
        app, ["srs", "next", "1", "--now", "2024-01-01T00:00:00+00:00", "--json"]
    )
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["stage"] == "APPRENTICE_2"
    assert data["stage_code"] == 2
    assert data["next_review_at"] == "2024-01-01T08:00:00+00:00"


def test_srs_next_by_name_with_mistake():
    result = runner.invoke(app, ["srs", "next", "guru-1", "--meaning-wrong"])
    assert result.exit_code == 0
    assert "Guru I -> Apprentice IV" in result.stdout


def test_srs_next_burned():
    result = runner.invoke(app, ["srs", "next", "enlightened"])
    assert "never (burned)" in result.stdout


def test_srs_next_unknown_stage():
    result = runner.invoke(app, ["srs", "next", "wizard"])
    assert result.exit_code == 2


def test_srs_schedule():
    result = runner.invoke(app, ["srs", "schedule", "--now", "2024-01-01T00:00:00Z"])
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert len(lines) == 10
    assert lines[1].startswith("Apprentice I ")
    assert "2024-01-01T04:00:00+00:00" in lines[1]
    assert lines[-1].split() == ["Burned", "-"]


# --- Config ---


@patch("kanjisrs.interface.cli.resolve_config")
def test_config_show_command(mock_resolve_config):
    mock_config = MagicMock()
    mock_config.model_dump.return_value = {
        "data_dir": Path("/tmp/data"),
        "store_backend": "sqlite",
        "wanikani_api_key": "secret",
    }
    mock_resolve_config.return_value = mock_config

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    output_data = json.loads(result.stdout)
    assert output_data["data_dir"] == str(Path("/tmp/data"))
    assert output_data["wanikani_api_key"] == "***"


# --- Server ---


@patch("uvicorn.run")
def test_serve_command(mock_run):
    result = runner.invoke(app, ["serve", "--port", "9000"])
    assert result.exit_code == 0
    mock_run.assert_called_with("kanjisrs.server:app", host="127.0.0.1", port=9000, reload=False)


# --- Logs ---


@patch("subprocess.run")
def test_logs_command_opens_log_dir(mock_run, mock_home, monkeypatch):
    monkeypatch.delenv("KANJISRS_LOG_DIR", raising=False)
    monkeypatch.setattr(sys, "platform", "linux")

    result = runner.invoke(app, ["logs"])

    log_dir = mock_home / ".config/kanjisrs/logs"
    assert result.exit_code == 0
    assert log_dir.is_dir()
    mock_run.assert_called_once_with(["xdg-open", str(log_dir)])


def test_file_log_handler_is_attached_once(tmp_path):
    from kanjisrs.application.config import AppConfig
    from kanjisrs.interface._common import _attach_file_log

    config = AppConfig(log_dir=tmp_path / "logs", store_backend="memory")
    pkg_logger = logging.getLogger("kanjisrs")

    path = _attach_file_log(config)
    _attach_file_log(config)
    try:
        handlers = [h for h in pkg_logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(handlers) == 1
        pkg_logger.warning("sync queued")
        handlers[0].flush()
        assert "sync queued" in path.read_text(encoding="utf-8")
    finally:
        for handler in handlers:
            pkg_logger.removeHandler(handler)
            handler.close()


# --- Verbosity ---


@pytest.fixture
def restore_log_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


def test_verbosity_from_env_is_respected(study_env, monkeypatch, restore_log_level):
    monkeypatch.setenv("KANJISRS_VERBOSE", "0")

    result = runner.invoke(app, ["stats", "--json"])

    assert result.exit_code == 0, result.output
    assert logging.getLogger().level == logging.WARNING


def test_explicit_verbose_flag_beats_env(study_env, monkeypatch, restore_log_level):
    monkeypatch.setenv("KANJISRS_VERBOSE", "0")

    result = runner.invoke(app, ["-vv", "stats", "--json"])

    assert result.exit_code == 0, result.output
    assert logging.getLogger().level == logging.DEBUG


# --- Study commands ---


def test_learn_review_and_stats(study_env):
    result = runner.invoke(app, ["learn", "kanji", "一"])
    assert result.exit_code == 0, result.output
    assert "kanji 一: Lesson" in result.stdout

    result = runner.invoke(app, ["stats", "--json"])
    assert json.loads(result.stdout)["lesson"] == 1
    assert json.loads(result.stdout)["due_now"] == 1

    # Reading comes first and may be typed in romaji
    result = runner.invoke(app, ["review"], input="ichi\none\n")
    assert result.exit_code == 0, result.output
    assert "Reviewed 1 items: 2 correct, 0 incorrect" in result.stdout

    summary = json.loads(runner.invoke(app, ["stats", "--json"]).stdout)
    assert summary["apprentice"] == 1
    assert summary["due_now"] == 0


def test_review_wrong_answer_shows_accepted(study_env):
    runner.invoke(app, ["learn", "radical", "1"])

    result = runner.invoke(app, ["review"], input="stick\n")

    assert result.exit_code == 0, result.output
    assert "incorrect: Ground" in result.stdout


def test_review_nothing_due(study_env):
    result = runner.invoke(app, ["review"])
    assert result.exit_code == 0
    assert "No reviews due." in result.stdout


def test_learn_by_level(study_env):
    result = runner.invoke(app, ["learn", "radical", "--level", "1"])
    assert result.exit_code == 0
    assert "radical 1: Lesson" in result.stdout
    assert "radical 8762: Lesson" in result.stdout


def test_learn_unknown_item(study_env):
    result = runner.invoke(app, ["learn", "kanji", "龍"])
    assert "Unknown kanji: 龍" in result.stdout


def test_learn_requires_ids(study_env):
    result = runner.invoke(app, ["learn", "kanji"])
    assert result.exit_code == 2


def test_sync_without_api_key(study_env):
    result = runner.invoke(app, ["sync"])
    assert result.exit_code == 1
    assert "Missing API Key" in result.stdout
    assert (study_env / ".config/kanjisrs/logs/kanjisrs.log").exists()


def test_sync_imports_assignments(study_env):
    provider = AsyncMock()
    provider.fetch_assignments.return_value = [
        Assignment(
            id=10,
            subject_id=440,
            subject_type="kanji",
            srs_stage=SRSStage.GURU_1,
            available_at=datetime(2030, 1, 1, tzinfo=timezone.utc),
            burned_at=None,
            passed_at=None,
            started_at=None,
            unlocked_at=None,
        )
    ]

    with patch(
        "kanjisrs.interface.review_commands.get_srs_provider", return_value=provider
    ):
        result = runner.invoke(app, ["sync", "--kind", "kanji"])

    assert result.exit_code == 0, result.output
    assert "Imported 1 assignments." in result.stdout
    provider.fetch_assignments.assert_awaited_once_with(["kanji"])
    provider.close.assert_awaited_once()

    summary = json.loads(runner.invoke(app, ["stats", "--json"]).stdout)
    assert summary["guru"] == 1


def test_sync_provider_error(study_env):
    provider = AsyncMock()
    provider.fetch_assignments.side_effect = UnauthorizedError()

    with patch(
        "kanjisrs.interface.review_commands.get_srs_provider", return_value=provider
    ):
        result = runner.invoke(app, ["sync"])

    assert result.exit_code == 1
    assert "Authentication Error" in result.stdout


# --- humanize_error ---


def test_humanize_error_simple():
    assert humanize_error("Some error") == "Some error"


def test_humanize_error_missing_key():
    assert "Missing API Key" in humanize_error("No provider API key configured")


def test_humanize_error_provider_cases():
    assert "Authentication Error" in humanize_error("Invalid API key")
    assert "Rate Limited" in humanize_error("Rate limited - please try again later")


def test_humanize_error_data_cases():
    assert "Data Error" in humanize_error("Expecting value: line 1 column 1 (char 0)")
    assert "Storage Error" in humanize_error("unable to open database file")
