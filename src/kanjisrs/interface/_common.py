"""Shared helpers for the CLI command modules."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import typer

from kanjisrs.application.config import AppConfig, resolve_config
from kanjisrs.domain.models import SRSStage


def _resolve_with_overrides(**kwargs: Any) -> AppConfig:
    """Resolve config with CLI values layered on top; unset options are ignored."""
    config = resolve_config(kwargs)
    _apply_verbosity(config.verbose)
    return config


LOG_FILE_NAME = "kanjisrs.log"


def _attach_file_log(config: AppConfig) -> Path:
    """Mirror package log records into a file under config.log_dir."""
    config.log_dir.mkdir(parents=True, exist_ok=True)
    path = (config.log_dir / LOG_FILE_NAME).resolve()

    pkg_logger = logging.getLogger("kanjisrs")
    for handler in list(pkg_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            if Path(handler.baseFilename) == path:
                return path
            pkg_logger.removeHandler(handler)
            handler.close()

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))
    pkg_logger.addHandler(handler)
    return path


def _apply_verbosity(verbose: int) -> None:
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.getLogger().setLevel(level)


def humanize_error(msg: str) -> str:
    """
    Translate provider and data errors into actionable messages.
    """
    if "No provider API key configured" in msg:
        return (
            "Missing API Key: set KANJISRS_WANIKANI_API_KEY or add "
            "'wanikani_api_key' to ~/.config/kanjisrs/config.toml."
        )
    if "Invalid API key" in msg:
        return f"Authentication Error: the WaniKani token was rejected. ({msg})"
    if "Rate limited" in msg:
        return "Rate Limited: WaniKani is throttling requests. Wait a minute and retry."
    if "Expecting value" in msg or "JSONDecodeError" in msg:
        return f"Data Error: a subject data file is not valid JSON. ({msg})"
    if "unable to open database file" in msg:
        return f"Storage Error: cannot open the progress database. ({msg})"

    return msg


def _parse_stage(value: str) -> SRSStage:
    """Accept a stage code ("5") or name ("guru_1", "Guru-1")."""
    value = value.strip()
    if value.isdigit():
        try:
            return SRSStage(int(value))
        except ValueError:
            raise typer.BadParameter(f"Stage code must be 0-9, got {value}") from None
    key = value.upper().replace("-", "_").replace(" ", "_")
    try:
        return SRSStage[key]
    except KeyError:
        names = ", ".join(s.name.lower() for s in SRSStage)
        raise typer.BadParameter(f"Unknown stage '{value}'. Expected one of: {names}") from None


def _parse_now(value: str | None) -> datetime:
    """ISO-8601 timestamp from the command line, or the current UTC time."""
    if value is None:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise typer.BadParameter(f"Not an ISO-8601 timestamp: {value}") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
