"""kanjisrs CLI — root commands and subgroup registration."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from kanjisrs.application.answers import AnswerChecker, RomajiConverter
from kanjisrs.application.config import resolve_config
from kanjisrs.application.srs import SrsEngine
from kanjisrs.domain.models import AnswerOutcome, SRSStage
from kanjisrs.interface._common import _parse_now, _parse_stage, humanize_error  # noqa: F401

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="kanjisrs: spaced-repetition scheduling and answer checking for Japanese study.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

check_app = typer.Typer(help="Check a single answer against accepted answers.", no_args_is_help=True)
app.add_typer(check_app, name="check")

srs_app = typer.Typer(help="Stage transitions and review scheduling.", no_args_is_help=True)
app.add_typer(srs_app, name="srs")

config_app = typer.Typer(help="Manage kanjisrs configuration.")
app.add_typer(config_app, name="config")

from kanjisrs.interface.review_commands import learn, review, stats, sync  # noqa: E402

app.command()(learn)
app.command()(review)
app.command()(stats)
app.command()(sync)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for kanjisrs."""
    ctx.ensure_object(dict)
    # Only an explicit -v overrides KANJISRS_VERBOSE and the config file
    ctx.obj["verbose_bonus"] = verbose or None


def _echo_outcome(outcome: AnswerOutcome, json_output: bool) -> None:
    if json_output:
        typer.echo(json.dumps({"result": outcome.result.value, "distance": outcome.distance}))
    else:
        color = "green" if outcome.counts_as_correct else "red"
        label = outcome.result.value
        if outcome.distance is not None:
            label = f"{label} (distance {outcome.distance})"
        typer.secho(label, fg=color)

    if not outcome.counts_as_correct:
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Check subgroup
# ---------------------------------------------------------------------------


@check_app.command("reading")
def check_reading(
    answer: Annotated[str, typer.Argument(help="The typed reading (kana).")],
    accepted: Annotated[
        list[str],
        typer.Option("--accepted", "-a", help="Accepted reading; the first is the primary."),
    ],
    katakana: Annotated[
        bool,
        typer.Option("--katakana/--no-katakana", help="Convert katakana answers to hiragana."),
    ] = True,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Check a [bold]reading[/bold] answer. Exits 1 when it does not count as correct."""
    outcome = AnswerChecker().check_reading(answer, accepted, auto_convert_katakana=katakana)
    _echo_outcome(outcome, json_output)


@check_app.command("meaning")
def check_meaning(
    answer: Annotated[str, typer.Argument(help="The typed meaning.")],
    accepted: Annotated[
        list[str],
        typer.Option("--accepted", "-a", help="Accepted meaning; the first is the primary."),
    ],
    fuzzy: Annotated[
        bool, typer.Option("--fuzzy/--no-fuzzy", help="Allow near-miss spellings.")
    ] = True,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Check a [bold]meaning[/bold] answer. Exits 1 when it does not count as correct."""
    outcome = AnswerChecker().check_meaning(answer, accepted, fuzzy_enabled=fuzzy)
    _echo_outcome(outcome, json_output)


@app.command()
def romaji(
    text: Annotated[str, typer.Argument(help="Romaji to convert, e.g. 'konpyu-ta-'.")],
    pending: Annotated[
        bool,
        typer.Option("--pending", help="Show unconverted input instead of finalizing it."),
    ] = False,
):
    """Convert typed romaji to hiragana."""
    if pending:
        kana, buffer = RomajiConverter.convert(text)
        typer.echo(kana + buffer)
    else:
        typer.echo(RomajiConverter.to_kana(text))


# ---------------------------------------------------------------------------
# SRS subgroup
# ---------------------------------------------------------------------------


@srs_app.command("next")
def srs_next(
    stage: Annotated[str, typer.Argument(help="Current stage, by code (0-9) or name.")],
    meaning_correct: Annotated[
        bool, typer.Option("--meaning-correct/--meaning-wrong", help="Meaning answer result.")
    ] = True,
    reading_correct: Annotated[
        bool, typer.Option("--reading-correct/--reading-wrong", help="Reading answer result.")
    ] = True,
    now: Annotated[
        str | None, typer.Option(help="Review time (ISO-8601). Defaults to now.")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the stage and next review time after a review."""
    engine = SrsEngine()
    current = _parse_stage(stage)
    reviewed_at = _parse_now(now)

    new_stage = engine.next_stage(current, meaning_correct, reading_correct)
    due = engine.next_review_at(new_stage, reviewed_at)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "previous_stage": current.name,
                    "stage": new_stage.name,
                    "stage_code": int(new_stage),
                    "next_review_at": due.isoformat() if due else None,
                },
                indent=2,
            )
        )
        return

    typer.echo(f"{current.display_name} -> {new_stage.display_name}")
    typer.echo(f"Next review: {due.isoformat() if due else 'never (burned)'}")


@srs_app.command("schedule")
def srs_schedule(
    now: Annotated[
        str | None, typer.Option(help="Reference time (ISO-8601). Defaults to now.")
    ] = None,
):
    """Print the review time for every stage, starting from a reference time."""
    engine = SrsEngine()
    reviewed_at = _parse_now(now)

    for stage in SRSStage:
        due = engine.next_review_at(stage, reviewed_at)
        typer.echo(f"{stage.display_name:<15} {due.isoformat() if due else '-'}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    if d.get("wanikani_api_key"):
        d["wanikani_api_key"] = "***"
    typer.echo(json.dumps(d, indent=2))


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8777,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP daemon exposing the checker, converter and engine."""
    import uvicorn

    uvicorn.run("kanjisrs.server:app", host=host, port=port, reload=reload)


@app.command()
def logs():
    """Open the log directory."""
    import os
    import subprocess

    config = resolve_config()
    if not config.log_dir.exists():
        config.log_dir.mkdir(parents=True, exist_ok=True)

    if sys.platform == "darwin":
        subprocess.run(["open", str(config.log_dir)])
    elif sys.platform == "win32":
        os.startfile(str(config.log_dir))
    else:
        subprocess.run(["xdg-open", str(config.log_dir)])
