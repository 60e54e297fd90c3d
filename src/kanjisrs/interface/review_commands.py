"""Study commands: learn, review, stats, sync."""

import asyncio
import json
from datetime import datetime, timezone
from typing import Annotated

import typer

from kanjisrs.application.answers import RomajiConverter
from kanjisrs.application.factory import (
    get_progress_store,
    get_srs_provider,
    get_subject_catalog,
)
from kanjisrs.application.progress_service import ProgressService
from kanjisrs.application.review import ReviewSession, ReviewSettings
from kanjisrs.domain.errors import ProviderError
from kanjisrs.domain.models import AnswerResult, ItemKind, ReviewQuestion
from kanjisrs.interface._common import (
    _attach_file_log,
    _resolve_with_overrides,
    humanize_error,
)

_RESULT_COLORS = {
    AnswerResult.CORRECT: "green",
    AnswerResult.ACCEPTABLE_BUT_NOT_PRIMARY: "green",
    AnswerResult.ALMOST_CORRECT: "yellow",
    AnswerResult.INVALID_CHARACTER_SET: "yellow",
    AnswerResult.INCORRECT: "red",
}


def _verbose(ctx: typer.Context) -> int | None:
    return (ctx.obj or {}).get("verbose_bonus")


async def _close(provider) -> None:
    close = getattr(provider, "close", None)
    if close is not None:
        await close()


def learn(
    ctx: typer.Context,
    kind: Annotated[ItemKind, typer.Argument(help="radical, kanji or vocabulary.")],
    item_ids: Annotated[
        list[str] | None,
        typer.Argument(help="Items to start (kanji by character, others by id)."),
    ] = None,
    level: Annotated[
        int | None, typer.Option(help="Start every subject of this kind at a level.")
    ] = None,
    mnemonic: Annotated[
        str | None, typer.Option(help="Personal mnemonic to store with the item.")
    ] = None,
):
    """[bold green]Learn[/bold green] new items: they enter the review queue immediately."""
    config = _resolve_with_overrides(verbose=_verbose(ctx))
    store = get_progress_store(config)
    catalog = get_subject_catalog(config)

    ids = list(item_ids or [])
    if level is not None:
        ids.extend(s.subject_id for s in catalog.all_subjects(kind) if s.level == level)

    if not ids:
        typer.secho("Nothing to learn: pass item ids or --level.", fg="yellow")
        raise typer.Exit(2)

    async def run():
        service = ProgressService(store, catalog=catalog)
        now = datetime.now(timezone.utc)
        for item_id in ids:
            if catalog.get(kind, item_id) is None:
                typer.secho(f"Unknown {kind.value}: {item_id}", fg="yellow")
                continue
            item = await service.begin_learning(kind, item_id, now, mnemonic=mnemonic)
            typer.echo(f"{kind.value} {item_id}: {item.stage.display_name}")

    asyncio.run(run())


def review(
    ctx: typer.Context,
    limit: Annotated[int | None, typer.Option(help="Maximum items in this session.")] = None,
    reading_first: Annotated[
        bool | None,
        typer.Option("--reading-first/--meaning-first", help="Which question comes first."),
    ] = None,
    retry_incorrect: Annotated[
        bool | None,
        typer.Option("--retry-incorrect/--no-retry-incorrect", help="Ask missed questions again."),
    ] = None,
):
    """[bold]Review[/bold] due items interactively. Readings may be typed in romaji."""
    config = _resolve_with_overrides(
        session_size=limit,
        reading_first=reading_first,
        retry_incorrect=retry_incorrect,
        verbose=_verbose(ctx),
    )
    _attach_file_log(config)

    async def run():
        provider = get_srs_provider(config)
        session = ReviewSession(
            get_progress_store(config),
            get_subject_catalog(config),
            provider=provider,
            settings=ReviewSettings.from_config(config),
        )
        try:
            if not await session.load(datetime.now(timezone.utc)):
                typer.secho("No reviews due.", fg="green")
                return

            while not session.completed:
                state = session.current_item
                question = session.current_question
                raw = typer.prompt(
                    f"[{state.subject.kind.value}] {state.subject.characters}  {question.value}"
                )
                if question is ReviewQuestion.READING:
                    raw = RomajiConverter.to_kana(raw)

                outcome = session.submit_answer(raw)
                label = outcome.result.value.replace("_", " ")
                if not outcome.counts_as_correct:
                    label = f"{label}: {', '.join(session.accepted_answers())}"
                typer.secho(f"  {label}", fg=_RESULT_COLORS[outcome.result])

                await session.next_question(datetime.now(timezone.utc))

            correct, incorrect = session.stats
            typer.echo(
                f"Reviewed {len(session.reviewed)} items: {correct} correct, {incorrect} incorrect"
            )

            if session.failed_syncs:
                remaining = await session.retry_failed_syncs()
                if remaining:
                    typer.secho(f"{remaining} reviews could not be synced.", fg="yellow")
        finally:
            await _close(provider)

    asyncio.run(run())


def stats(
    ctx: typer.Context,
    kind: Annotated[ItemKind | None, typer.Option(help="Only count one kind.")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show how many items sit in each stage band."""
    config = _resolve_with_overrides(verbose=_verbose(ctx))

    async def run():
        service = ProgressService(get_progress_store(config))
        return await service.stage_summary(datetime.now(timezone.utc), kind)

    summary = asyncio.run(run())

    if json_output:
        typer.echo(json.dumps(summary, indent=2))
        return

    for band, count in summary.items():
        typer.echo(f"{band.replace('_', ' ').title():<12} {count}")


def sync(
    ctx: typer.Context,
    kind: Annotated[
        list[ItemKind] | None, typer.Option(help="Subject types to import (repeatable).")
    ] = None,
    api_key: Annotated[
        str | None, typer.Option(help="WaniKani API token. Defaults to config.")
    ] = None,
):
    """[bold green]Sync[/bold green] assignments from WaniKani into the local store."""
    config = _resolve_with_overrides(wanikani_api_key=api_key, verbose=_verbose(ctx))
    _attach_file_log(config)
    provider = get_srs_provider(config)
    if provider is None:
        typer.secho(humanize_error("No provider API key configured"), fg="red")
        raise typer.Exit(1)

    async def run():
        service = ProgressService(
            get_progress_store(config),
            provider=provider,
            catalog=get_subject_catalog(config),
        )
        try:
            return await service.import_assignments(datetime.now(timezone.utc), kind or None)
        finally:
            await _close(provider)

    try:
        written = asyncio.run(run())
    except ProviderError as e:
        typer.secho(humanize_error(str(e)), fg="red")
        raise typer.Exit(1) from e

    typer.secho(f"Imported {written} assignments.", fg="green")
