"""
Progress Service — Application layer orchestrator.

Starts items, imports provider assignments into the local store and
summarizes stage distribution.
"""

import logging
from dataclasses import replace
from datetime import datetime

from kanjisrs.application.srs.engine import SrsEngine
from kanjisrs.domain.models import ItemKind, LearningItem, SRSStage
from kanjisrs.domain.ports import ProgressStore, SrsProvider, SubjectCatalog

logger = logging.getLogger(__name__)

STAGE_BANDS = ("lesson", "apprentice", "guru", "master", "enlightened", "burned")


class ProgressService:
    """
    Application service around the progress store.

    Follows Dependency Inversion: depends on the ProgressStore and SrsProvider
    abstractions, not concrete adapter implementations.
    """

    def __init__(
        self,
        store: ProgressStore,
        provider: SrsProvider | None = None,
        engine: SrsEngine | None = None,
        catalog: SubjectCatalog | None = None,
    ):
        self._store = store
        self._provider = provider
        self._catalog = catalog
        self._engine = engine or SrsEngine()

    async def begin_learning(
        self,
        kind: ItemKind,
        item_id: str,
        now: datetime,
        mnemonic: str | None = None,
    ) -> LearningItem:
        """
        Start learning an item: it enters as a lesson that is due immediately.

        An item that already exists is returned unchanged.
        """
        existing = await self._store.get(kind, item_id)
        if existing is not None:
            logger.debug(f"{kind.value} {item_id} already started at {existing.stage.display_name}")
            return existing

        item = LearningItem(
            kind=kind,
            item_id=item_id,
            stage=SRSStage.LESSON,
            next_review_at=self._engine.next_review_at(SRSStage.LESSON, now),
            mnemonic=mnemonic,
            updated_at=now,
        )
        await self._store.upsert(item)
        logger.info(f"Started learning {kind.value} {item_id}")
        return item

    async def import_assignments(
        self,
        now: datetime,
        subject_types: list[ItemKind] | None = None,
    ) -> int:
        """
        Pull the provider's assignments into the local store.

        Stage, due time and assignment id come from the provider; local
        counters and mnemonics are kept.

        Returns:
            Number of items written.
        """
        if self._provider is None:
            logger.warning("No SRS provider configured; nothing to import")
            return 0

        kinds = subject_types or list(ItemKind)
        assignments = await self._provider.fetch_assignments([k.value for k in kinds])

        written = 0
        for assignment in assignments:
            try:
                kind = ItemKind(assignment.subject_type)
            except ValueError:
                logger.debug(f"Skipping unsupported subject type {assignment.subject_type}")
                continue

            item_id = self._local_item_id(kind, assignment.subject_id)
            if item_id is None:
                logger.debug(f"No local {kind.value} for provider subject {assignment.subject_id}")
                continue

            existing = await self._store.get(kind, item_id)
            next_review_at = (
                None if assignment.srs_stage == SRSStage.BURNED else assignment.available_at
            )

            if existing is None:
                item = LearningItem(
                    kind=kind,
                    item_id=item_id,
                    stage=assignment.srs_stage,
                    next_review_at=next_review_at,
                    assignment_id=assignment.id,
                    updated_at=now,
                )
            else:
                item = replace(
                    existing,
                    stage=assignment.srs_stage,
                    next_review_at=next_review_at,
                    assignment_id=assignment.id,
                    updated_at=now,
                )

            await self._store.upsert(item)
            written += 1

        logger.info(f"Imported {written} of {len(assignments)} provider assignments")
        return written

    def _local_item_id(self, kind: ItemKind, provider_subject_id: int) -> str | None:
        # Kanji are keyed by character locally, so they need the catalog
        if self._catalog is not None:
            subject = self._catalog.find_by_provider_id(kind, provider_subject_id)
            if subject is not None:
                return subject.subject_id
        if kind is ItemKind.KANJI:
            return None
        return str(provider_subject_id)

    async def stage_summary(
        self, now: datetime, kind: ItemKind | None = None
    ) -> dict[str, int]:
        """
        Count items per stage band, plus how many are due right now.
        """
        summary = {band: 0 for band in STAGE_BANDS}
        summary["due_now"] = 0

        for item in await self._store.all_items(kind):
            summary[item.stage.band] += 1
            if self._engine.is_due(item.next_review_at, now):
                summary["due_now"] += 1

        return summary
