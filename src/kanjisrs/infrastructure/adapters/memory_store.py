"""
In-memory Progress Store and Subject Catalog.

Implements ProgressStore with a dict keyed by (kind, item_id). Useful for
tests and for sessions that should not touch disk.
"""

import asyncio
from dataclasses import replace
from datetime import datetime

from kanjisrs.domain.models import ItemKind, LearningItem, Subject
from kanjisrs.domain.ports import ProgressStore, SubjectCatalog


class InMemoryProgressStore(ProgressStore):
    def __init__(self, items: list[LearningItem] | None = None):
        self._items: dict[tuple[ItemKind, str], LearningItem] = {}
        self._lock = asyncio.Lock()
        for item in items or []:
            self._items[item.key] = replace(item)

    async def get(self, kind: ItemKind, item_id: str) -> LearningItem | None:
        item = self._items.get((kind, item_id))
        # Hand out copies so callers cannot mutate stored state in place
        return replace(item) if item else None

    async def upsert(self, item: LearningItem) -> None:
        async with self._lock:
            self._items[item.key] = replace(item)

    async def all_due(self, now: datetime, kind: ItemKind | None = None) -> list[LearningItem]:
        due = [
            replace(item)
            for item in self._items.values()
            if (kind is None or item.kind == kind)
            and item.next_review_at is not None
            and item.next_review_at <= now
        ]
        return sorted(due, key=lambda item: item.next_review_at)

    async def all_items(self, kind: ItemKind | None = None) -> list[LearningItem]:
        return [
            replace(item)
            for item in self._items.values()
            if kind is None or item.kind == kind
        ]


class InMemorySubjectCatalog(SubjectCatalog):
    def __init__(self, subjects: list[Subject] | None = None):
        self._subjects = {(s.kind, s.subject_id): s for s in subjects or []}

    def get(self, kind: ItemKind, subject_id: str) -> Subject | None:
        return self._subjects.get((kind, subject_id))

    def all_subjects(self, kind: ItemKind | None = None) -> list[Subject]:
        return [s for s in self._subjects.values() if kind is None or s.kind == kind]
