"""
JSON Subject Catalog — reads the bundled subject data files.

Each file has the shape ``{"levels": {"1": [...], "2": [...]}, "count": n}``.
Kanji entries list plain meaning strings and separate on'yomi / kun'yomi
lists; radical and vocabulary entries carry ``{"meaning", "primary"}`` and
``{"reading", "primary"}`` objects.
"""

import json
import logging
from pathlib import Path
from typing import Any

from kanjisrs.domain.models import ItemKind, Subject
from kanjisrs.domain.ports import SubjectCatalog

logger = logging.getLogger(__name__)

DATA_FILES = {
    ItemKind.RADICAL: "radicals_all.json",
    ItemKind.KANJI: "kanji_all.json",
    ItemKind.VOCABULARY: "vocabulary_all.json",
}

# Image-only radicals have no character
RADICAL_PLACEHOLDER = "●"


def _ordered_answers(entries: list[Any], key: str) -> list[str]:
    """Flatten answer entries, primary ones first, keeping their relative order."""
    primary: list[str] = []
    others: list[str] = []
    for entry in entries or []:
        if isinstance(entry, str):
            others.append(entry)
            continue
        if entry.get("accepted_answer") is False:
            continue
        value = entry.get(key)
        if not value:
            continue
        (primary if entry.get("primary") else others).append(value)
    return primary + others


def subject_from_entry(kind: ItemKind, entry: dict[str, Any]) -> Subject:
    level = int(entry.get("level", 0))

    if kind is ItemKind.KANJI:
        character = entry["character"]
        return Subject(
            kind=kind,
            subject_id=character,
            characters=character,
            meanings=list(entry.get("meanings", [])),
            readings=list(entry.get("onyomi", [])) + list(entry.get("kunyomi", [])),
            level=level,
            provider_id=entry.get("wanikaniId"),
        )

    characters = entry.get("characters") or ""
    if kind is ItemKind.RADICAL and not characters:
        characters = RADICAL_PLACEHOLDER

    return Subject(
        kind=kind,
        subject_id=str(entry["id"]),
        characters=characters,
        meanings=_ordered_answers(entry.get("meanings", []), "meaning"),
        readings=_ordered_answers(entry.get("readings", []), "reading"),
        level=level,
        provider_id=int(entry["id"]),
    )


class JsonSubjectCatalog(SubjectCatalog):
    def __init__(self, data_dir: Path | None):
        self.data_dir = data_dir
        self._subjects: dict[tuple[ItemKind, str], Subject] = {}
        self._loaded = False

    def load(self) -> None:
        if self._loaded:
            return
        self._loaded = True

        if self.data_dir is None:
            logger.warning("No subject data directory configured")
            return

        for kind, filename in DATA_FILES.items():
            path = self.data_dir / filename
            if not path.exists():
                logger.warning(f"Subject data file not found: {path}")
                continue

            data = json.loads(path.read_text(encoding="utf-8"))
            count = 0
            for entries in data.get("levels", {}).values():
                for entry in entries:
                    try:
                        subject = subject_from_entry(kind, entry)
                    except (KeyError, TypeError, ValueError) as e:
                        logger.warning(f"Skipping malformed {kind.value} entry in {path}: {e}")
                        continue
                    self._subjects[(kind, subject.subject_id)] = subject
                    count += 1
            logger.info(f"Loaded {count} {kind.value} subjects from {path.name}")

    def get(self, kind: ItemKind, subject_id: str) -> Subject | None:
        self.load()
        return self._subjects.get((kind, subject_id))

    def all_subjects(self, kind: ItemKind | None = None) -> list[Subject]:
        self.load()
        return [s for s in self._subjects.values() if kind is None or s.kind == kind]
