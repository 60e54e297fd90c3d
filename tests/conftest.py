import json
from datetime import datetime, timezone

import pytest

from kanjisrs.domain.models import ItemKind, Subject
from kanjisrs.infrastructure.adapters.memory_store import (
    InMemoryProgressStore,
    InMemorySubjectCatalog,
)


@pytest.fixture
def now():
    return datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def subjects():
    return [
        Subject(ItemKind.RADICAL, "1", "一", ["Ground"], [], level=1, provider_id=1),
        Subject(
            ItemKind.KANJI, "一", "一", ["One", "First"], ["いち", "ひと"],
            level=1, provider_id=440,
        ),
        Subject(
            ItemKind.VOCABULARY, "2467", "一つ", ["One Thing"], ["ひとつ"],
            level=1, provider_id=2467,
        ),
    ]


@pytest.fixture
def catalog(subjects):
    return InMemorySubjectCatalog(subjects)


@pytest.fixture
def memory_store():
    return InMemoryProgressStore()


@pytest.fixture
def data_dir(tmp_path):
    """Bundled subject data in the on-disk JSON format."""
    d = tmp_path / "data"
    d.mkdir()

    radicals = {
        "levels": {
            "1": [
                {
                    "id": 1,
                    "characters": "一",
                    "level": 1,
                    "meanings": [{"meaning": "Ground", "primary": True}],
                },
                {
                    "id": 8762,
                    "characters": None,
                    "level": 1,
                    "meanings": [{"meaning": "Stick", "primary": True}],
                },
            ]
        },
        "count": 2,
    }
    kanji = {
        "levels": {
            "1": [
                {
                    "character": "一",
                    "meanings": ["One", "First"],
                    "onyomi": ["いち", "いつ"],
                    "kunyomi": ["ひと"],
                    "radicals": ["Ground"],
                    "strokeCount": 1,
                    "wanikaniId": 440,
                    "level": 1,
                }
            ]
        },
        "count": 1,
    }
    vocabulary = {
        "levels": {
            "1": [
                {
                    "id": 2467,
                    "characters": "一つ",
                    "level": 1,
                    "meanings": [
                        {"meaning": "Single", "primary": False},
                        {"meaning": "One Thing", "primary": True},
                        {"meaning": "Wun", "primary": False, "accepted_answer": False},
                    ],
                    "readings": [{"reading": "ひとつ", "primary": True}],
                }
            ]
        },
        "count": 1,
    }

    for name, payload in (
        ("radicals_all.json", radicals),
        ("kanji_all.json", kanji),
        ("vocabulary_all.json", vocabulary),
    ):
        (d / name).write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return d
