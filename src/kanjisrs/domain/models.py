"""
Domain models for SRS scheduling and answer checking.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum


class SRSStage(IntEnum):
    """
    Mastery stage of a learnable item.

    The integer values are the stage codes used by storage and by the
    external SRS provider.
    """

    LESSON = 0
    APPRENTICE_1 = 1
    APPRENTICE_2 = 2
    APPRENTICE_3 = 3
    APPRENTICE_4 = 4
    GURU_1 = 5
    GURU_2 = 6
    MASTER = 7
    ENLIGHTENED = 8
    BURNED = 9

    @property
    def is_learned(self) -> bool:
        return self >= SRSStage.GURU_1

    @property
    def is_apprentice(self) -> bool:
        return SRSStage.APPRENTICE_1 <= self <= SRSStage.APPRENTICE_4

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def band(self) -> str:
        """Coarse stage group: lesson, apprentice, guru, master, enlightened, burned."""
        if self.is_apprentice:
            return "apprentice"
        if self in (SRSStage.GURU_1, SRSStage.GURU_2):
            return "guru"
        return self.name.lower()


_DISPLAY_NAMES = {
    SRSStage.LESSON: "Lesson",
    SRSStage.APPRENTICE_1: "Apprentice I",
    SRSStage.APPRENTICE_2: "Apprentice II",
    SRSStage.APPRENTICE_3: "Apprentice III",
    SRSStage.APPRENTICE_4: "Apprentice IV",
    SRSStage.GURU_1: "Guru I",
    SRSStage.GURU_2: "Guru II",
    SRSStage.MASTER: "Master",
    SRSStage.ENLIGHTENED: "Enlightened",
    SRSStage.BURNED: "Burned",
}


class ItemKind(str, Enum):
    RADICAL = "radical"
    KANJI = "kanji"
    VOCABULARY = "vocabulary"


class ReviewQuestion(str, Enum):
    MEANING = "meaning"
    READING = "reading"


@dataclass
class LearningItem:
    """
    Per-user SRS state for one radical, kanji or vocabulary word.

    Attributes:
        kind: Which subject family the item belongs to.
        item_id: Opaque key (the character for kanji, the numeric id for
            radicals and vocabulary).
        stage: Current mastery stage.
        next_review_at: When the item is next due. None keeps it out of the
            review queue (unstarted lessons, burned items).
        times_reviewed: Completed reviews.
        times_correct: Completed reviews with no wrong sub-answer.
        mnemonic: Free-text memory aid.
        assignment_id: Provider token required to submit reviews upstream.
    """

    kind: ItemKind
    item_id: str
    stage: SRSStage = SRSStage.LESSON
    next_review_at: datetime | None = None
    times_reviewed: int = 0
    times_correct: int = 0
    mnemonic: str | None = None
    assignment_id: int | None = None
    updated_at: datetime | None = None

    @property
    def key(self) -> tuple[ItemKind, str]:
        return (self.kind, self.item_id)


@dataclass(frozen=True)
class Subject:
    """
    Study content for an item: what is shown and which answers are accepted.

    ``meanings`` and ``readings`` are ordered, the first entry being the
    primary answer. ``provider_id`` is the external SRS provider's subject id, when known.
    """

    kind: ItemKind
    subject_id: str
    characters: str
    meanings: list[str] = field(default_factory=list)
    readings: list[str] = field(default_factory=list)
    level: int = 0
    provider_id: int | None = None

    @property
    def needs_reading(self) -> bool:
        return self.kind is not ItemKind.RADICAL

    @property
    def primary_meaning(self) -> str:
        return self.meanings[0] if self.meanings else ""

    @property
    def primary_reading(self) -> str:
        return self.readings[0] if self.readings else ""


class AnswerResult(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    ALMOST_CORRECT = "almost_correct"
    INVALID_CHARACTER_SET = "invalid_character_set"
    ACCEPTABLE_BUT_NOT_PRIMARY = "acceptable_but_not_primary"


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of checking one free-text answer. ``distance`` is set for near misses only."""

    result: AnswerResult
    distance: int | None = None

    @classmethod
    def correct(cls) -> "AnswerOutcome":
        return cls(AnswerResult.CORRECT)

    @classmethod
    def incorrect(cls) -> "AnswerOutcome":
        return cls(AnswerResult.INCORRECT)

    @classmethod
    def almost_correct(cls, distance: int) -> "AnswerOutcome":
        return cls(AnswerResult.ALMOST_CORRECT, distance)

    @classmethod
    def invalid_character_set(cls) -> "AnswerOutcome":
        return cls(AnswerResult.INVALID_CHARACTER_SET)

    @classmethod
    def acceptable_but_not_primary(cls) -> "AnswerOutcome":
        return cls(AnswerResult.ACCEPTABLE_BUT_NOT_PRIMARY)

    @property
    def counts_as_correct(self) -> bool:
        return self.result in (
            AnswerResult.CORRECT,
            AnswerResult.ALMOST_CORRECT,
            AnswerResult.ACCEPTABLE_BUT_NOT_PRIMARY,
        )


@dataclass(frozen=True)
class Assignment:
    """
    An external provider's record of one subject in the user's queue.

    Attributes:
        id: Assignment id, required when submitting reviews.
        subject_id: Provider subject id.
        subject_type: "radical", "kanji" or "vocabulary".
        srs_stage: Provider stage mapped onto SRSStage.
        available_at: When the provider considers the item due.
    """

    id: int
    subject_id: int
    subject_type: str
    srs_stage: SRSStage
    available_at: datetime | None = None
    burned_at: datetime | None = None
    passed_at: datetime | None = None
    started_at: datetime | None = None
    unlocked_at: datetime | None = None


@dataclass(frozen=True)
class ReviewSubmission:
    """Wrong-answer counts accumulated for one item over a whole session."""

    assignment_id: int
    incorrect_meaning_answers: int
    incorrect_reading_answers: int
