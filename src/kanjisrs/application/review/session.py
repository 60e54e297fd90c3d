"""
Review session controller.

Drives one sitting of reviews: pulls due items from the progress store, asks
meaning and reading questions, checks answers, and writes the resulting SRS
state back. Completed reviews are mirrored to the external provider when one
is configured; provider trouble never interrupts the session.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime

from kanjisrs.application.answers.checker import AnswerChecker
from kanjisrs.application.srs.engine import SrsEngine
from kanjisrs.domain.constants import DEFAULT_SESSION_SIZE
from kanjisrs.domain.errors import AlreadyReviewedError, ProviderError
from kanjisrs.domain.models import (
    AnswerOutcome,
    LearningItem,
    ReviewQuestion,
    ReviewSubmission,
    Subject,
)
from kanjisrs.domain.ports import ProgressStore, SrsProvider, SubjectCatalog

logger = logging.getLogger(__name__)


@dataclass
class ReviewSettings:
    reading_first: bool = True
    fuzzy_matching_enabled: bool = True
    auto_convert_katakana: bool = True
    retry_incorrect: bool = False
    session_size: int = DEFAULT_SESSION_SIZE

    @classmethod
    def from_config(cls, config) -> "ReviewSettings":
        return cls(
            reading_first=config.reading_first,
            fuzzy_matching_enabled=config.fuzzy_matching_enabled,
            auto_convert_katakana=config.auto_convert_katakana,
            retry_incorrect=config.retry_incorrect,
            session_size=config.session_size,
        )


@dataclass
class ReviewItemState:
    """
    Answer tracking for one item in the session.

    ``meaning_correct`` / ``reading_correct`` hold the first attempt's result
    (None until answered). Wrong counts accumulate over every attempt and are
    what the provider receives.
    """

    subject: Subject
    item: LearningItem
    meaning_answered: bool = False
    reading_answered: bool = False
    meaning_correct: bool | None = None
    reading_correct: bool | None = None
    meaning_wrong_count: int = 0
    reading_wrong_count: int = 0

    @property
    def needs_reading(self) -> bool:
        return self.subject.needs_reading

    @property
    def is_complete(self) -> bool:
        if self.needs_reading:
            return self.meaning_answered and self.reading_answered
        return self.meaning_answered

    def is_answered(self, question: ReviewQuestion) -> bool:
        if question is ReviewQuestion.MEANING:
            return self.meaning_answered
        return self.reading_answered or not self.needs_reading


class ReviewSession:
    def __init__(
        self,
        store: ProgressStore,
        catalog: SubjectCatalog,
        engine: SrsEngine | None = None,
        checker: AnswerChecker | None = None,
        provider: SrsProvider | None = None,
        settings: ReviewSettings | None = None,
        rng: random.Random | None = None,
    ):
        self._store = store
        self._catalog = catalog
        self._engine = engine or SrsEngine()
        self._checker = checker or AnswerChecker()
        self._provider = provider
        self.settings = settings or ReviewSettings()
        self._rng = rng or random.Random()

        self.items: list[ReviewItemState] = []
        self.current_index = 0
        self.current_question = ReviewQuestion.MEANING
        self.completed = False
        self.correct_count = 0
        self.incorrect_count = 0
        self.reviewed: list[LearningItem] = []
        self.failed_syncs: list[ReviewSubmission] = []

    async def load(self, now: datetime) -> int:
        """
        Collect due items and prepare the question order.

        Returns:
            Number of items in this session.
        """
        due = await self._store.all_due(now)
        states: list[ReviewItemState] = []

        for item in due:
            subject = self._catalog.get(item.kind, item.item_id)
            if subject is None:
                logger.warning(f"No subject data for {item.kind.value} {item.item_id}; skipping")
                continue
            if not subject.meanings or (subject.needs_reading and not subject.readings):
                logger.warning(
                    f"Subject {item.kind.value} {item.item_id} has no accepted answers; skipping"
                )
                continue
            states.append(ReviewItemState(subject=subject, item=item))

        self._rng.shuffle(states)
        self.items = states[: self.settings.session_size]
        self.current_index = 0
        self.completed = not self.items
        if self.items:
            self.current_question = self._first_question(self.items[0])

        logger.info(f"Review session loaded {len(self.items)} of {len(due)} due items")
        return len(self.items)

    @property
    def current_item(self) -> ReviewItemState | None:
        if self.current_index < len(self.items):
            return self.items[self.current_index]
        return None

    @property
    def progress(self) -> float:
        """Fraction of questions answered, 0.0-1.0."""
        if not self.items:
            return 0.0
        total = sum(2 if s.needs_reading else 1 for s in self.items)
        answered = sum(
            int(s.meaning_answered) + (int(s.reading_answered) if s.needs_reading else 0)
            for s in self.items
        )
        return answered / total

    @property
    def stats(self) -> tuple[int, int]:
        return (self.correct_count, self.incorrect_count)

    def accepted_answers(self) -> list[str]:
        state = self.current_item
        if state is None:
            return []
        if self.current_question is ReviewQuestion.MEANING:
            return state.subject.meanings
        return state.subject.readings

    def submit_answer(self, answer: str) -> AnswerOutcome:
        """
        Check an answer to the current question and record it.

        Raises:
            RuntimeError: The session has no current item.
        """
        state = self.current_item
        if state is None:
            raise RuntimeError("No review item is awaiting an answer")

        if self.current_question is ReviewQuestion.MEANING:
            outcome = self._checker.check_meaning(
                answer,
                state.subject.meanings,
                fuzzy_enabled=self.settings.fuzzy_matching_enabled,
            )
        else:
            outcome = self._checker.check_reading(
                answer,
                state.subject.readings,
                auto_convert_katakana=self.settings.auto_convert_katakana,
            )

        self._record(state, outcome.counts_as_correct)
        return outcome

    def _record(self, state: ReviewItemState, correct: bool) -> None:
        answered = correct or not self.settings.retry_incorrect

        if self.current_question is ReviewQuestion.MEANING:
            if state.meaning_correct is None:
                state.meaning_correct = correct
            if not correct:
                state.meaning_wrong_count += 1
            state.meaning_answered = state.meaning_answered or answered
        else:
            if state.reading_correct is None:
                state.reading_correct = correct
            if not correct:
                state.reading_wrong_count += 1
            state.reading_answered = state.reading_answered or answered

        if correct:
            self.correct_count += 1
        else:
            self.incorrect_count += 1

    async def next_question(self, now: datetime) -> None:
        """
        Move on after an answer: finish the item if both parts are done,
        otherwise switch to the question still open.
        """
        state = self.current_item
        if state is None:
            self.completed = True
            return

        if state.is_complete:
            await self._finish_item(state, now)
            self.current_index += 1
            if self.current_index >= len(self.items):
                self.completed = True
                logger.info(
                    f"Review session complete: {self.correct_count} correct, "
                    f"{self.incorrect_count} incorrect"
                )
            else:
                self.current_question = self._first_question(self.items[self.current_index])
            return

        other = (
            ReviewQuestion.READING
            if self.current_question is ReviewQuestion.MEANING
            else ReviewQuestion.MEANING
        )
        if not state.is_answered(other):
            self.current_question = other

    def _first_question(self, state: ReviewItemState) -> ReviewQuestion:
        if not state.needs_reading:
            return ReviewQuestion.MEANING
        return ReviewQuestion.READING if self.settings.reading_first else ReviewQuestion.MEANING

    async def _finish_item(self, state: ReviewItemState, now: datetime) -> None:
        subject = state.subject
        stored = await self._store.get(subject.kind, state.item.item_id)
        item = stored or state.item

        meaning_correct = bool(state.meaning_correct)
        # Radicals have no reading question
        reading_correct = bool(state.reading_correct) if state.needs_reading else True

        updated = self._engine.apply_review(item, meaning_correct, reading_correct, now)
        await self._store.upsert(updated)
        self.reviewed.append(updated)

        logger.info(
            f"Updated {subject.kind.value} {subject.characters}: "
            f"{item.stage.display_name} -> {updated.stage.display_name}"
        )

        if self._provider is None or updated.assignment_id is None:
            return

        await self._submit(
            ReviewSubmission(
                assignment_id=updated.assignment_id,
                incorrect_meaning_answers=state.meaning_wrong_count,
                incorrect_reading_answers=state.reading_wrong_count if state.needs_reading else 0,
            )
        )

    async def _submit(self, submission: ReviewSubmission) -> bool:
        try:
            await self._provider.submit_review(submission)
            return True
        except AlreadyReviewedError:
            logger.warning(
                f"Review for assignment {submission.assignment_id} already submitted elsewhere"
            )
            return True
        except ProviderError as e:
            logger.error(f"Failed to sync review for assignment {submission.assignment_id}: {e}")
            self.failed_syncs.append(submission)
            return False

    async def retry_failed_syncs(self) -> int:
        """
        Resubmit reviews the provider rejected earlier.

        Returns:
            Number of submissions still failing.
        """
        if self._provider is None:
            return len(self.failed_syncs)

        pending, self.failed_syncs = self.failed_syncs, []
        for submission in pending:
            await self._submit(submission)
        return len(self.failed_syncs)