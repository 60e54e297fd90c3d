"""
SRS engine: stage transitions and review scheduling.

This is a pure computation module with no I/O. "Now" is always supplied by
the caller so results are reproducible.
"""

from dataclasses import replace
from datetime import datetime, timedelta

from kanjisrs.domain.constants import (
    BACKWARD_STAGE,
    FORWARD_STAGE,
    REGRESSION_FLOOR,
    REVIEW_INTERVALS,
)
from kanjisrs.domain.models import LearningItem, SRSStage


class SrsEngine:
    """
    Converts review outcomes into stage transitions and due dates.

    Stateless and side-effect free.
    """

    def next_stage(
        self, current: SRSStage, meaning_correct: bool, reading_correct: bool
    ) -> SRSStage:
        """
        Compute the stage after a completed review.

        No mistakes advance one stage. One mistake drops one stage, two drop
        two, never below Apprentice I.
        """
        total_incorrect = (0 if meaning_correct else 1) + (0 if reading_correct else 1)

        if total_incorrect == 0:
            return FORWARD_STAGE[current]

        return self._regress(current, steps=1 if total_incorrect == 1 else 2)

    def _regress(self, stage: SRSStage, steps: int) -> SRSStage:
        for _ in range(steps):
            stage = BACKWARD_STAGE[stage]

        if stage == SRSStage.LESSON:
            return REGRESSION_FLOOR
        return stage

    def next_review_at(self, stage: SRSStage, now: datetime) -> datetime | None:
        """
        When an item at ``stage`` becomes due. Burned items are never due again.
        """
        interval = REVIEW_INTERVALS.get(stage)
        if interval is None:
            return None
        return now + interval

    def is_due(self, next_review_at: datetime | None, now: datetime) -> bool:
        if next_review_at is None:
            return False
        return next_review_at <= now

    def time_until_review(
        self, next_review_at: datetime | None, now: datetime
    ) -> timedelta | None:
        """
        Remaining time before the item is due, floored at zero. None if never due.
        """
        if next_review_at is None:
            return None
        remaining = next_review_at - now
        return remaining if remaining > timedelta(0) else timedelta(0)

    def apply_review(
        self,
        item: LearningItem,
        meaning_correct: bool,
        reading_correct: bool,
        now: datetime,
    ) -> LearningItem:
        """
        Return a copy of ``item`` advanced by one completed review.

        Args:
            item: Current stored state.
            meaning_correct: Whether the meaning part was answered right.
            reading_correct: Whether the reading part was answered right.
                Callers pass True for items without a reading question.
            now: Review completion time.
        """
        stage = self.next_stage(item.stage, meaning_correct, reading_correct)
        return replace(
            item,
            stage=stage,
            next_review_at=self.next_review_at(stage, now),
            times_reviewed=item.times_reviewed + 1,
            times_correct=item.times_correct + (1 if meaning_correct and reading_correct else 0),
            updated_at=now,
        )
