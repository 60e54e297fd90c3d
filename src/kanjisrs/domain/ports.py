"""
Ports (interfaces) for progress storage, subject content and provider sync.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Assignment, ItemKind, LearningItem, ReviewSubmission, Subject


class ProgressStore(ABC):
    """
    Port for persisting per-item SRS state.

    Implementations:
        - InMemoryProgressStore: Dict-backed, for tests and throwaway sessions.
        - SqliteProgressStore: Local SQLite file.

    Implementations must allow at most one concurrent writer per item.
    """

    @abstractmethod
    async def get(self, kind: ItemKind, item_id: str) -> LearningItem | None:
        """Return the stored item, or None if the user never started it."""
        pass

    @abstractmethod
    async def upsert(self, item: LearningItem) -> None:
        """
        Insert or replace the item. Idempotent by (kind, item_id).
        """
        pass

    @abstractmethod
    async def all_due(self, now: datetime, kind: ItemKind | None = None) -> list[LearningItem]:
        """
        Fetch items whose next_review_at is set and not later than ``now``.

        Args:
            now: Reference instant supplied by the caller.
            kind: Restrict to one subject family; all kinds when None.

        Returns:
            Due items sorted by next_review_at ascending.
        """
        pass

    @abstractmethod
    async def all_items(self, kind: ItemKind | None = None) -> list[LearningItem]:
        """Fetch every stored item, optionally restricted to one kind."""
        pass


class SubjectCatalog(ABC):
    """Port for looking up study content (meanings, readings) by subject."""

    @abstractmethod
    def get(self, kind: ItemKind, subject_id: str) -> Subject | None:
        pass

    @abstractmethod
    def all_subjects(self, kind: ItemKind | None = None) -> list[Subject]:
        pass

    def find_by_provider_id(self, kind: ItemKind, provider_id: int) -> Subject | None:
        """Resolve an external provider subject id to local study content."""
        for subject in self.all_subjects(kind):
            if subject.provider_id == provider_id:
                return subject
        return None


class SrsProvider(ABC):
    """
    Port for an external SRS service that mirrors review results.

    Implementations:
        - WaniKaniAdapter: WaniKani API v2 over HTTP.
    """

    @abstractmethod
    async def fetch_assignments(
        self,
        subject_types: list[str],
        srs_stages: list[int] | None = None,
        updated_after: datetime | None = None,
    ) -> list[Assignment]:
        """
        Fetch all assignments of the given subject types, following pagination.
        """
        pass

    @abstractmethod
    async def submit_review(self, submission: ReviewSubmission) -> None:
        """
        Report a completed review upstream.

        Raises:
            AlreadyReviewedError: The provider already recorded this review.
            ProviderError: Any other failure.
        """
        pass
