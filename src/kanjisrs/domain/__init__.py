# Domain Package
from .models import (
    AnswerOutcome,
    AnswerResult,
    Assignment,
    ItemKind,
    LearningItem,
    ReviewQuestion,
    ReviewSubmission,
    SRSStage,
    Subject,
)
from .ports import ProgressStore, SrsProvider, SubjectCatalog

__all__ = [
    "AnswerOutcome",
    "AnswerResult",
    "Assignment",
    "ItemKind",
    "LearningItem",
    "ReviewQuestion",
    "ReviewSubmission",
    "SRSStage",
    "Subject",
    "ProgressStore",
    "SrsProvider",
    "SubjectCatalog",
]
