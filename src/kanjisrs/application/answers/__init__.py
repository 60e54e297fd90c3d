# Application Answers Package
from .checker import AnswerChecker, normalize_meaning, normalize_reading
from .romaji import RomajiConverter, RomajiInput

__all__ = [
    "AnswerChecker",
    "normalize_meaning",
    "normalize_reading",
    "RomajiConverter",
    "RomajiInput",
]
