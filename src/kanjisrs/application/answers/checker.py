"""
Answer checker for reading and meaning questions.

Normalizes raw user input (IME artifacts, case, punctuation) and compares it
against the accepted answers. Bad input degrades to INCORRECT or
INVALID_CHARACTER_SET; nothing here raises.
"""

import logging

from kanjisrs.application.answers.kana import (
    contains_japanese,
    contains_non_kana,
    katakana_to_hiragana,
)
from kanjisrs.application.utils.text import distance_tolerance, levenshtein_distance
from kanjisrs.domain.constants import MEANING_PUNCTUATION_REPLACEMENTS, WAVE_DASHES
from kanjisrs.domain.models import AnswerOutcome

logger = logging.getLogger(__name__)


def normalize_reading(text: str, auto_convert_katakana: bool = True) -> str:
    normalized = text.strip()
    if auto_convert_katakana:
        normalized = katakana_to_hiragana(normalized)
    for dash in WAVE_DASHES:
        normalized = normalized.replace(dash, "")
    return "".join(normalized.split())


def normalize_meaning(text: str) -> str:
    normalized = text.strip().lower()
    for old, new in MEANING_PUNCTUATION_REPLACEMENTS:
        normalized = normalized.replace(old, new)
    return normalized


class AnswerChecker:
    """
    Validates free-text answers.

    Stateless and side-effect free.
    """

    def check_reading(
        self,
        answer: str,
        accepted: list[str],
        auto_convert_katakana: bool = True,
    ) -> AnswerOutcome:
        """
        Check a kana reading.

        Args:
            answer: Raw user input.
            accepted: Accepted readings, primary reading first.
            auto_convert_katakana: Fold katakana input into hiragana before comparing.

        Returns:
            CORRECT for the primary reading, ACCEPTABLE_BUT_NOT_PRIMARY for any
            other accepted reading, INVALID_CHARACTER_SET when the answer is not
            kana, otherwise INCORRECT. Readings are never fuzzy-matched.
        """
        normalized = normalize_reading(answer, auto_convert_katakana)

        if contains_non_kana(normalized):
            return AnswerOutcome.invalid_character_set()

        for index, reading in enumerate(accepted):
            if normalized == normalize_reading(reading):
                if index == 0:
                    return AnswerOutcome.correct()
                return AnswerOutcome.acceptable_but_not_primary()

        return AnswerOutcome.incorrect()

    def check_meaning(
        self,
        answer: str,
        accepted: list[str],
        fuzzy_enabled: bool = True,
    ) -> AnswerOutcome:
        """
        Check an English meaning, tolerating small typos when ``fuzzy_enabled``.

        The tolerance depends on the length of each accepted meaning, so a
        short meaning like "one" must be typed exactly.
        """
        normalized = normalize_meaning(answer)

        if contains_japanese(normalized):
            return AnswerOutcome.invalid_character_set()

        candidates = [normalize_meaning(meaning) for meaning in accepted]

        if normalized in candidates:
            return AnswerOutcome.correct()

        if fuzzy_enabled:
            for candidate in candidates:
                distance = levenshtein_distance(normalized, candidate)
                if distance <= distance_tolerance(candidate):
                    logger.debug(
                        f"Accepted '{normalized}' as near miss of '{candidate}' (distance={distance})"
                    )
                    return AnswerOutcome.almost_correct(distance)

        return AnswerOutcome.incorrect()
