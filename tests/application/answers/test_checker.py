import pytest

from kanjisrs.application.answers.checker import (
    AnswerChecker,
    normalize_meaning,
    normalize_reading,
)
from kanjisrs.domain.models import AnswerOutcome, AnswerResult


@pytest.fixture
def checker():
    return AnswerChecker()


# ---------- Normalization ----------


def test_normalize_reading_folds_katakana_and_strips():
    assert normalize_reading("  コンピューター ") == "こんぴゅーたー"
    assert normalize_reading("ひと つ") == "ひとつ"
    assert normalize_reading("〜ごと") == "ごと"
    assert normalize_reading("~ごと～") == "ごと"


def test_normalize_reading_without_katakana_conversion():
    assert normalize_reading("カタカナ", auto_convert_katakana=False) == "カタカナ"


def test_normalize_meaning():
    assert normalize_meaning("  One Thing ") == "one thing"
    assert normalize_meaning("Self-Confidence") == "self confidence"
    assert normalize_meaning("Mr. O'Brien") == "mr obrien"
    assert normalize_meaning("And/Or") == "andor"


# ---------- Readings ----------


def test_reading_katakana_input_is_correct(checker):
    assert checker.check_reading("コンピューター", ["こんぴゅーたー"]) == AnswerOutcome.correct()


def test_reading_primary_and_alternate(checker):
    accepted = ["いち", "いつ", "ひと"]
    assert checker.check_reading("いち", accepted).result == AnswerResult.CORRECT
    assert (
        checker.check_reading("ひと", accepted).result
        == AnswerResult.ACCEPTABLE_BUT_NOT_PRIMARY
    )
    assert checker.check_reading("に", accepted).result == AnswerResult.INCORRECT


def test_reading_rejects_romaji_and_kanji(checker):
    assert checker.check_reading("hello", ["こんにちは"]) == AnswerOutcome.invalid_character_set()
    assert checker.check_reading("一", ["いち"]).result == AnswerResult.INVALID_CHARACTER_SET


def test_reading_accepted_list_is_normalized(checker):
    # Katakana in the accepted list is always folded, even with conversion off
    assert checker.check_reading("ぱん", ["パン"], auto_convert_katakana=False).result == (
        AnswerResult.CORRECT
    )


def test_reading_katakana_not_folded_when_disabled(checker):
    outcome = checker.check_reading("パン", ["ぱん"], auto_convert_katakana=False)
    assert outcome.result == AnswerResult.INCORRECT


def test_reading_is_never_fuzzy(checker):
    assert checker.check_reading("こんぴゅうたあ", ["こんぴゅーたー"]).result == (
        AnswerResult.INCORRECT
    )


def test_reading_empty_answer(checker):
    assert checker.check_reading("   ", ["いち"]).result == AnswerResult.INCORRECT


# ---------- Meanings ----------


def test_meaning_exact_match_ignores_case(checker):
    assert checker.check_meaning("one", ["One", "First"]) == AnswerOutcome.correct()
    assert checker.check_meaning("FIRST ", ["One", "First"]) == AnswerOutcome.correct()


def test_meaning_near_miss(checker):
    assert checker.check_meaning("computer", ["computerr"]) == AnswerOutcome.almost_correct(1)


def test_meaning_short_answers_must_be_exact(checker):
    assert checker.check_meaning("onee", ["one"]).result == AnswerResult.INCORRECT


def test_meaning_fuzzy_disabled(checker):
    outcome = checker.check_meaning("computer", ["computerr"], fuzzy_enabled=False)
    assert outcome == AnswerOutcome.incorrect()


def test_meaning_unrelated(checker):
    assert checker.check_meaning("totally different", ["one"]).result == AnswerResult.INCORRECT


def test_meaning_rejects_japanese(checker):
    assert checker.check_meaning("いち", ["One"]).result == AnswerResult.INVALID_CHARACTER_SET
    assert checker.check_meaning("一", ["One"]).result == AnswerResult.INVALID_CHARACTER_SET


def test_meaning_punctuation_is_normalized(checker):
    assert checker.check_meaning("self confidence", ["Self-Confidence"]).result == (
        AnswerResult.CORRECT
    )


# ---------- Outcome ----------


@pytest.mark.parametrize(
    "outcome, expected",
    [
        (AnswerOutcome.correct(), True),
        (AnswerOutcome.almost_correct(2), True),
        (AnswerOutcome.acceptable_but_not_primary(), True),
        (AnswerOutcome.incorrect(), False),
        (AnswerOutcome.invalid_character_set(), False),
    ],
)
def test_counts_as_correct(outcome, expected):
    assert outcome.counts_as_correct is expected
