"""Tests for kanjisrs.application.utils.text."""

import pytest

from kanjisrs.application.utils.text import distance_tolerance, levenshtein_distance


# ---------- Levenshtein ----------


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("kitten", "sitting", 3),
        ("computer", "computerr", 1),
        ("flaw", "lawn", 2),
        ("one", "one", 0),
        ("", "abc", 3),
        ("abc", "", 3),
        ("", "", 0),
        ("いち", "いつ", 1),
    ],
)
def test_levenshtein_distance(a, b, expected):
    assert levenshtein_distance(a, b) == expected


def test_levenshtein_is_symmetric():
    pairs = [("ground", "grand"), ("one thing", "thing"), ("a", "xyz")]
    for a, b in pairs:
        assert levenshtein_distance(a, b) == levenshtein_distance(b, a)


# ---------- Tolerance ----------


@pytest.mark.parametrize(
    "answer, expected",
    [
        ("", 0),
        ("one", 0),
        ("four", 1),
        ("grass", 1),
        ("ground", 2),
        ("village", 2),
        ("computer", 3),
        ("fourteen chars", 4),
    ],
)
def test_distance_tolerance(answer, expected):
    assert distance_tolerance(answer) == expected
