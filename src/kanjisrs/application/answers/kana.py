"""Kana script helpers: katakana folding and script-range checks."""

from kanjisrs.domain.constants import (
    CJK_END,
    CJK_START,
    HIRAGANA_END,
    HIRAGANA_START,
    KANA_OFFSET,
    KATAKANA_CONVERTIBLE_END,
    KATAKANA_CONVERTIBLE_START,
    KATAKANA_END,
    PROLONGED_SOUND_MARK,
)


def katakana_to_hiragana(text: str) -> str:
    """
    Fold katakana into hiragana one character at a time.

    The prolonged sound mark has no hiragana form and is kept as is, as are
    katakana without a hiragana counterpart (ヷ, ヸ, ヹ, ヺ).
    """
    chars = []
    for ch in text:
        code = ord(ch)
        if KATAKANA_CONVERTIBLE_START <= code <= KATAKANA_CONVERTIBLE_END:
            chars.append(chr(code - KANA_OFFSET))
        else:
            chars.append(ch)
    return "".join(chars)


def is_kana(ch: str) -> bool:
    return HIRAGANA_START <= ord(ch) <= KATAKANA_END or ch == PROLONGED_SOUND_MARK


def is_hiragana(ch: str) -> bool:
    return HIRAGANA_START <= ord(ch) <= HIRAGANA_END


def contains_non_kana(text: str) -> bool:
    """True if anything other than kana, the prolonged sound mark or whitespace appears."""
    return any(not is_kana(ch) and not ch.isspace() for ch in text)


def contains_japanese(text: str) -> bool:
    """True if any hiragana, katakana or CJK ideograph appears."""
    for ch in text:
        code = ord(ch)
        if HIRAGANA_START <= code <= KATAKANA_END or CJK_START <= code <= CJK_END:
            return True
    return False
