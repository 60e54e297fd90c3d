"""
Streaming romaji to hiragana conversion for reading answers.

Conversion is a small state machine over a pending buffer of ASCII letters:
each fed character may emit kana and updates the buffer. ``finalize`` flushes
what is left when the answer is submitted.
"""

from kanjisrs.domain.constants import (
    GEMINATE_MARK,
    HIRAGANA_END,
    HIRAGANA_START,
    MAX_ROMAJI_PENDING,
    NASAL_KANA,
    PROLONGED_SOUND_MARK,
    ROMAJI_OVERFLOW_KEEP,
)

ROMAJI_TABLE = {
    # Vowels
    "a": "あ", "i": "い", "u": "う", "e": "え", "o": "お",
    # K
    "ka": "か", "ki": "き", "ku": "く", "ke": "け", "ko": "こ",
    "kya": "きゃ", "kyu": "きゅ", "kyo": "きょ",
    # S
    "sa": "さ", "si": "し", "su": "す", "se": "せ", "so": "そ",
    "shi": "し", "sha": "しゃ", "shu": "しゅ", "she": "しぇ", "sho": "しょ",
    "sya": "しゃ", "syu": "しゅ", "syo": "しょ",
    # T
    "ta": "た", "ti": "ち", "tu": "つ", "te": "て", "to": "と",
    "chi": "ち", "tsu": "つ",
    "cha": "ちゃ", "chu": "ちゅ", "che": "ちぇ", "cho": "ちょ",
    "tya": "ちゃ", "tyu": "ちゅ", "tyo": "ちょ",
    # N (bare "n" is resolved by the nasal rules, not the table)
    "na": "な", "ni": "に", "nu": "ぬ", "ne": "ね", "no": "の",
    "nya": "にゃ", "nyu": "にゅ", "nyo": "にょ",
    # H
    "ha": "は", "hi": "ひ", "hu": "ふ", "he": "へ", "ho": "ほ",
    "fu": "ふ", "fa": "ふぁ", "fi": "ふぃ", "fe": "ふぇ", "fo": "ふぉ",
    "hya": "ひゃ", "hyu": "ひゅ", "hyo": "ひょ",
    # M
    "ma": "ま", "mi": "み", "mu": "む", "me": "め", "mo": "も",
    "mya": "みゃ", "myu": "みゅ", "myo": "みょ",
    # Y
    "ya": "や", "yu": "ゆ", "yo": "よ",
    # R
    "ra": "ら", "ri": "り", "ru": "る", "re": "れ", "ro": "ろ",
    "rya": "りゃ", "ryu": "りゅ", "ryo": "りょ",
    # W
    "wa": "わ", "wi": "ゐ", "we": "ゑ", "wo": "を",
    # G
    "ga": "が", "gi": "ぎ", "gu": "ぐ", "ge": "げ", "go": "ご",
    "gya": "ぎゃ", "gyu": "ぎゅ", "gyo": "ぎょ",
    # Z / J
    "za": "ざ", "zi": "じ", "zu": "ず", "ze": "ぜ", "zo": "ぞ",
    "ji": "じ", "ja": "じゃ", "ju": "じゅ", "je": "じぇ", "jo": "じょ",
    "zya": "じゃ", "zyu": "じゅ", "zyo": "じょ",
    # D
    "da": "だ", "di": "ぢ", "du": "づ", "de": "で", "do": "ど",
    "dya": "ぢゃ", "dyu": "ぢゅ", "dyo": "ぢょ",
    # B
    "ba": "ば", "bi": "び", "bu": "ぶ", "be": "べ", "bo": "ぼ",
    "bya": "びゃ", "byu": "びゅ", "byo": "びょ",
    # P
    "pa": "ぱ", "pi": "ぴ", "pu": "ぷ", "pe": "ぺ", "po": "ぽ",
    "pya": "ぴゃ", "pyu": "ぴゅ", "pyo": "ぴょ",
    # Small kana
    "xa": "ぁ", "xi": "ぃ", "xu": "ぅ", "xe": "ぇ", "xo": "ぉ",
    "xya": "ゃ", "xyu": "ゅ", "xyo": "ょ",
    "xtu": "っ", "xtsu": "っ",
    "la": "ぁ", "li": "ぃ", "lu": "ぅ", "le": "ぇ", "lo": "ぉ",
    "lya": "ゃ", "lyu": "ゅ", "lyo": "ょ",
    "ltu": "っ", "ltsu": "っ",
    # Long vowel
    "-": PROLONGED_SOUND_MARK,
}  # fmt: skip

MAX_KEY_LENGTH = max(len(key) for key in ROMAJI_TABLE)

GEMINATE_CONSONANTS = frozenset("ksptcgdbzjfhmr")

# Characters that can continue a syllable after a pending "n".
CAN_FOLLOW_N = frozenset("aiueoyn'")


def _is_romaji_char(ch: str) -> bool:
    return "a" <= ch <= "z" or ch in ("-", "'")


class RomajiConverter:
    """
    Romaji to hiragana transliteration (Hepburn plus common IME spellings).

    All methods are pure; the pending buffer is passed in and returned.
    """

    @staticmethod
    def feed(buffer: str, char: str) -> tuple[str, str]:
        """
        Feed one typed character.

        Args:
            buffer: Pending, not yet converted romaji.
            char: The newly typed character.

        Returns:
            (emitted, new_buffer): kana (or literal text) that is now final,
            and the pending romaji to carry into the next call.
        """
        ch = char.lower()

        if not _is_romaji_char(ch):
            return RomajiConverter.finalize(buffer) + char, ""

        emitted = ""
        if buffer.endswith("n"):
            if ch in ("n", "'"):
                return NASAL_KANA, buffer[:-1]
            if ch not in CAN_FOLLOW_N:
                emitted = NASAL_KANA
                buffer = buffer[:-1]
        elif ch == "'":
            return RomajiConverter.finalize(buffer) + char, ""

        if buffer and buffer[-1] == ch and ch in GEMINATE_CONSONANTS:
            return emitted + GEMINATE_MARK, buffer

        buffer += ch
        for length in range(min(len(buffer), MAX_KEY_LENGTH), 0, -1):
            kana = ROMAJI_TABLE.get(buffer[-length:])
            if kana is not None:
                emitted += kana
                buffer = buffer[:-length]
                break

        if len(buffer) > MAX_ROMAJI_PENDING:
            flushed = buffer[:-ROMAJI_OVERFLOW_KEEP]
            buffer = buffer[-ROMAJI_OVERFLOW_KEEP:]
            emitted += RomajiConverter.finalize(flushed)

        return emitted, buffer

    @staticmethod
    def finalize(buffer: str) -> str:
        """Flush the pending buffer, turning a trailing bare "n" into ん."""
        if buffer.endswith("n"):
            return buffer[:-1] + NASAL_KANA
        return buffer

    @staticmethod
    def convert(text: str) -> tuple[str, str]:
        """
        Convert a whole string.

        Returns:
            (kana, buffer): converted text and the romaji still pending.
        """
        buffer = ""
        parts = []
        for char in text:
            emitted, buffer = RomajiConverter.feed(buffer, char)
            parts.append(emitted)
        return "".join(parts), buffer

    @staticmethod
    def convert_for_display(text: str) -> str:
        """Converted text followed by the still-pending romaji."""
        kana, buffer = RomajiConverter.convert(text)
        return kana + buffer

    @staticmethod
    def to_kana(text: str) -> str:
        """Convert and finalize, as on answer submission."""
        kana, buffer = RomajiConverter.convert(text)
        return kana + RomajiConverter.finalize(buffer)

    @staticmethod
    def is_pure_kana(text: str) -> bool:
        """True if only hiragana, the prolonged sound mark and spaces remain."""
        for ch in text:
            if HIRAGANA_START <= ord(ch) <= HIRAGANA_END:
                continue
            if ch in (PROLONGED_SOUND_MARK, " "):
                continue
            return False
        return True


class RomajiInput:
    """
    Incremental conversion state for one text field.

    Each active input owns its own instance; instances are not shared.
    """

    def __init__(self) -> None:
        self._converted = ""
        self._buffer = ""

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def display(self) -> str:
        return self._converted + self._buffer

    def feed(self, text: str) -> str:
        for char in text:
            emitted, self._buffer = RomajiConverter.feed(self._buffer, char)
            self._converted += emitted
        return self.display

    def finalize(self) -> str:
        """Return the finished answer and reset for the next question."""
        result = self._converted + RomajiConverter.finalize(self._buffer)
        self.clear()
        return result

    def clear(self) -> None:
        self._converted = ""
        self._buffer = ""
