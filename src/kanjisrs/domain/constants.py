"""Centralized constants for kanjisrs.

Stage tables, review intervals, character ranges and provider settings live
here so every layer imports from a single source of truth.
"""

from datetime import timedelta

from .models import SRSStage

# ---------- SRS stage transitions ----------
FORWARD_STAGE = {
    SRSStage.LESSON: SRSStage.APPRENTICE_1,
    SRSStage.APPRENTICE_1: SRSStage.APPRENTICE_2,
    SRSStage.APPRENTICE_2: SRSStage.APPRENTICE_3,
    SRSStage.APPRENTICE_3: SRSStage.APPRENTICE_4,
    SRSStage.APPRENTICE_4: SRSStage.GURU_1,
    SRSStage.GURU_1: SRSStage.GURU_2,
    SRSStage.GURU_2: SRSStage.MASTER,
    SRSStage.MASTER: SRSStage.ENLIGHTENED,
    SRSStage.ENLIGHTENED: SRSStage.BURNED,
    SRSStage.BURNED: SRSStage.BURNED,
}

# Hand-written; not the inverse of FORWARD_STAGE at the LESSON/APPRENTICE_1 end.
BACKWARD_STAGE = {
    SRSStage.LESSON: SRSStage.LESSON,
    SRSStage.APPRENTICE_1: SRSStage.APPRENTICE_1,
    SRSStage.APPRENTICE_2: SRSStage.APPRENTICE_1,
    SRSStage.APPRENTICE_3: SRSStage.APPRENTICE_2,
    SRSStage.APPRENTICE_4: SRSStage.APPRENTICE_3,
    SRSStage.GURU_1: SRSStage.APPRENTICE_4,
    SRSStage.GURU_2: SRSStage.GURU_1,
    SRSStage.MASTER: SRSStage.GURU_2,
    SRSStage.ENLIGHTENED: SRSStage.MASTER,
    SRSStage.BURNED: SRSStage.ENLIGHTENED,
}

REGRESSION_FLOOR = SRSStage.APPRENTICE_1

# ---------- Review intervals ----------
# BURNED has no entry: burned items are never scheduled again.
REVIEW_INTERVALS = {
    SRSStage.LESSON: timedelta(0),
    SRSStage.APPRENTICE_1: timedelta(hours=4),
    SRSStage.APPRENTICE_2: timedelta(hours=8),
    SRSStage.APPRENTICE_3: timedelta(hours=24),
    SRSStage.APPRENTICE_4: timedelta(hours=48),
    SRSStage.GURU_1: timedelta(days=7),
    SRSStage.GURU_2: timedelta(days=14),
    SRSStage.MASTER: timedelta(days=30),
    SRSStage.ENLIGHTENED: timedelta(days=120),
}

# ---------- Character ranges ----------
HIRAGANA_START = 0x3040
HIRAGANA_END = 0x309F
KATAKANA_END = 0x30FF
# Katakana with a direct hiragana counterpart (ァ..ヶ), offset by 0x60.
KATAKANA_CONVERTIBLE_START = 0x30A1
KATAKANA_CONVERTIBLE_END = 0x30F6
KANA_OFFSET = 0x60
CJK_START = 0x4E00
CJK_END = 0x9FAF

PROLONGED_SOUND_MARK = "ー"
NASAL_KANA = "ん"
GEMINATE_MARK = "っ"
WAVE_DASHES = ("~", "〜", "～")

# ---------- Answer checking ----------
MEANING_PUNCTUATION_REPLACEMENTS = (
    ("-", " "),
    (".", ""),
    ("'", ""),
    ("/", ""),
)

# ---------- Romaji input ----------
MAX_ROMAJI_PENDING = 4
ROMAJI_OVERFLOW_KEEP = 3

# ---------- Review session ----------
DEFAULT_SESSION_SIZE = 10

# ---------- External SRS provider ----------
WANIKANI_API_URL = "https://api.wanikani.com/v2"
WANIKANI_REVISION = "20170710"
REQUEST_TIMEOUT = 30.0
ALREADY_REVIEWED_STATUS = 422
