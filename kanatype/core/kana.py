"""Romaji to kana transliteration.

Conversion follows the usual IME conventions:

  * longest match against the romaji table, up to four letters;
  * a doubled consonant (``kk``, ``tt``, ...) becomes a small tsu;
  * ``nn``, ``n'`` and ``n`` before another consonant become ん;
  * a lone trailing ``n`` stays as typed, since the next key decides it.

Anything that cannot be converted yet is echoed back unchanged, so callers
can tell a finished kana from pending romaji with :func:`is_kana`.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict


class Script(str, Enum):
    """Target syllabary a session is typed in."""

    HIRAGANA = "hiragana"
    KATAKANA = "katakana"


# Romaji -> hiragana. Katakana is derived by shifting code points.
ROMAJI_TABLE: Dict[str, str] = {
    # ===== Vowels =====
    "a": "あ", "i": "い", "u": "う", "e": "え", "o": "お",

    # ===== Basic syllables =====
    "ka": "か", "ki": "き", "ku": "く", "ke": "け", "ko": "こ",
    "sa": "さ", "shi": "し", "si": "し", "su": "す", "se": "せ", "so": "そ",
    "ta": "た", "chi": "ち", "ti": "ち", "tsu": "つ", "tu": "つ", "te": "て", "to": "と",
    "na": "な", "ni": "に", "nu": "ぬ", "ne": "ね", "no": "の",
    "ha": "は", "hi": "ひ", "fu": "ふ", "hu": "ふ", "he": "へ", "ho": "ほ",
    "ma": "ま", "mi": "み", "mu": "む", "me": "め", "mo": "も",
    "ya": "や", "yu": "ゆ", "yo": "よ",
    "ra": "ら", "ri": "り", "ru": "る", "re": "れ", "ro": "ろ",
    "wa": "わ", "wo": "を", "xn": "ん",

    # ===== Voiced and half-voiced =====
    "ga": "が", "gi": "ぎ", "gu": "ぐ", "ge": "げ", "go": "ご",
    "za": "ざ", "ji": "じ", "zi": "じ", "zu": "ず", "ze": "ぜ", "zo": "ぞ",
    "da": "だ", "di": "ぢ", "du": "づ", "de": "で", "do": "ど",
    "ba": "ば", "bi": "び", "bu": "ぶ", "be": "べ", "bo": "ぼ",
    "pa": "ぱ", "pi": "ぴ", "pu": "ぷ", "pe": "ぺ", "po": "ぽ",
    "vu": "ゔ",

    # ===== Contracted syllables =====
    "kya": "きゃ", "kyu": "きゅ", "kyo": "きょ",
    "sha": "しゃ", "shu": "しゅ", "sho": "しょ", "she": "しぇ",
    "sya": "しゃ", "syu": "しゅ", "syo": "しょ",
    "cha": "ちゃ", "chu": "ちゅ", "cho": "ちょ", "che": "ちぇ",
    "tya": "ちゃ", "tyu": "ちゅ", "tyo": "ちょ",
    "cya": "ちゃ", "cyu": "ちゅ", "cyo": "ちょ",
    "nya": "にゃ", "nyu": "にゅ", "nyo": "にょ",
    "hya": "ひゃ", "hyu": "ひゅ", "hyo": "ひょ",
    "mya": "みゃ", "myu": "みゅ", "myo": "みょ",
    "rya": "りゃ", "ryu": "りゅ", "ryo": "りょ",
    "gya": "ぎゃ", "gyu": "ぎゅ", "gyo": "ぎょ",
    "ja": "じゃ", "ju": "じゅ", "jo": "じょ", "je": "じぇ",
    "jya": "じゃ", "jyu": "じゅ", "jyo": "じょ",
    "zya": "じゃ", "zyu": "じゅ", "zyo": "じょ",
    "dya": "ぢゃ", "dyu": "ぢゅ", "dyo": "ぢょ",
    "bya": "びゃ", "byu": "びゅ", "byo": "びょ",
    "pya": "ぴゃ", "pyu": "ぴゅ", "pyo": "ぴょ",

    # ===== Foreign-sound combinations =====
    "fa": "ふぁ", "fi": "ふぃ", "fe": "ふぇ", "fo": "ふぉ",
    "thi": "てぃ", "dhi": "でぃ", "twu": "とぅ", "dwu": "どぅ",
    "wi": "うぃ", "we": "うぇ", "ye": "いぇ",
    "va": "ゔぁ", "vi": "ゔぃ", "ve": "ゔぇ", "vo": "ゔぉ",

    # ===== Small kana =====
    "xa": "ぁ", "xi": "ぃ", "xu": "ぅ", "xe": "ぇ", "xo": "ぉ",
    "la": "ぁ", "li": "ぃ", "lu": "ぅ", "le": "ぇ", "lo": "ぉ",
    "xya": "ゃ", "xyu": "ゅ", "xyo": "ょ",
    "lya": "ゃ", "lyu": "ゅ", "lyo": "ょ",
    "xtu": "っ", "ltu": "っ", "xtsu": "っ", "ltsu": "っ",
    "xwa": "ゎ", "lwa": "ゎ",

    # ===== Punctuation =====
    "-": "ー", ",": "、", ".": "。",
}

MAX_CHUNK = max(len(key) for key in ROMAJI_TABLE)

CONSONANTS = frozenset("bcdfghjklmpqrstvwxyz")

SMALL_TSU = "っ"
SYLLABIC_N = "ん"

# Marks shared by both syllabaries.
KANA_MARKS = frozenset("ー、。・")

_HIRAGANA_FIRST, _HIRAGANA_LAST = 0x3041, 0x309F
_KATAKANA_FIRST, _KATAKANA_LAST = 0x30A0, 0x30FF
_KATAKANA_SHIFT = 0x60
_SHIFTABLE_LAST = 0x3096


def to_katakana(text: str) -> str:
    """Shift every hiragana letter in ``text`` into the katakana block."""
    return "".join(
        chr(ord(ch) + _KATAKANA_SHIFT) if _HIRAGANA_FIRST <= ord(ch) <= _SHIFTABLE_LAST else ch
        for ch in text
    )


def romaji_to_hiragana(romaji: str) -> str:
    """Convert romaji to hiragana, echoing pending or unknown input."""
    out: list[str] = []
    lower = romaji.lower()
    i = 0
    while i < len(romaji):
        c = lower[i]
        nxt = lower[i + 1] if i + 1 < len(lower) else ""

        if c == "n":
            if nxt in ("n", "'"):
                out.append(SYLLABIC_N)
                i += 2
                continue
            if nxt in CONSONANTS and nxt != "y":
                out.append(SYLLABIC_N)
                i += 1
                continue

        if c in CONSONANTS and (nxt == c or (c == "t" and lower.startswith("ch", i + 1))):
            out.append(SMALL_TSU)
            i += 1
            continue

        for size in range(min(MAX_CHUNK, len(lower) - i), 0, -1):
            kana = ROMAJI_TABLE.get(lower[i:i + size])
            if kana is not None:
                out.append(kana)
                i += size
                break
        else:
            out.append(romaji[i])
            i += 1
    return "".join(out)


def transliterate(romaji: str, script: Script = Script.HIRAGANA) -> str:
    """Transliterate romaji into ``script``. Total and deterministic."""
    hiragana = romaji_to_hiragana(romaji)
    if script is Script.KATAKANA:
        return to_katakana(hiragana)
    return hiragana


def is_kana(ch: str, script: Script = Script.HIRAGANA) -> bool:
    """Return True if ``ch`` is a concrete character of ``script``.

    Leftover romaji letters are not, which is how a still-ambiguous
    keystroke sequence is told apart from a wrong kana.
    """
    if len(ch) != 1:
        return False
    if ch in KANA_MARKS:
        return True
    code = ord(ch)
    if script is Script.KATAKANA:
        return _KATAKANA_FIRST <= code <= _KATAKANA_LAST
    return _HIRAGANA_FIRST <= code <= _HIRAGANA_LAST
