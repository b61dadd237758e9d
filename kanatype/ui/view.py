"""Pure projection of a session into styled text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from kanatype.core.session import Session, Word
from kanatype.core.stats import SessionStats
from kanatype.ui.styles import StyleTag, style_for

WORD_SEPARATOR = "  "
INPUT_PROMPT = "入力："


@dataclass(frozen=True)
class Segment:
    text: str
    style: StyleTag


@dataclass(frozen=True)
class View:
    """Snapshot of everything the terminal shows for one frame."""

    segments: Tuple[Segment, ...]
    input_text: str
    finished: bool = False

    def plain(self) -> str:
        """The word line without styling."""
        return "".join(s.text for s in self.segments)

    def input_line(self) -> str:
        return f"{INPUT_PROMPT}{self.input_text}"


def word_segments(word: Word) -> List[Segment]:
    if word.is_complete:
        return [Segment(word.text, StyleTag.WORD_CONFIRMED)]
    if word.is_active:
        return [Segment(c.char, style_for(c.state)) for c in word.characters]
    return [Segment(word.text, StyleTag.PLAIN)]


def project(session: Session) -> View:
    """Build the view for the current session state. Never mutates it."""
    segments: List[Segment] = []
    for i, word in enumerate(session.words):
        if i:
            segments.append(Segment(WORD_SEPARATOR, StyleTag.PLAIN))
        segments.extend(word_segments(word))
    return View(
        segments=tuple(segments),
        input_text=session.transliterated_input,
        finished=session.finished,
    )


def summary_lines(stats: SessionStats) -> List[str]:
    """Text of the finish screen."""
    return [
        "おつかれさま！ Session complete.",
        f"Words:     {stats.completed_words}",
        f"Kana:      {stats.completed_chars}",
        f"Time:      {stats.elapsed_seconds():.1f}s",
        f"Speed:     {stats.words_per_minute():.1f} WPM, {stats.keys_per_minute():.1f} KPM",
        f"Accuracy:  {stats.accuracy():.1f}% ({stats.backspaces} corrections)",
        "",
        "Press any key to exit.",
    ]
