"""Style tags for rendered text and their terminal colors."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

from kanatype.core.session import CharacterState


class StyleTag(Enum):
    PLAIN = "plain"
    ACTIVE_WORD = "active_word"
    CURSOR = "cursor"
    TENTATIVE = "tentative"
    INCORRECT = "incorrect"
    WORD_CONFIRMED = "word_confirmed"


_STATE_STYLES: Dict[CharacterState, StyleTag] = {
    CharacterState.INACTIVE: StyleTag.ACTIVE_WORD,
    CharacterState.ACTIVE: StyleTag.CURSOR,
    CharacterState.CONFIRMED: StyleTag.TENTATIVE,
    CharacterState.INCORRECT: StyleTag.INCORRECT,
}


def style_for(state: CharacterState) -> StyleTag:
    """Style of a character inside the active word."""
    return _STATE_STYLES[state]


class TerminalColors:
    """Foreground color name and bold flag per style.

    Names match the ``COLOR_*`` constants of :mod:`curses`; ``None`` keeps the
    terminal default.
    """

    PALETTE: Dict[StyleTag, Tuple[Optional[str], bool]] = {
        StyleTag.PLAIN: (None, False),
        StyleTag.ACTIVE_WORD: (None, True),
        StyleTag.CURSOR: ("magenta", True),
        StyleTag.TENTATIVE: ("yellow", True),
        StyleTag.INCORRECT: ("red", True),
        StyleTag.WORD_CONFIRMED: ("green", False),
    }

    @classmethod
    def color_name(cls, tag: StyleTag) -> Optional[str]:
        return cls.PALETTE[tag][0]

    @classmethod
    def is_bold(cls, tag: StyleTag) -> bool:
        return cls.PALETTE[tag][1]
