"""Curses render sink and key reader."""

from __future__ import annotations

import curses
import logging
from typing import Any, Dict, Iterable, Optional, Union

from kanatype.core.session import Key, KeyEvent
from kanatype.ui.styles import StyleTag, TerminalColors
from kanatype.ui.view import View

logger = logging.getLogger(__name__)

BACKSPACE_CODES = frozenset({curses.KEY_BACKSPACE, curses.KEY_DC})
BACKSPACE_CHARS = frozenset({"\x7f", "\b"})
ENTER_CHARS = frozenset({"\n", "\r"})
ESCAPE_CHAR = "\x1b"


def translate_key(raw: Union[str, int]) -> KeyEvent:
    """Map a ``get_wch`` result to a key event."""
    if isinstance(raw, int):
        if raw in BACKSPACE_CODES:
            return KeyEvent.named(Key.BACKSPACE)
        if raw == curses.KEY_ENTER:
            return KeyEvent.named(Key.ENTER)
        return KeyEvent.named(Key.OTHER)
    if raw in BACKSPACE_CHARS:
        return KeyEvent.named(Key.BACKSPACE)
    if raw == ESCAPE_CHAR:
        return KeyEvent.named(Key.ESCAPE)
    if raw in ENTER_CHARS:
        return KeyEvent.named(Key.ENTER)
    if len(raw) == 1 and raw.isprintable():
        return KeyEvent.of(raw)
    return KeyEvent.named(Key.OTHER)


def init_styles() -> Dict[StyleTag, int]:
    """Allocate color pairs and return the curses attribute per style.

    Must run after ``curses.initscr``.
    """
    colors_ok = curses.has_colors()
    if colors_ok:
        curses.start_color()
        curses.use_default_colors()

    attrs: Dict[StyleTag, int] = {}
    pair = 0
    for tag in StyleTag:
        attr = curses.A_BOLD if TerminalColors.is_bold(tag) else curses.A_NORMAL
        name = TerminalColors.color_name(tag)
        if colors_ok and name is not None:
            pair += 1
            curses.init_pair(pair, getattr(curses, f"COLOR_{name.upper()}"), -1)
            attr |= curses.color_pair(pair)
        attrs[tag] = attr
    return attrs


class TerminalScreen:
    """Draws views at the top-left corner of a curses window."""

    def __init__(self, stdscr: Any, attrs: Optional[Dict[StyleTag, int]] = None) -> None:
        self._stdscr = stdscr
        self._attrs = attrs if attrs is not None else init_styles()

    def read_key(self) -> KeyEvent:
        """Block until the next key press."""
        return translate_key(self._stdscr.get_wch())

    def render(self, view: View, clear: bool = False) -> None:
        """Draw ``view``; erase the previous frame first when ``clear`` is set."""
        if clear:
            self._stdscr.erase()
        self._stdscr.move(0, 0)
        self._put("\n ")
        for segment in view.segments:
            self._put(segment.text, self._attrs[segment.style])
        self._put("\n\n" + view.input_line())
        self._stdscr.clrtoeol()
        self._stdscr.refresh()

    def show_lines(self, lines: Iterable[str]) -> None:
        self._stdscr.erase()
        self._stdscr.move(0, 0)
        for line in lines:
            self._put(line + "\n")
        self._stdscr.refresh()

    def _put(self, text: str, attr: int = curses.A_NORMAL) -> None:
        try:
            self._stdscr.addstr(text, attr)
        except curses.error:
            # writing past the bottom-right cell; the frame is clipped
            logger.debug("Clipped text at screen edge: %r", text)
