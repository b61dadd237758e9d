"""Application entry point and event loop for the kanatype trainer."""

import curses
import locale
import logging
import sys
from pathlib import Path
from typing import Optional

from kanatype.core.config import Settings, load_settings
from kanatype.core.errors import KanaTypeError
from kanatype.core.session import Key, Session, generate_session
from kanatype.core.words import load_word_bank
from kanatype.ui.terminal import TerminalScreen
from kanatype.ui.view import project, summary_lines

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Configure application-wide logging with a standard format.

    curses owns the terminal while a session runs, so records go to
    ``log_file`` or nowhere.
    """
    if log_file is None:
        logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.NullHandler()])
        return
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"kanatype: logging disabled, cannot create {log_file.parent}: {e}", file=sys.stderr)
        logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.NullHandler()])
        return
    logging.basicConfig(level=level, format=LOG_FORMAT, filename=str(log_file), encoding="utf-8")


def play(screen: TerminalScreen, session: Session) -> bool:
    """Run the key loop until the session finishes or the user presses Esc.

    Return True if every word was typed.
    """
    while True:
        screen.render(project(session), clear=session.needs_redraw)
        session.needs_redraw = False
        if session.finished:
            break

        event = screen.read_key()
        if event.key is Key.ESCAPE:
            logger.info(
                "Quit at word %d/%d", session.active_index + 1, len(session.words)
            )
            return False
        session.apply_keystroke(event)

    screen.show_lines(summary_lines(session.stats))
    screen.read_key()
    return True


def _main(stdscr, session: Session) -> bool:
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    return play(TerminalScreen(stdscr), session)


def start_session(settings: Settings) -> Session:
    """Load the word bank and generate a session from ``settings``."""
    bank = load_word_bank(settings.word_bank)
    return generate_session(bank, settings.session_length, script=settings.script)


def run(settings_path: Optional[Path] = None) -> None:
    """Load settings and words, then hand the terminal to the trainer."""
    try:
        settings = load_settings(settings_path)
        configure_logging(settings.log_level, settings.log_file)
        session = start_session(settings)
    except KanaTypeError as e:
        logger.error("Startup failed: %s", e)
        print(f"kanatype: {e}", file=sys.stderr)
        sys.exit(1)

    locale.setlocale(locale.LC_ALL, "")
    completed = curses.wrapper(_main, session)
    logger.info("Exited (%s)", "finished" if completed else "quit")
