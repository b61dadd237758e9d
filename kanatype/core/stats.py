from __future__ import annotations

import time
from typing import Callable, Optional


class SessionStats:
    """Keystroke and word counters for one typing session.

    Speed metrics:
      * **KPM** – keystrokes (including backspaces) per minute.
      * **WPM** – (confirmed kana / 5) / elapsed minutes, the same gross
        formula used for Latin text. Kana are denser than letters, so the
        number reads low next to an English typing test.

    The clock stops when :meth:`finish` is called.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._start_time = clock()
        self._end_time: Optional[float] = None
        self._keystrokes = 0
        self._backspaces = 0
        self._completed_words = 0
        self._completed_chars = 0

    @property
    def keystrokes(self) -> int:
        """Total keys consumed by the session, backspaces included."""
        return self._keystrokes

    @property
    def backspaces(self) -> int:
        return self._backspaces

    @property
    def completed_words(self) -> int:
        return self._completed_words

    @property
    def completed_chars(self) -> int:
        return self._completed_chars

    @property
    def finished(self) -> bool:
        return self._end_time is not None

    def record_keystroke(self, backspace: bool = False) -> None:
        if self.finished:
            return
        self._keystrokes += 1
        if backspace:
            self._backspaces += 1

    def record_word(self, length: int) -> None:
        if self.finished:
            return
        self._completed_words += 1
        self._completed_chars += length

    def finish(self) -> None:
        """Freeze the elapsed time. Later calls are ignored."""
        if self._end_time is None:
            self._end_time = self._clock()

    def elapsed_seconds(self) -> float:
        end = self._end_time if self._end_time is not None else self._clock()
        return max(end - self._start_time, 0.0)

    def keys_per_minute(self) -> float:
        elapsed_minutes = max(self.elapsed_seconds() / 60.0, 1e-6)
        return self._keystrokes / elapsed_minutes

    def words_per_minute(self) -> float:
        """Gross WPM: confirmed kana / 5 / minutes."""
        elapsed_minutes = max(self.elapsed_seconds() / 60.0, 1e-6)
        return (self._completed_chars / 5.0) / elapsed_minutes

    def accuracy(self) -> float:
        """Share of keystrokes that were not backspaces, as a percentage."""
        if not self._keystrokes:
            return 0.0
        return (self._keystrokes - self._backspaces) / self._keystrokes * 100.0
