from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from kanatype.core.errors import EmptyWordBank, OvertypedInput
from kanatype.core.kana import Script, is_kana, transliterate
from kanatype.core.stats import SessionStats

logger = logging.getLogger(__name__)


class CharacterState(Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    CONFIRMED = "confirmed"
    INCORRECT = "incorrect"


@dataclass
class TargetCharacter:
    """One kana of a target word and its current match state."""

    char: str
    state: CharacterState = CharacterState.INACTIVE


@dataclass
class Word:
    """A target word. The character sequence never changes after creation."""

    characters: Tuple[TargetCharacter, ...]
    is_active: bool = False
    is_complete: bool = False

    @classmethod
    def from_text(cls, text: str) -> "Word":
        """Split ``text`` into code points, all inactive."""
        return cls(characters=tuple(TargetCharacter(ch) for ch in text))

    def __len__(self) -> int:
        return len(self.characters)

    @property
    def text(self) -> str:
        return "".join(c.char for c in self.characters)

    @property
    def states(self) -> List[CharacterState]:
        return [c.state for c in self.characters]

    def activate(self) -> None:
        """Make this the active word with the cursor on its first character."""
        self.is_active = True
        if self.characters:
            self.characters[0].state = CharacterState.ACTIVE

    def complete(self) -> None:
        for c in self.characters:
            c.state = CharacterState.CONFIRMED
        self.is_active = False
        self.is_complete = True

    def apply_states(self, states: Sequence[CharacterState]) -> bool:
        """Overwrite every character state. Return True if any changed."""
        changed = False
        for c, state in zip(self.characters, states):
            if c.state is not state:
                c.state = state
                changed = True
        return changed


class Key(Enum):
    """Named (non-printable) keys."""

    BACKSPACE = "backspace"
    ESCAPE = "escape"
    ENTER = "enter"
    OTHER = "other"


@dataclass(frozen=True)
class KeyEvent:
    """A single key press: either a printable character or a named key."""

    char: Optional[str] = None
    key: Optional[Key] = None

    @classmethod
    def of(cls, char: str) -> "KeyEvent":
        return cls(char=char)

    @classmethod
    def named(cls, key: Key) -> "KeyEvent":
        return cls(key=key)

    @property
    def is_backspace(self) -> bool:
        return self.key is Key.BACKSPACE

    @property
    def is_printable(self) -> bool:
        return self.char is not None and len(self.char) == 1 and self.char.isprintable()


class Outcome(Enum):
    IGNORED = "ignored"
    UPDATED = "updated"
    WORD_COMPLETE = "word_complete"
    SESSION_FINISHED = "session_finished"


@dataclass(frozen=True)
class KeystrokeResult:
    outcome: Outcome
    overtyped: Optional[OvertypedInput] = None


def match_states(
    target: str,
    transliterated: str,
    script: Script = Script.HIRAGANA,
) -> List[CharacterState]:
    """Derive every character state of ``target`` from the typed kana.

    A pure function of its arguments: the session calls it from scratch on
    every keystroke, so a backspace never leaves stale marks behind.
    Transliterated characters past the end of ``target`` are ignored.
    """
    states = [CharacterState.INACTIVE] * len(target)
    if not states:
        return states
    states[0] = CharacterState.ACTIVE

    for i, ch in enumerate(transliterated):
        if i >= len(target):
            break
        if ch == target[i]:
            states[i] = CharacterState.CONFIRMED
            if i + 1 < len(target):
                states[i + 1] = CharacterState.ACTIVE
        elif is_kana(ch, script):
            states[i] = CharacterState.INCORRECT
            break
        else:
            # pending romaji, no verdict yet
            states[i] = CharacterState.ACTIVE
            break
    return states


class Session:
    """One run of the trainer: a fixed list of words typed in order.

    ``apply_keystroke`` is the only mutator during play. ``needs_redraw`` is
    set by the session and cleared by whoever renders it.
    """

    def __init__(
        self,
        word_bank: Sequence[str],
        words: Sequence[Word],
        script: Script = Script.HIRAGANA,
        stats: Optional[SessionStats] = None,
        on_finished: Optional[Callable[["Session"], None]] = None,
    ) -> None:
        if not words:
            raise ValueError("a session needs at least one word")
        self._word_bank = tuple(word_bank)
        self._words = list(words)
        self._script = script
        self._stats = stats if stats is not None else SessionStats()
        self._on_finished = on_finished
        self._active_index = 0
        self._input_buffer = ""
        self.needs_redraw = True
        self._words[0].activate()

    @property
    def word_bank(self) -> Tuple[str, ...]:
        return self._word_bank

    @property
    def words(self) -> List[Word]:
        return self._words

    @property
    def script(self) -> Script:
        return self._script

    @property
    def stats(self) -> SessionStats:
        return self._stats

    @property
    def active_index(self) -> int:
        """Index of the active word; ``len(words)`` once finished."""
        return self._active_index

    @property
    def input_buffer(self) -> str:
        """Raw romaji typed so far for the active word."""
        return self._input_buffer

    @property
    def finished(self) -> bool:
        return self._active_index >= len(self._words)

    @property
    def active_word(self) -> Optional[Word]:
        if self.finished:
            return None
        return self._words[self._active_index]

    @property
    def transliterated_input(self) -> str:
        return transliterate(self._input_buffer, self._script)

    def apply_keystroke(self, event: KeyEvent) -> KeystrokeResult:
        """Feed one key event to the active word and update all states."""
        if self.finished:
            logger.debug("Ignoring key after session finished: %r", event)
            return KeystrokeResult(Outcome.IGNORED)

        shrank = False
        if event.is_backspace:
            if not self._input_buffer:
                return KeystrokeResult(Outcome.IGNORED)
            self._input_buffer = self._input_buffer[:-1]
            shrank = True
        elif event.is_printable:
            self._input_buffer += event.char
        else:
            return KeystrokeResult(Outcome.IGNORED)
        self._stats.record_keystroke(backspace=event.is_backspace)

        word = self._words[self._active_index]
        target = word.text
        transliterated = transliterate(self._input_buffer, self._script)

        if transliterated == target:
            return self._complete_active_word()

        changed = word.apply_states(match_states(target, transliterated, self._script))
        if changed or shrank:
            self.needs_redraw = True

        overtyped = None
        if len(transliterated) > len(target):
            overtyped = OvertypedInput(target, transliterated)
            logger.warning("Overtyped input ignored past %r: %r", target, overtyped.excess)
        return KeystrokeResult(Outcome.UPDATED, overtyped=overtyped)

    def _complete_active_word(self) -> KeystrokeResult:
        word = self._words[self._active_index]
        word.complete()
        self._stats.record_word(len(word))
        self._input_buffer = ""
        self._active_index += 1
        self.needs_redraw = True
        logger.info(
            "Completed word %d/%d: %s", self._active_index, len(self._words), word.text
        )

        if self._active_index < len(self._words):
            self._words[self._active_index].activate()
            return KeystrokeResult(Outcome.WORD_COMPLETE)

        self._stats.finish()
        logger.info(
            "Session finished: %d words, %.1f KPM, %.1f WPM",
            self._stats.completed_words,
            self._stats.keys_per_minute(),
            self._stats.words_per_minute(),
        )
        if self._on_finished is not None:
            self._on_finished(self)
        return KeystrokeResult(Outcome.SESSION_FINISHED)


def generate_session(
    word_bank: Sequence[str],
    count: int,
    rng: Optional[random.Random] = None,
    script: Script = Script.HIRAGANA,
    clock: Optional[Callable[[], float]] = None,
    on_finished: Optional[Callable[[Session], None]] = None,
) -> Session:
    """Sample ``count`` words with replacement and start a session on them."""
    bank = list(word_bank)
    if not bank:
        raise EmptyWordBank("word bank is empty")
    if count <= 0:
        raise ValueError(f"session length must be positive, got {count}")
    if any(not text for text in bank):
        raise ValueError("word bank contains an empty word")

    rng = rng if rng is not None else random.Random()
    words = [Word.from_text(rng.choice(bank)) for _ in range(count)]
    stats = SessionStats(clock) if clock is not None else SessionStats()
    logger.info("Generated %s session of %d words from %d candidates", script.value, count, len(bank))
    return Session(bank, words, script=script, stats=stats, on_finished=on_finished)
