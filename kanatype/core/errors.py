"""Error types raised while starting or playing a typing session."""

from __future__ import annotations


class KanaTypeError(Exception):
    """Base class for all kanatype errors."""


class WordBankUnreadable(KanaTypeError):
    """The word bank file could not be read."""


class EmptyWordBank(KanaTypeError):
    """The word bank holds no words to sample from."""


class ConfigError(KanaTypeError):
    """The settings file is malformed or holds an invalid value."""


class OvertypedInput(KanaTypeError):
    """Transliterated input ran past the end of the target word.

    Never raised by the session; attached to the keystroke result so the
    caller can report it.
    """

    def __init__(self, target: str, transliterated: str) -> None:
        super().__init__(
            f"input {transliterated!r} is longer than target {target!r}"
        )
        self.target = target
        self.transliterated = transliterated

    @property
    def excess(self) -> str:
        """The trailing transliterated characters ignored for matching."""
        return self.transliterated[len(self.target):]
