from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Union

from kanatype.core.errors import EmptyWordBank, WordBankUnreadable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordBank:
    """Candidate words a session samples from, in file order."""

    source: str
    words: List[str]

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __getitem__(self, index: int) -> str:
        return self.words[index]


def parse_word_bank(text: str, source: str = "<memory>") -> WordBank:
    """Split newline-delimited text into a word bank.

    Lines are kept verbatim; only empty lines are dropped.
    """
    words = [line for line in text.splitlines() if line]
    if not words:
        raise EmptyWordBank(f"{source}: no words found")
    return WordBank(source=source, words=words)


def load_word_bank(path: Union[str, Path]) -> WordBank:
    """Read the whole word bank file at ``path``."""
    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise WordBankUnreadable(f"Could not read word bank {path}: {e}") from e
    bank = parse_word_bank(text, source=str(path))
    logger.info("Loaded %d words from %s", len(bank), path)
    return bank
