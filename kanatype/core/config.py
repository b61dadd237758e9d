from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from kanatype.core.errors import ConfigError
from kanatype.core.kana import Script

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_SETTINGS_PATH = DATA_DIR / "settings.yaml"

DEFAULTS: Dict[str, Any] = {
    "session_length": 16,
    "word_bank": "words.txt",
    "script": Script.HIRAGANA.value,
    "log_level": "INFO",
    "log_file": "~/.kanatype/kanatype.log",
}


@dataclass(frozen=True)
class Settings:
    session_length: int
    word_bank: Path
    script: Script
    log_level: str
    log_file: Optional[Path]


def load_settings(path: Union[str, Path, None] = None) -> Settings:
    """Load settings from a YAML file, falling back to defaults per key."""
    settings_path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    if not settings_path.exists():
        raise ConfigError(f"Settings file not found: {settings_path}")

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"{settings_path.name}: could not parse settings: {e}") from e
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{settings_path.name}: expected a YAML mapping")

    unknown = sorted(set(raw) - set(DEFAULTS))
    if unknown:
        raise ConfigError(f"{settings_path.name}: unknown keys {', '.join(unknown)}")

    values = {**DEFAULTS, **raw}
    return Settings(
        session_length=_session_length(settings_path, values["session_length"]),
        word_bank=_resolve(settings_path, values["word_bank"], "word_bank"),
        script=_script(settings_path, values["script"]),
        log_level=_log_level(settings_path, values["log_level"]),
        log_file=(
            None if values["log_file"] is None
            else _resolve(settings_path, values["log_file"], "log_file")
        ),
    )


def _session_length(settings_path: Path, value: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{settings_path.name}: 'session_length' must be a positive integer")
    return value


def _resolve(settings_path: Path, value: Any, key: str) -> Path:
    if not value or not isinstance(value, str):
        raise ConfigError(f"{settings_path.name}: missing or invalid '{key}'")
    resolved = Path(value).expanduser()
    if not resolved.is_absolute():
        resolved = settings_path.resolve().parent / resolved
    return resolved


def _script(settings_path: Path, value: Any) -> Script:
    try:
        return Script(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(s.value for s in Script)
        raise ConfigError(
            f"{settings_path.name}: 'script' must be one of {choices}, got {value!r}"
        ) from None


def _log_level(settings_path: Path, value: Any) -> str:
    level = str(value).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"{settings_path.name}: invalid 'log_level' {value!r}")
    return level
