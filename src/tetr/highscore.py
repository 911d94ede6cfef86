"""High score persistence.

The game board only needs to read one integer when it starts and write one
integer whenever the record is beaten.  Stores implement that pair of calls;
persistence is best effort and never interrupts play.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Protocol, Union


LOGGER = logging.getLogger(__name__)

HIGHSCORE_ENV_VAR = "TETR_HIGHSCORE_FILE"


class HighScoreStore(Protocol):
    """Read-one/write-one scalar storage for the high score."""

    def load(self) -> int:
        ...

    def save(self, value: int) -> None:
        ...


class MemoryHighScoreStore:
    """Keep the high score in memory only."""

    def __init__(self, value: int = 0) -> None:
        self.value = value
        self.saves = 0

    def load(self) -> int:
        return self.value

    def save(self, value: int) -> None:
        self.value = value
        self.saves += 1


def default_highscore_path() -> Path:
    """Return the high score file location.

    ``$TETR_HIGHSCORE_FILE`` wins when set; otherwise the file lives under
    ``~/.tetr``.
    """

    override = os.environ.get(HIGHSCORE_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".tetr" / "highscore.txt"


def parse_highscore(text: str) -> Optional[int]:
    """Return the non-negative integer held in ``text`` or ``None``."""

    text = text.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


class FileHighScoreStore:
    """Store the high score as a decimal number in a text file."""

    def __init__(self, path: Union[str, os.PathLike, None] = None) -> None:
        self.path = Path(path) if path is not None else default_highscore_path()

    def load(self) -> int:
        """Return the stored high score, or ``0`` if it is missing or unreadable."""

        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return 0
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Could not read high score from %s: %s", self.path, exc)
            return 0
        value = parse_highscore(text)
        if value is None:
            LOGGER.warning("Ignoring corrupt high score file %s", self.path)
            return 0
        return value

    def save(self, value: int) -> None:
        """Write ``value`` to the file.  Failures are logged and ignored."""

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(str(value), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Could not write high score to %s: %s", self.path, exc)
