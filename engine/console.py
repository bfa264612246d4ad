from __future__ import annotations

import sys
import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional, TextIO

from engine.errors import TextEngineError

logger = logging.getLogger(__name__)

# --- Severity levels ----------------------------------------------------------

SILENT = 0   # log nothing
ERROR = 1    # raise, never returns
WARNING = 2  # record and continue
INFO = 3     # only when the console level is INFO

_LOGGING_LEVELS = {WARNING: logging.WARNING, INFO: logging.INFO}


@dataclass(frozen=True)
class LogRecord:
    level: int
    text: str


class Console:
    """
    Console output and the four-level error log.

    Levels:
      0 - log nothing
      1 - errors only (default). An error always raises, whatever the level.
      2 - errors and warnings
      3 - everything
    """

    def __init__(self,
                 level: int = ERROR,
                 indent: str = "  ",
                 stream: Optional[TextIO] = None,
                 max_records: Optional[int] = 500):   # None keeps every record
        self._level = max(SILENT, min(INFO, int(level)))
        self.indent = indent
        self.stream = stream
        self.records: Deque[LogRecord] = deque(maxlen=max_records)

    @classmethod
    def from_settings(cls, cfg, stream: Optional[TextIO] = None) -> "Console":
        """Build from a ConsoleCfg (see engine.settings)."""
        return cls(level=cfg.log_level, indent=cfg.output_indent, stream=stream)

    @property
    def level(self) -> int:
        return self._level

    # --- output ---------------------------------------------------------------
    def format(self, first: object, *rest: object) -> str:
        """First argument as-is, every following one on its own indented line."""
        lines = [str(first)]
        lines.extend(f"{self.indent}{r}" for r in rest)
        return "\n".join(lines)

    def out(self, first: object, *rest: object) -> None:
        stream = self.stream or sys.stdout
        stream.write(self.format(first, *rest) + "\n")
        stream.flush()

    # --- logging --------------------------------------------------------------
    def log(
        self,
        level: int,
        message: object,
        *details: object,
        error: Callable[[str], TextEngineError] = TextEngineError,
    ) -> None:
        """
        Log `message` at `level`. Level 1 raises `error` carrying the message;
        levels outside 2..configured are dropped.
        """
        if level == ERROR:
            raise error(self.format(message, *details))
        if level < ERROR or level > self._level:
            return

        text = self.format(message, *details)
        self.records.append(LogRecord(level, text))
        logger.log(_LOGGING_LEVELS[level], text)

    def fail(self, error: Callable[[str], TextEngineError], message: object, *details: object) -> None:
        self.log(ERROR, message, *details, error=error)

    def warn(self, message: object, *details: object) -> None:
        self.log(WARNING, message, *details)

    def info(self, message: object, *details: object) -> None:
        self.log(INFO, message, *details)

    # --- queries --------------------------------------------------------------
    @property
    def warnings(self) -> List[str]:
        return [r.text for r in self.records if r.level == WARNING]
