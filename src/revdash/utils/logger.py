"""
Structured console logger

One line per message, key/value details rendered as a tree below it:

    [14:23:45.201] TRANSACTION ✓ Transaction recorded
                   ├─ category: enterprise
                   └─ amount: 999.99

Usage:
    log = get_logger().for_category(LogCategory.REVENUE)
    log.info("Tick applied", total="47833.02")
"""

import sys
import traceback
from datetime import datetime
from typing import Dict, List, NamedTuple, Optional, TextIO

from revdash.models.enums import LogLevel, LogCategory


# === ANSI COLORS ===
class Colors:
    """ANSI escape codes for colored terminal output"""
    RESET = '\033[0m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'


class LevelStyle(NamedTuple):
    rank: int
    symbol: str
    color: str


LEVEL_STYLES: Dict[LogLevel, LevelStyle] = {
    LogLevel.DEBUG: LevelStyle(0, '·', Colors.DIM),
    LogLevel.INFO: LevelStyle(1, '✓', Colors.GREEN),
    LogLevel.WARN: LevelStyle(2, '⚠', Colors.YELLOW),
    LogLevel.ERROR: LevelStyle(3, '✗', Colors.RED),
}

CATEGORY_COLORS: Dict[LogCategory, str] = {
    LogCategory.CONFIG: Colors.CYAN,
    LogCategory.SIMULATION: Colors.BRIGHT_CYAN,
    LogCategory.REVENUE: Colors.BRIGHT_GREEN,
    LogCategory.TRANSACTION: Colors.BRIGHT_YELLOW,
    LogCategory.ANIMATION: Colors.BRIGHT_MAGENTA,
    LogCategory.RENDER: Colors.MAGENTA,
    LogCategory.EVENT: Colors.BRIGHT_MAGENTA,
    LogCategory.SYSTEM: Colors.BRIGHT_WHITE,
    LogCategory.API: Colors.BRIGHT_BLUE,
    LogCategory.WEBSOCKET: Colors.BLUE,
}

_CATEGORY_WIDTH = max(len(c.name) for c in LogCategory)
_TIMESTAMP_WIDTH = len("[00:00:00.000]")


# === CORE LOGGER ===
class Logger:
    """
    Category-aware logger writing to a text stream.

    Args:
        min_level: Messages below this level are dropped
        use_colors: ANSI colors (turn off when the stream is a file)
        stream: Target stream, stdout when omitted
    """

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        use_colors: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.min_level = min_level
        self.use_colors = use_colors
        self.stream = stream

    def is_enabled(self, level: LogLevel) -> bool:
        return LEVEL_STYLES[level].rank >= LEVEL_STYLES[self.min_level].rank

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{Colors.RESET}" if self.use_colors else text

    def _header(self, category: LogCategory, level: LogLevel, message: str) -> str:
        style = LEVEL_STYLES[level]
        stamp = datetime.now().strftime('[%H:%M:%S.%f')[:-3] + ']'
        cat = self._paint(category.name.ljust(_CATEGORY_WIDTH), CATEGORY_COLORS.get(category, Colors.WHITE))
        return f"{stamp} {cat} {self._paint(style.symbol, style.color)} {self._paint(message, style.color)}"

    def _tree(self, details: List[str]) -> List[str]:
        indent = " " * (_TIMESTAMP_WIDTH + 1)
        lines = []
        for i, detail in enumerate(details):
            branch = "└─" if i == len(details) - 1 else "├─"
            lines.append(f"{indent}{self._paint(branch, Colors.DIM)} {detail}")
        return lines

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        exc_info: bool = False,
        **kwargs
    ):
        """
        Write one structured message.

        Args:
            category: Log category (REVENUE, TRANSACTION, ...)
            message: Main message text
            level: Log level
            details: Extra free-form lines shown under the message
            exc_info: Append the traceback of the exception being handled
            **kwargs: key/value pairs shown as details
        """
        if not self.is_enabled(level):
            return

        lines = list(details or [])
        lines.extend(f"{k}: {v}" for k, v in kwargs.items())
        if exc_info:
            lines.extend(traceback.format_exc().rstrip().splitlines())

        out = self.stream or sys.stdout
        out.write("\n".join([self._header(category, level, message), *self._tree(lines)]) + "\n")
        out.flush()

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        """Logger with category pre-filled; module-level `log` objects use this."""
        return BoundLogger(self, category)


class BoundLogger:
    """Thin view over the shared Logger with a fixed default category."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self.category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self.category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)


# === Global instance helpers ===
_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(
    min_level: LogLevel = LogLevel.INFO,
    use_colors: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Reconfigure the shared logger in place.

    Module-level BoundLoggers created at import time see the change.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
    _logger.stream = stream
