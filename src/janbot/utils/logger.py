"""
Logging for Janbot.

Every handler installed here masks bearer tokens and vendor API keys, so a
JWT echoed back in a backend error body or an SDK message never reaches the
console or the log file.
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from janbot.config.settings import Settings

# Vendor SDKs log every request at INFO; keep them to warnings.
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "openai",
    "anthropic",
    "google_genai",
    "pydantic_ai",
)

REDACTED = "***"

SECRET_PATTERNS = (
    # Authorization headers and "Bearer <jwt>" fragments
    re.compile(r"(?i)(bearer\s+)[A-Za-z0-9._~+/=-]+"),
    # OpenAI / Anthropic style keys
    re.compile(r"\b(sk-(?:ant-)?)[A-Za-z0-9_-]{6,}"),
    # Google API keys
    re.compile(r"\b(AIza)[0-9A-Za-z_-]{20,}"),
)

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def redact_secrets(text: str) -> str:
    """Replace credentials in `text`, keeping their prefix for context."""
    for pattern in SECRET_PATTERNS:
        text = pattern.sub(lambda m: f"{m.group(1)}{REDACTED}", text)
    return text


class SecretRedactingFilter(logging.Filter):
    """Masks credentials in the rendered message of every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_secrets(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class ColoredFormatter(logging.Formatter):
    """Colour the level name for terminal output."""

    RESET = "\033[0m"
    GRAY = "\033[90m"
    BLUE = "\033[94m"
    LEVEL_COLORS = {
        logging.DEBUG: "\033[90m",
        logging.INFO: "\033[92m",
        logging.WARNING: "\033[93m",
        logging.ERROR: "\033[91m",
        logging.CRITICAL: "\033[1m\033[91m",
    }

    def __init__(self) -> None:
        super().__init__(
            f"{self.GRAY}%(asctime)s{self.RESET} | %(levelname)s | "
            f"{self.BLUE}%(name)s{self.RESET} | %(message)s",
            datefmt=DATE_FORMAT,
        )

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        color = self.LEVEL_COLORS.get(record.levelno)
        if color:
            record.levelname = f"{color}{levelname:<8}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: int | str = logging.INFO,
    log_file: Path | None = None,
    use_colors: bool = True,
) -> None:
    """
    Set up logging for the whole service.

    Args:
        level: Logging level, as an int or a name such as "DEBUG"
        log_file: Optional path to a log file (always written at DEBUG)
        use_colors: Colour level names when stdout is a terminal
    """
    numeric_level = _parse_level(level)
    redacting = SecretRedactingFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(min(numeric_level, logging.DEBUG) if log_file else numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.addFilter(redacting)
    if use_colors and sys.stdout.isatty():
        console_handler.setFormatter(ColoredFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(redacting)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_settings(settings: Settings) -> None:
    """Apply LOG_LEVEL and LOG_FILE from settings."""
    setup_logging(
        level=settings.LOG_LEVEL,
        log_file=Path(settings.LOG_FILE) if settings.LOG_FILE else None,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Example:
        logger = get_logger(__name__)
        logger.info("Router ready")
    """
    return logging.getLogger(name)
