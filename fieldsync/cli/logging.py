"""
CLI logging setup.

The library logs through module loggers under `fieldsync`; the CLI attaches a
rich stderr handler (and optionally a file handler) to that logger for the
duration of one command and restores the previous state afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "fieldsync"

_redaction_token: str | None = None


def set_redaction_token(token: str | None) -> None:
    global _redaction_token
    _redaction_token = token or None


class _RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        token = _redaction_token
        if token:
            message = record.getMessage()
            if token in message:
                record.msg = message.replace(token, "[REDACTED]")
                record.args = None
        return True


@dataclass(frozen=True, slots=True)
class LoggingState:
    level: int
    propagate: bool
    handlers: tuple[logging.Handler, ...]


def _level_for(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(
    *,
    verbosity: int,
    log_file: Path | None = None,
    token_for_redaction: str | None = None,
) -> LoggingState:
    """Install CLI handlers on the `fieldsync` logger; returns the state to restore."""
    logger = logging.getLogger(LOGGER_NAME)
    previous = LoggingState(
        level=logger.level,
        propagate=logger.propagate,
        handlers=tuple(logger.handlers),
    )
    set_redaction_token(token_for_redaction)

    level = _level_for(verbosity)
    redactor = _RedactingFilter()

    stderr_handler = RichHandler(
        console=Console(stderr=True),
        show_path=verbosity >= 2,
        rich_tracebacks=verbosity >= 2,
    )
    stderr_handler.setLevel(level)
    stderr_handler.addFilter(redactor)

    handlers: list[logging.Handler] = [stderr_handler]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        file_handler.addFilter(redactor)
        handlers.append(file_handler)

    logger.handlers = handlers
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False
    return previous


def restore_logging(state: LoggingState) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        if handler not in state.handlers:
            handler.close()
    logger.handlers = list(state.handlers)
    logger.setLevel(state.level)
    logger.propagate = state.propagate
    set_redaction_token(None)


__all__ = ["LoggingState", "configure_logging", "restore_logging", "set_redaction_token"]
