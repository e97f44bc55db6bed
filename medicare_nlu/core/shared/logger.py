"""
NLU Logging

Root logging setup for the NLU engine and its scripts, plus a small logger
that stamps every record with NLU context (component, user, intent,
confidence) so the lines for one assistant reply can be correlated.

Usage:
    configure_logging(level="INFO", format_type="json")

    logger = get_nlu_logger("chat_assistant")
    log = logger.with_context(user_id="u-42")
    log.info("Assistant reply generated", intent="mark_taken", confidence=0.8)
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rendered first, in this order; any other context follows
NLU_CONTEXT_FIELDS = ("component", "user_id", "intent", "confidence")


def nlu_context(record: logging.LogRecord) -> dict[str, Any]:
    """NLU context attached to a record, known fields first, None values dropped."""
    context = getattr(record, "nlu", None) or {}
    ordered = {key: context[key] for key in NLU_CONTEXT_FIELDS if key in context}
    ordered.update({key: value for key, value in context.items() if key not in ordered})
    return {key: value for key, value in ordered.items() if value is not None}


class JSONFormatter(logging.Formatter):
    """One JSON object per record with the NLU context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(nlu_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class PlainFormatter(logging.Formatter):
    """Text formatter that appends the NLU context as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = nlu_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} | {pairs}"


class ColoredFormatter(PlainFormatter):
    """PlainFormatter with a colored level name for terminals."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = f"{self.COLORS.get(original, self.RESET)}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record
            record.levelname = original


_FORMATTERS: dict[str, type[logging.Formatter]] = {
    "json": JSONFormatter,
    "colored": ColoredFormatter,
    "plain": PlainFormatter,
}


class NLULogger:
    """Logger for one NLU component carrying a fixed context."""

    def __init__(self, component: str, context: dict[str, Any] | None = None):
        self._logger = logging.getLogger(f"nlu.{component}")
        self._context = {"component": component, **(context or {})}

    def with_context(self, **fields: Any) -> "NLULogger":
        """New logger for the same component with extra context fields."""
        return NLULogger(self._context["component"], {**self._context, **fields})

    def _log(self, level: int, message: str, args: tuple[Any, ...], fields: dict[str, Any]) -> None:
        self._logger.log(level, message, *args, extra={"nlu": {**self._context, **fields}})

    def info(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(logging.INFO, message, args, fields)

    def error(self, message: str, *args: Any, **fields: Any) -> None:
        self._log(logging.ERROR, message, args, fields)


def configure_logging(level: str = "INFO", format_type: str = "colored") -> None:
    """
    Configure root logging on stderr.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: 'colored', 'json', or 'plain'
    """
    numeric_level = logging.getLevelName(level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_FORMATTERS.get(format_type, PlainFormatter)())
    root_logger.addHandler(handler)


def get_nlu_logger(component: str) -> NLULogger:
    """Get logger for an NLU engine component."""
    return NLULogger(component)
