"""Logging setup for the docrag command line.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by the CLI entry point. Log output goes to stderr so
``docrag ask --json`` keeps stdout parseable.
"""

import json
import logging
import sys
from typing import Any

from ..core.domain.exceptions import DocRagError

ROOT_LOGGER = "docrag"
TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Model loading is chatty at INFO; keep it out of CLI output.
NOISY_LOGGERS = ("sentence_transformers", "transformers", "huggingface_hub", "urllib3", "filelock")

_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per record.

    Values passed with ``extra=`` (for example ``text_length`` on embedding
    fallbacks) are collected under ``context``. A DocRagError in
    ``exc_info`` adds its error code to the ``exception`` block.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        context = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRIBUTES}
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            entry["exception"] = {
                "type": type(exc).__name__,
                "code": exc.error_code if isinstance(exc, DocRagError) else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """Send ``docrag`` logs to stderr, replacing any handler set up before.

    Args:
        level: Level name; unknown names fall back to INFO.
        json_format: Use JSONExceptionFormatter instead of the text format.

    Returns:
        The ``docrag`` root logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JSONExceptionFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%H:%M:%S"))
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
