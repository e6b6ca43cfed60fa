"""Turning arbitrary exceptions into docrag's error payloads.

DocRagError subclasses describe themselves; anything else (a bug, an
unexpected library error) is reported under ``UNEXPECTED_ERROR_CODE`` with
the same payload shape, so the CLI and the logs only handle one format.
"""

import json
import logging
from typing import Any

from ..core.domain.exceptions import (
    UNEXPECTED_ERROR_CODE,
    DocRagError,
    RaiseSite,
    trace_lines,
)

logger = logging.getLogger(__name__)


def get_error_code(exc: BaseException) -> str:
    if isinstance(exc, DocRagError):
        return exc.error_code
    return UNEXPECTED_ERROR_CODE


def failure_details(exc: BaseException) -> tuple[str, str | None]:
    """``(error, code)`` for a failed IngestionResult or QueryAnswer.

    Unexpected exceptions carry no code, so callers can tell a reported
    condition (empty query, unwritable snapshot) from a crash.
    """
    if isinstance(exc, DocRagError):
        return exc.failure_details()
    return str(exc), None


def format_exception_json(
    exc: BaseException,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Describe ``exc`` as ``{error, location, context, cause, stack_trace}``.

    ``location`` is present once the exception has been raised; ``context``
    merges the error's own context with ``extra_context``.
    """
    if isinstance(exc, DocRagError):
        result = exc.to_dict(include_trace=include_trace)
    else:
        result = {
            "error": {
                "type": type(exc).__name__,
                "code": UNEXPECTED_ERROR_CODE,
                "message": str(exc),
            }
        }
        site = RaiseSite.from_traceback(exc.__traceback__)
        if site is not None:
            result["location"] = site.to_dict()
        if include_trace and exc.__traceback__ is not None:
            result["stack_trace"] = trace_lines(exc)

    if extra_context:
        result["context"] = {**result.get("context", {}), **extra_context}
    return result


def log_exception(
    exc: BaseException,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    **context: Any,
) -> None:
    """Log ``exc`` as one JSON line, traceback included.

    Keyword arguments identify what was being processed, e.g.
    ``log_exception(e, log=logger, operation="ingest", filename=name)``.
    """
    payload = format_exception_json(exc, include_trace=True, extra_context=context)
    (log or logger).log(level, json.dumps(payload, ensure_ascii=False, default=str))
