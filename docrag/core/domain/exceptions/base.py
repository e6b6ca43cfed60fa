"""Base exception for docrag.

Every failure the pipeline reports carries a stable ``error_code``. The
ingest and answer entry points return it as the ``code`` field of their
failure values, so codes are part of the output format: never reuse or
renumber one.

Where an error was raised is read from its traceback, so the location is
only known once the exception has actually been raised.
"""

import traceback
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Any

UNEXPECTED_ERROR_CODE = "RAG_ERR_000"


@dataclass(frozen=True)
class RaiseSite:
    """Innermost frame of a traceback."""

    function: str
    file: str
    line: int

    @classmethod
    def from_traceback(cls, tb: TracebackType | None) -> "RaiseSite | None":
        frames = traceback.extract_tb(tb) if tb is not None else []
        if not frames:
            return None
        frame = frames[-1]
        return cls(function=frame.name, file=Path(frame.filename).name, line=frame.lineno or 0)

    def to_dict(self) -> dict[str, Any]:
        return {"function": self.function, "file": self.file, "line": self.line}


def trace_lines(exc: BaseException) -> list[str]:
    """Formatted traceback of ``exc``, one entry per non-blank line."""
    formatted = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return [line for line in formatted.splitlines() if line.strip()]


class DocRagError(Exception):
    """Base class for every error docrag raises on purpose.

    Args:
        message: Human-readable description, returned to callers as ``error``.
        cause: Underlying exception (an OSError from a snapshot write, a
            model loading failure, ...).
        context: Values that identify the failing item, such as a document
            id, a file path or a vector dimension.
    """

    error_code: str = "RAG_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = dict(context or {})

    @property
    def raise_site(self) -> RaiseSite | None:
        return RaiseSite.from_traceback(self.__traceback__)

    def failure_details(self) -> tuple[str, str]:
        """The ``(error, code)`` pair placed in a failed result."""
        return self.message, self.error_code

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Structured description used by the CLI and by error logs."""
        result: dict[str, Any] = {
            "error": {
                "type": type(self).__name__,
                "code": self.error_code,
                "message": self.message,
            }
        }

        site = self.raise_site
        if site is not None:
            result["location"] = site.to_dict()
        if self.extra_context:
            result["context"] = dict(self.extra_context)
        if self.cause is not None:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        if include_trace and self.__traceback__ is not None:
            result["stack_trace"] = trace_lines(self)

        return result
