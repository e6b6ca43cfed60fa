"""Query-side models: classification, options, and structured answers."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .document import SearchResult, utc_timestamp
from .exceptions import InvalidQueryOptionsError


class QueryType(Enum):
    """Intent of a user query.

    Decides which extraction strategy the synthesizer uses.

    Attributes:
        PROCEDURAL: "How do I..." questions, answered with steps.
        FACTUAL: "What is..." questions, answered with a summary.
        EXPLANATORY: "Why..." questions, answered with causal sentences.
        TEMPORAL: "When..." questions, answered with dates and times.
        LOCATIONAL: "Where..." questions, answered with location phrases.
        GENERAL: Anything else.
    """

    PROCEDURAL = "procedural"
    FACTUAL = "factual"
    EXPLANATORY = "explanatory"
    TEMPORAL = "temporal"
    LOCATIONAL = "locational"
    GENERAL = "general"


@dataclass
class ChatMessage:
    """A single message in the conversation history."""

    sender: str
    message: str
    timestamp: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatMessage":
        return cls(
            sender=str(data.get("sender", "user")),
            message=str(data.get("message") or ""),
            timestamp=data.get("timestamp"),
        )


@dataclass
class QueryOptions:
    """Per-query retrieval options.

    Attributes:
        max_results: Maximum number of chunks to retrieve.
        threshold: Minimum cosine similarity for a chunk to be kept.
        include_context: Whether the answer carries the retrieved chunks.
    """

    max_results: int = 5
    threshold: float = 0.3
    include_context: bool = True

    def __post_init__(self) -> None:
        if self.max_results < 1:
            raise InvalidQueryOptionsError(
                "maxResults must be at least 1", context={"maxResults": self.max_results}
            )
        if not 0.0 <= self.threshold <= 1.0:
            raise InvalidQueryOptionsError(
                "threshold must be between 0 and 1", context={"threshold": self.threshold}
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "QueryOptions":
        """Build options from wire keys (camelCase), falling back to defaults."""
        data = data or {}
        defaults = cls()
        include_context = data.get("includeContext", defaults.include_context)
        if not isinstance(include_context, bool):
            raise InvalidQueryOptionsError(
                "includeContext must be true or false",
                context={"includeContext": include_context},
            )
        try:
            return cls(
                max_results=int(data.get("maxResults", defaults.max_results)),
                threshold=float(data.get("threshold", defaults.threshold)),
                include_context=include_context,
            )
        except (TypeError, ValueError) as e:
            raise InvalidQueryOptionsError(
                "Query options must be numeric", cause=e, context=dict(data)
            ) from e


@dataclass
class SourceInfo:
    """A source file cited by an answer."""

    filename: str
    similarity: float

    def to_dict(self) -> dict[str, Any]:
        return {"filename": self.filename, "similarity": self.similarity}


@dataclass
class SynthesizedResponse:
    """Text extracted from the retrieved context plus its confidence."""

    text: str
    confidence: float
    query_type: QueryType


@dataclass
class AnswerMetadata:
    """Bookkeeping attached to a successful answer."""

    chunks_used: int
    avg_similarity: float
    processed_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunksUsed": self.chunks_used,
            "avgSimilarity": self.avg_similarity,
            "processedAt": self.processed_at,
        }


@dataclass
class QueryAnswer:
    """Structured result of a query.

    On success ``suggestion`` holds the synthesized answer; on failure
    ``error`` (and ``error_code``) describe what went wrong.
    """

    success: bool
    suggestion: str | None = None
    error: str | None = None
    error_code: str | None = None
    confidence: float = 0.0
    context: list[SearchResult] = field(default_factory=list)
    sources: list[SourceInfo] = field(default_factory=list)
    metadata: AnswerMetadata | None = None
    query_type: QueryType | None = None
    include_context: bool = True

    @classmethod
    def failure(cls, message: str, code: str | None = None) -> "QueryAnswer":
        return cls(success=False, error=message, error_code=code)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation: success and failure shapes differ."""
        if not self.success:
            result: dict[str, Any] = {"success": False, "error": self.error}
            if self.error_code:
                result["code"] = self.error_code
            return result

        result = {
            "success": True,
            "suggestion": self.suggestion,
            "confidence": self.confidence,
            "sources": [source.to_dict() for source in self.sources],
        }
        if self.include_context:
            result["context"] = [item.to_dict() for item in self.context]
        if self.metadata is not None:
            result["metadata"] = self.metadata.to_dict()
        if self.query_type is not None:
            result["queryType"] = self.query_type.value
        return result


@dataclass
class IngestionResult:
    """Outcome of ingesting one document."""

    success: bool
    document_id: str | None = None
    filename: str | None = None
    chunk_count: int = 0
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def failure(cls, message: str, code: str | None = None, filename: str | None = None):
        return cls(success=False, filename=filename, error=message, error_code=code)

    def to_dict(self) -> dict[str, Any]:
        if not self.success:
            result: dict[str, Any] = {"success": False, "error": self.error}
            if self.error_code:
                result["code"] = self.error_code
            return result
        return {
            "success": True,
            "documentId": self.document_id,
            "filename": self.filename,
            "chunks": self.chunk_count,
        }
