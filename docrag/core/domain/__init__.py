"""Domain models for docrag.

This package contains all data models used across the application:

- document: ExtractedDocument, Document, DocumentMetadata, SearchResult, StoreStats
- answer: QueryType, ChatMessage, QueryOptions, QueryAnswer, IngestionResult

All models are re-exported here for convenient importing:

    from docrag.core.domain import Document, SearchResult, QueryType
"""

from .answer import (
    AnswerMetadata,
    ChatMessage,
    IngestionResult,
    QueryAnswer,
    QueryOptions,
    QueryType,
    SourceInfo,
    SynthesizedResponse,
)
from .document import (
    Document,
    DocumentMetadata,
    ExtractedDocument,
    SearchResult,
    StoreStats,
)

__all__ = [
    # Document models
    "ExtractedDocument",
    "Document",
    "DocumentMetadata",
    "SearchResult",
    "StoreStats",
    # Query models
    "QueryType",
    "ChatMessage",
    "QueryOptions",
    "SourceInfo",
    "SynthesizedResponse",
    "AnswerMetadata",
    "QueryAnswer",
    "IngestionResult",
]
