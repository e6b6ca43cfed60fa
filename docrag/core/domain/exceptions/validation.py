"""Validation exceptions for docrag."""

from .base import DocRagError


class ValidationError(DocRagError):
    """Input validation failed."""

    error_code = "RAG_VAL_001"


class EmptyQueryError(ValidationError):
    """Query cannot be empty or whitespace only."""

    error_code = "RAG_VAL_002"


class EmptyMessageListError(ValidationError):
    """Message history must contain at least one message."""

    error_code = "RAG_VAL_003"


class InvalidQueryOptionsError(ValidationError):
    """Query options are out of range."""

    error_code = "RAG_VAL_004"
