"""Embedding exceptions for docrag."""

from .base import DocRagError


class EmbeddingError(DocRagError):
    """Failed to generate embeddings."""

    error_code = "RAG_EMB_001"


class EmbeddingModelUnavailableError(EmbeddingError):
    """The sentence-transformers model could not be loaded.

    Common causes:
    - sentence-transformers (or torch) not installed
    - Model not cached locally and no network access
    """

    error_code = "RAG_EMB_002"


class EmbeddingGenerationError(EmbeddingError):
    """The model produced no usable vector for a text."""

    error_code = "RAG_EMB_003"


class EmbeddingCancelledError(EmbeddingError):
    """Batch embedding was cancelled before it finished."""

    error_code = "RAG_EMB_004"
