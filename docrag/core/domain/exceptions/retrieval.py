"""Retrieval exceptions for docrag."""

from .base import DocRagError


class RetrievalError(DocRagError):
    """Error during similarity search."""

    error_code = "RAG_RET_001"


class DimensionMismatchError(RetrievalError):
    """Query and stored embeddings have different dimensions.

    Usually means the store was built with a different embedding model.
    Re-ingest the documents or switch back to the original model.
    """

    error_code = "RAG_RET_002"
