"""Vector store exceptions for docrag."""

from .base import DocRagError


class VectorStoreError(DocRagError):
    """Base error for vector store operations."""

    error_code = "RAG_VEC_001"


class SnapshotLoadError(VectorStoreError):
    """The persisted snapshot could not be read or parsed.

    Common causes:
    - File truncated or hand-edited
    - Snapshot written by an incompatible version
    """

    error_code = "RAG_VEC_002"


class SnapshotWriteError(VectorStoreError):
    """The snapshot could not be written to disk."""

    error_code = "RAG_VEC_003"


class DocumentNotFoundError(VectorStoreError):
    """Requested document does not exist."""

    error_code = "RAG_VEC_004"
