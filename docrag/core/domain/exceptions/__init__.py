"""Custom exception hierarchy for docrag.

One module per failure family. Import from this package directly:

    from docrag.core.domain.exceptions import DocRagError, SnapshotWriteError
"""

# Base classes
from .base import UNEXPECTED_ERROR_CODE, DocRagError, RaiseSite, trace_lines

# Configuration exceptions
from .configuration import (
    ConfigurationError,
    InvalidConfigurationError,
)

# Data ingestion exceptions
from .data_ingestion import (
    DataIngestionError,
    DataValidationError,
    EmptyDocumentError,
)

# Embedding exceptions
from .embedding import (
    EmbeddingCancelledError,
    EmbeddingError,
    EmbeddingGenerationError,
    EmbeddingModelUnavailableError,
)

# Retrieval exceptions
from .retrieval import (
    DimensionMismatchError,
    RetrievalError,
)

# Validation exceptions
from .validation import (
    EmptyMessageListError,
    EmptyQueryError,
    InvalidQueryOptionsError,
    ValidationError,
)

# Vector store exceptions
from .vector_store import (
    DocumentNotFoundError,
    SnapshotLoadError,
    SnapshotWriteError,
    VectorStoreError,
)

__all__ = [
    # Base
    "DocRagError",
    "RaiseSite",
    "UNEXPECTED_ERROR_CODE",
    "trace_lines",
    # Configuration
    "ConfigurationError",
    "InvalidConfigurationError",
    # Vector Store
    "VectorStoreError",
    "SnapshotLoadError",
    "SnapshotWriteError",
    "DocumentNotFoundError",
    # Embedding
    "EmbeddingError",
    "EmbeddingModelUnavailableError",
    "EmbeddingGenerationError",
    "EmbeddingCancelledError",
    # Data Ingestion
    "DataIngestionError",
    "EmptyDocumentError",
    "DataValidationError",
    # Validation
    "ValidationError",
    "EmptyQueryError",
    "EmptyMessageListError",
    "InvalidQueryOptionsError",
    # Retrieval
    "RetrievalError",
    "DimensionMismatchError",
]
