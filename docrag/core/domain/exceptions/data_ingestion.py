"""Data ingestion exceptions for docrag."""

from .base import DocRagError


class DataIngestionError(DocRagError):
    """Error while turning a document into stored chunks."""

    error_code = "RAG_DAT_001"


class EmptyDocumentError(DataIngestionError):
    """Document text produced no chunk long enough to keep."""

    error_code = "RAG_DAT_002"


class DataValidationError(DataIngestionError):
    """Ingested data failed validation."""

    error_code = "RAG_DAT_003"
