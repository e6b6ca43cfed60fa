"""Document and search result models for the RAG system."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from .exceptions import DataValidationError


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string in UTC."""
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True)
class ExtractedDocument:
    """Plain text handed over by the format-extraction layer.

    Attributes:
        text: Extracted document text (not yet cleaned).
        filename: Original file name.
        mimetype: MIME type reported for the upload.
        size: Size of the original file in bytes.
    """

    text: str
    filename: str
    mimetype: str = "text/plain"
    size: int = 0


@dataclass(frozen=True)
class DocumentMetadata:
    """Metadata stored alongside a document's chunks."""

    filename: str
    mimetype: str
    size: int = 0
    uploaded_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "mimetype": self.mimetype,
            "size": self.size,
            "uploadedAt": self.uploaded_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DocumentMetadata":
        return cls(
            filename=str(data.get("filename", "")),
            mimetype=str(data.get("mimetype", "")),
            size=int(data.get("size", 0) or 0),
            uploaded_at=str(data.get("uploadedAt", "")),
        )


@dataclass(frozen=True)
class Document:
    """A stored document: its chunks, their embeddings and metadata.

    Chunks and embeddings are index-aligned: ``embeddings[i]`` is the
    vector of ``chunks[i]``. Documents are immutable; re-ingesting under the
    same id replaces the whole record.

    Attributes:
        id: Opaque document identifier.
        chunks: Passages in order of appearance in the source text.
        embeddings: One vector per chunk.
        metadata: File metadata captured at ingestion.
        added_at: ISO-8601 timestamp of when the record was stored.
    """

    id: str
    chunks: tuple[str, ...]
    embeddings: tuple[tuple[float, ...], ...]
    metadata: DocumentMetadata
    added_at: str = field(default_factory=utc_timestamp)

    def __post_init__(self) -> None:
        if len(self.chunks) != len(self.embeddings):
            raise DataValidationError(
                "Chunk and embedding counts differ",
                context={
                    "document_id": self.id,
                    "chunks": len(self.chunks),
                    "embeddings": len(self.embeddings),
                },
            )

    @classmethod
    def create(
        cls,
        document_id: str,
        chunks: list[str],
        embeddings: list[list[float]],
        metadata: DocumentMetadata,
    ) -> "Document":
        """Build a document from mutable lists, freezing them into tuples."""
        return cls(
            id=document_id,
            chunks=tuple(chunks),
            embeddings=tuple(tuple(float(v) for v in vector) for vector in embeddings),
            metadata=metadata,
        )

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    def to_dict(self) -> dict[str, Any]:
        """Snapshot representation (camelCase keys, plain lists)."""
        return {
            "id": self.id,
            "chunks": list(self.chunks),
            "embeddings": [list(vector) for vector in self.embeddings],
            "metadata": self.metadata.to_dict(),
            "addedAt": self.added_at,
        }

    @classmethod
    def from_dict(cls, document_id: str, data: dict[str, Any]) -> "Document":
        return cls(
            id=str(data.get("id", document_id)),
            chunks=tuple(str(chunk) for chunk in data["chunks"]),
            embeddings=tuple(tuple(float(v) for v in vector) for vector in data["embeddings"]),
            metadata=DocumentMetadata.from_dict(data.get("metadata") or {}),
            added_at=str(data.get("addedAt", "")),
        )


@dataclass
class SearchResult:
    """A chunk matched by similarity search.

    Attributes:
        document_id: Id of the document the chunk belongs to.
        chunk_index: Position of the chunk within its document.
        chunk_text: The chunk's text.
        similarity: Cosine similarity to the query (higher is more relevant).
        metadata: Metadata of the owning document.
    """

    document_id: str
    chunk_index: int
    chunk_text: str
    similarity: float
    metadata: DocumentMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "documentId": self.document_id,
            "chunkIndex": self.chunk_index,
            "chunkText": self.chunk_text,
            "similarity": self.similarity,
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class StoreStats:
    """Counts reported by the vector store."""

    document_count: int
    total_chunk_count: int
    model_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "documentCount": self.document_count,
            "totalChunkCount": self.total_chunk_count,
            "modelName": self.model_name,
        }
