"""Vector Store Port Interface."""

from abc import ABC, abstractmethod

from ..domain import Document, StoreStats


class VectorStorePort(ABC):
    """Abstract interface for document vector stores."""

    @abstractmethod
    def add(self, document: Document) -> None:
        """Store a document, replacing any existing one with the same id."""
        ...

    @abstractmethod
    def get(self, document_id: str) -> Document | None:
        """Return a document, or None if it does not exist."""
        ...

    @abstractmethod
    def delete(self, document_id: str) -> bool:
        """Remove a document. Returns False if it did not exist."""
        ...

    @abstractmethod
    def all(self) -> list[Document]:
        """Return every committed document."""
        ...

    @abstractmethod
    def stats(self) -> StoreStats:
        """Return document and chunk counts."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every document."""
        ...
