"""JSON snapshot vector store.

Keeps every document in memory and rewrites the whole store to a single JSON
file after each mutation. The file is written to a temporary sibling and
renamed into place, so a crash mid-write leaves the previous snapshot intact.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from ....core.domain import Document, StoreStats
from ....core.domain.exceptions import SnapshotLoadError, SnapshotWriteError
from ....core.ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)


class JsonVectorStoreAdapter(VectorStorePort):
    """File-backed vector store with full-snapshot write-through.

    Mutations and snapshot writes are serialized by one lock. Readers take a
    copy of the committed mapping under the lock and then work on immutable
    documents, so a query running alongside an ingestion sees either the old
    or the new version of a document, never a mix.
    """

    def __init__(self, path: str | Path, strict_persistence: bool = False) -> None:
        """Initialize the store.

        Args:
            path: Snapshot file location.
            strict_persistence: If True, a failed snapshot write rolls back the
                in-memory change and raises SnapshotWriteError. Otherwise the
                failure is logged and the in-memory store stays authoritative.
        """
        self.path = Path(path)
        self.strict_persistence = strict_persistence
        self._documents: dict[str, Document] = {}
        self._lock = threading.RLock()

    def load(self) -> int:
        """Load the snapshot from disk, starting empty on any problem.

        Returns:
            Number of documents loaded.
        """
        with self._lock:
            try:
                self._documents = self._read_snapshot()
            except SnapshotLoadError as e:
                logger.warning(f"{e.message}; starting with an empty store: {e.cause}")
                self._documents = {}
            logger.info(f"Loaded {len(self._documents)} documents from {self.path}")
            return len(self._documents)

    def _read_snapshot(self) -> dict[str, Document]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("snapshot root is not an object")
            return {doc_id: Document.from_dict(doc_id, raw) for doc_id, raw in data.items()}
        except Exception as e:
            raise SnapshotLoadError(
                "Could not read vector store snapshot",
                cause=e,
                context={"path": str(self.path)},
            ) from e

    def _write_snapshot(self) -> None:
        data = {doc_id: doc.to_dict() for doc_id, doc in self._documents.items()}
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SnapshotWriteError(
                "Failed to write vector store snapshot",
                cause=e,
                context={"path": str(self.path)},
            ) from e

    def _commit(self, previous: dict[str, Document]) -> None:
        """Persist the current mapping, rolling back to ``previous`` in strict mode."""
        try:
            self._write_snapshot()
        except SnapshotWriteError as e:
            if self.strict_persistence:
                self._documents = previous
                raise
            logger.warning(f"{e.message}; keeping change in memory only: {e.cause}")

    def add(self, document: Document) -> None:
        with self._lock:
            previous = dict(self._documents)
            self._documents[document.id] = document
            self._commit(previous)
        logger.info(f"Stored document {document.id}: {document.chunk_count} chunks")

    def get(self, document_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(document_id)

    def delete(self, document_id: str) -> bool:
        with self._lock:
            if document_id not in self._documents:
                return False
            previous = dict(self._documents)
            del self._documents[document_id]
            self._commit(previous)
        logger.info(f"Deleted document {document_id}")
        return True

    def all(self) -> list[Document]:
        with self._lock:
            return list(self._documents.values())

    def stats(self) -> StoreStats:
        documents = self.all()
        return StoreStats(
            document_count=len(documents),
            total_chunk_count=sum(doc.chunk_count for doc in documents),
        )

    def clear(self) -> None:
        with self._lock:
            previous = dict(self._documents)
            self._documents = {}
            self._commit(previous)
        logger.warning(f"Vector store cleared: {self.path}")
