"""Similarity search over every stored chunk."""

import logging

import numpy as np

from ..domain import SearchResult
from ..domain.exceptions import DimensionMismatchError
from ..ports.embedding_port import EmbeddingPort
from ..ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when either vector has zero length.
    """
    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)
    if vec_a.shape != vec_b.shape:
        raise DimensionMismatchError(
            "Cannot compare vectors of different dimensions",
            context={"left": vec_a.shape[-1], "right": vec_b.shape[-1]},
        )
    magnitude = float(np.linalg.norm(vec_a)) * float(np.linalg.norm(vec_b))
    if magnitude == 0.0:
        return 0.0
    return float(np.dot(vec_a, vec_b)) / magnitude


class RetrievalService:
    """Scores every chunk of every document against a query.

    This is a full linear scan, O(total chunks) per query. Results are
    ordered by similarity descending, then document id, then chunk index,
    so equal scores always come back in the same order.
    """

    def __init__(self, vector_store: VectorStorePort, embedder: EmbeddingPort) -> None:
        """Initialize the retriever.

        Args:
            vector_store: Store holding the documents to search.
            embedder: Generator used to embed the query.
        """
        self.vector_store = vector_store
        self.embedder = embedder

    def search(self, query: str, top_k: int = 5, threshold: float = 0.3) -> list[SearchResult]:
        """Return up to ``top_k`` chunks with similarity >= ``threshold``.

        Args:
            query: Natural-language query.
            top_k: Maximum number of results.
            threshold: Minimum cosine similarity.

        Returns:
            SearchResult list sorted by similarity descending.

        Raises:
            DimensionMismatchError: If a stored embedding's size differs from
                the query embedding's.
        """
        if top_k <= 0:
            return []

        query_vector = np.asarray(self.embedder.embed_query(query), dtype=np.float64)
        query_norm = float(np.linalg.norm(query_vector))

        candidates: list[SearchResult] = []
        for document in self.vector_store.all():
            if not document.embeddings:
                continue

            matrix = np.asarray(document.embeddings, dtype=np.float64)
            if matrix.shape[1] != query_vector.shape[0]:
                raise DimensionMismatchError(
                    "Stored embeddings do not match the query embedding size",
                    context={
                        "document_id": document.id,
                        "stored": int(matrix.shape[1]),
                        "query": int(query_vector.shape[0]),
                    },
                )

            magnitudes = np.linalg.norm(matrix, axis=1) * query_norm
            dots = matrix @ query_vector
            similarities = np.divide(
                dots, magnitudes, out=np.zeros_like(dots), where=magnitudes != 0
            )

            for index, similarity in enumerate(similarities.tolist()):
                if similarity >= threshold:
                    candidates.append(
                        SearchResult(
                            document_id=document.id,
                            chunk_index=index,
                            chunk_text=document.chunks[index],
                            similarity=similarity,
                            metadata=document.metadata,
                        )
                    )

        candidates.sort(key=lambda r: (-r.similarity, r.document_id, r.chunk_index))
        results = candidates[:top_k]

        logger.info(
            f"Search matched {len(candidates)} chunks above {threshold}, returning {len(results)}"
        )
        return results
