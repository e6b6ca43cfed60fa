"""Sentence-transformers embedding adapter with per-text fallback."""

import logging
import threading
from typing import TYPE_CHECKING

from ....core.domain.exceptions import (
    EmbeddingCancelledError,
    EmbeddingGenerationError,
    EmbeddingModelUnavailableError,
)
from ....core.ports.embedding_port import EmbeddingPort
from .hash_adapter import EMBEDDING_DIMENSION, HashEmbeddingAdapter

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


class SentenceTransformerEmbeddingAdapter(EmbeddingPort):
    """Wrapper for a sentence-transformers model.

    Produces mean-pooled, L2-normalized sentence embeddings. A failure on a
    single text never aborts a batch: that text is embedded by the hash
    adapter instead and a warning is logged.
    """

    MODEL_NAME = "all-MiniLM-L6-v2"

    def __init__(
        self,
        model_name: str | None = None,
        dimension: int = EMBEDDING_DIMENSION,
        fallback: HashEmbeddingAdapter | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            model_name: Name of the sentence-transformers model to use.
                        Default is all-MiniLM-L6-v2 (fast, 384 dims).
            dimension: Expected embedding dimension.
            fallback: Generator used when the model fails on a text.
        """
        self.model_name = model_name or self.MODEL_NAME
        self.dimension = dimension
        self.fallback = fallback or HashEmbeddingAdapter(dimension)
        self._model: "SentenceTransformer | None" = None

    def load(self) -> None:
        """Load the model now instead of on first use.

        Raises:
            EmbeddingModelUnavailableError: If the model cannot be loaded or
                its dimension does not match the configured one.
        """
        if self._model is not None:
            return

        logger.info(f"Loading embedding model: {self.model_name}")
        try:
            from sentence_transformers import SentenceTransformer

            model = SentenceTransformer(self.model_name)
        except Exception as e:
            raise EmbeddingModelUnavailableError(
                f"Could not load embedding model {self.model_name}",
                cause=e,
                context={"model": self.model_name},
            ) from e

        model_dimension = model.get_sentence_embedding_dimension()
        if model_dimension != self.dimension:
            raise EmbeddingModelUnavailableError(
                f"Model {self.model_name} produces {model_dimension}-dim vectors, "
                f"expected {self.dimension}",
                context={"model": self.model_name, "dimension": model_dimension},
            )

        self._model = model
        logger.info("Embedding model loaded")

    def _encode(self, text: str) -> list[float]:
        self.load()
        embedding = self._model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=True,
            show_progress_bar=False,
        )
        vector = [float(v) for v in embedding.tolist()]
        if len(vector) != self.dimension:
            raise EmbeddingGenerationError(
                "Model returned a vector of unexpected size",
                context={"expected": self.dimension, "got": len(vector)},
            )
        return vector

    def embed_query(self, text: str) -> list[float]:
        try:
            return self._encode(text)
        except Exception as e:
            logger.warning(
                f"Embedding model failed, using hash fallback for this text: {e}",
                extra={"text_length": len(text)},
            )
            return self.fallback.embed_query(text)

    def embed_documents(
        self, texts: list[str], cancel_event: threading.Event | None = None
    ) -> list[list[float]]:
        embeddings = []
        for i, text in enumerate(texts):
            if cancel_event is not None and cancel_event.is_set():
                raise EmbeddingCancelledError(
                    "Embedding batch cancelled", context={"completed": i, "total": len(texts)}
                )
            logger.debug(f"Generating embedding {i + 1}/{len(texts)}")
            embeddings.append(self.embed_query(text))
        return embeddings
