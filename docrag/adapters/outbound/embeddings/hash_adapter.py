"""Deterministic hash-based embeddings.

Used when no sentence-transformers model is available, and per text when the
model fails. The output is a pure function of the input text, so the same
text always produces a bit-identical vector.
"""

import logging
import math
import re
import threading

from ....core.domain.exceptions import EmbeddingCancelledError
from ....core.ports.embedding_port import EmbeddingPort

logger = logging.getLogger(__name__)

EMBEDDING_DIMENSION = 384
WORD_WEIGHT = 0.1
_WHITESPACE = re.compile(r"\s+")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def rolling_hash(text: str) -> int:
    """32-bit ``hash * 31 + code`` over the UTF-16 code units of ``text``."""
    encoded = text.encode("utf-16-le", errors="surrogatepass")
    h = 0
    for i in range(0, len(encoded), 2):
        code = encoded[i] | (encoded[i + 1] << 8)
        h = _to_int32((h << 5) - h + code)
    return h


def l2_normalize(vector: list[float]) -> list[float]:
    """Scale to unit length; a zero vector is returned unchanged."""
    norm = math.sqrt(sum(v * v for v in vector))
    if norm == 0:
        return vector
    return [v / norm for v in vector]


class HashEmbeddingAdapter(EmbeddingPort):
    """Embeds text from a character hash plus a bag of hashed words."""

    model_name = "hash-fallback"

    def __init__(self, dimension: int = EMBEDDING_DIMENSION) -> None:
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.dimension = dimension

    def embed_query(self, text: str) -> list[float]:
        h = rolling_hash(text)
        vector = [math.sin(h * (i + 1) * 0.01) * 0.1 for i in range(self.dimension)]

        for word in _WHITESPACE.split(text.lower()):
            position = abs(rolling_hash(word)) % self.dimension
            vector[position] += WORD_WEIGHT

        return l2_normalize(vector)

    def embed_documents(
        self, texts: list[str], cancel_event: threading.Event | None = None
    ) -> list[list[float]]:
        embeddings = []
        for i, text in enumerate(texts):
            if cancel_event is not None and cancel_event.is_set():
                raise EmbeddingCancelledError(
                    "Embedding batch cancelled", context={"completed": i, "total": len(texts)}
                )
            embeddings.append(self.embed_query(text))
        return embeddings
