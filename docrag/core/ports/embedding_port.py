"""Embedding Port Interface."""

import threading
from abc import ABC, abstractmethod


class EmbeddingPort(ABC):
    """Abstract interface for embedding generators.

    Implementations return unit-normalized vectors of ``dimension`` floats.
    """

    model_name: str
    dimension: int

    @abstractmethod
    def embed_query(self, text: str) -> list[float]: ...

    @abstractmethod
    def embed_documents(
        self, texts: list[str], cancel_event: threading.Event | None = None
    ) -> list[list[float]]: ...
