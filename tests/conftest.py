"""
Pytest configuration and shared fixtures.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from docrag.adapters.outbound.embeddings.hash_adapter import (
    HashEmbeddingAdapter,
    l2_normalize,
    rolling_hash,
)
from docrag.adapters.outbound.vector_store.json_store_adapter import JsonVectorStoreAdapter
from docrag.composition.container import build_pipeline
from docrag.config.settings import Settings


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (CLI, full wiring)")
    config.addinivalue_line("markers", "slow: Slow tests (model download)")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test data."""
    dir_path = Path(tempfile.mkdtemp(prefix="docrag_test_"))
    yield dir_path
    if dir_path.exists():
        shutil.rmtree(dir_path)


@pytest.fixture
def settings(temp_dir):
    """Settings pointing at a temporary data dir, hash embeddings only."""
    return Settings(data_dir=temp_dir, embedding_mode="fallback", _env_file=None)


@pytest.fixture
def embedder():
    return HashEmbeddingAdapter()


@pytest.fixture
def store(temp_dir):
    return JsonVectorStoreAdapter(temp_dir / "vectors.json")


@pytest.fixture
def pipeline(settings, embedder, store):
    return build_pipeline(settings, embedder=embedder, vector_store=store)


@pytest.fixture
def sample_text():
    """Three paragraphs about a support desk, long enough for several chunks."""
    return (
        "The support desk is located at the north entrance of the main building. "
        "It opens every weekday at 08:30 and closes at 17:00, except on public holidays. "
        "Visitors must register at the reception before entering the office area!\n\n"
        "To reset a password, first open the account portal in a browser. "
        "Then choose the option for forgotten credentials and confirm your e-mail address. "
        "Finally, follow the link that arrives in your inbox within five minutes.\n\n"
        "Backups run every night because the storage cluster is replicated across two sites. "
        "Restores are requested through a ticket and take up to two working days?"
    )


class KeywordEmbedder(HashEmbeddingAdapter):
    """Bag-of-words embedder with non-negative components.

    Every vector shares a constant first component, so any two texts have a
    positive cosine similarity and a zero threshold keeps every chunk.
    """

    model_name = "keyword-test"

    def embed_query(self, text):
        vector = [0.0] * self.dimension
        vector[0] = 1.0
        for word in text.lower().split():
            vector[1 + abs(rolling_hash(word.strip(".,!?:"))) % (self.dimension - 1)] += 1.0
        return l2_normalize(vector)


@pytest.fixture
def keyword_embedder():
    return KeywordEmbedder()


@pytest.fixture
def keyword_pipeline(settings, keyword_embedder, store):
    return build_pipeline(settings, embedder=keyword_embedder, vector_store=store)
