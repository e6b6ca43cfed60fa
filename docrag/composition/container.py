"""Composition root wiring adapters to the RAG pipeline.

Objects are built once by the caller (CLI, tests, an embedding host) and
passed explicitly; nothing here caches module-level instances.
"""

from __future__ import annotations

import logging

from ..adapters.outbound.embeddings.hash_adapter import HashEmbeddingAdapter
from ..adapters.outbound.embeddings.sentence_transformer_adapter import (
    SentenceTransformerEmbeddingAdapter,
)
from ..adapters.outbound.vector_store.json_store_adapter import JsonVectorStoreAdapter
from ..config.settings import Settings
from ..core.domain import QueryOptions
from ..core.domain.exceptions import EmbeddingModelUnavailableError, InvalidConfigurationError
from ..core.ports.embedding_port import EmbeddingPort
from ..core.services.query_classifier import QueryClassifier
from ..core.services.rag_service import RAGPipeline
from ..core.services.response_synthesizer import ResponseSynthesizer
from ..core.services.retrieval_service import RetrievalService

logger = logging.getLogger(__name__)


def build_embedder(settings: Settings) -> EmbeddingPort:
    """Select the embedding generator for the lifetime of the process.

    ``fallback`` always uses the hash generator, ``model`` requires the
    sentence-transformers model, and ``auto`` tries the model and degrades
    to the hash generator when it cannot be loaded.

    Raises:
        EmbeddingModelUnavailableError: In ``model`` mode when loading fails.
    """
    fallback = HashEmbeddingAdapter(settings.embedding_dimension)
    if settings.embedding_mode == "fallback":
        logger.info("Using hash fallback embeddings")
        return fallback

    adapter = SentenceTransformerEmbeddingAdapter(
        model_name=settings.embedding_model,
        dimension=settings.embedding_dimension,
        fallback=fallback,
    )
    try:
        adapter.load()
    except EmbeddingModelUnavailableError as e:
        if settings.embedding_mode == "model":
            raise
        logger.warning(f"{e.message}; using hash fallback embeddings: {e.cause}")
        return fallback

    logger.info(f"Using sentence-transformers embeddings ({settings.embedding_model})")
    return adapter


def build_vector_store(settings: Settings) -> JsonVectorStoreAdapter:
    logger.info("Initializing JsonVectorStoreAdapter (composition root)...")
    settings.ensure_directories()
    store = JsonVectorStoreAdapter(
        settings.vector_store_path,
        strict_persistence=settings.strict_persistence,
    )
    store.load()
    return store


def build_pipeline(
    settings: Settings,
    embedder: EmbeddingPort | None = None,
    vector_store: JsonVectorStoreAdapter | None = None,
) -> RAGPipeline:
    """Wire the full pipeline from settings.

    Args:
        settings: Application settings.
        embedder: Pre-built embedder (built from settings when omitted).
        vector_store: Pre-built store (built and loaded when omitted).

    Raises:
        InvalidConfigurationError: If min_chunk_length exceeds chunk_size.
    """
    if settings.min_chunk_length > settings.chunk_size:
        raise InvalidConfigurationError(
            "min_chunk_length cannot exceed chunk_size",
            context={
                "chunk_size": settings.chunk_size,
                "min_chunk_length": settings.min_chunk_length,
            },
        )

    logger.info("Initializing RAGPipeline...")
    if embedder is None:
        embedder = build_embedder(settings)
    if vector_store is None:
        vector_store = build_vector_store(settings)
    return RAGPipeline(
        vector_store=vector_store,
        embedder=embedder,
        retriever=RetrievalService(vector_store, embedder),
        classifier=QueryClassifier(),
        synthesizer=ResponseSynthesizer(settings.summary_max_length, settings.max_steps),
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        min_chunk_length=settings.min_chunk_length,
        default_options=QueryOptions(
            max_results=settings.top_k_results,
            threshold=settings.similarity_threshold,
            include_context=settings.include_context,
        ),
    )
