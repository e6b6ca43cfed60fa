"""Use-case service for ingesting documents and answering questions."""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from ...common.exception_handler import failure_details, log_exception
from ..domain import (
    AnswerMetadata,
    ChatMessage,
    Document,
    DocumentMetadata,
    ExtractedDocument,
    IngestionResult,
    QueryAnswer,
    QueryOptions,
    SearchResult,
    SourceInfo,
    StoreStats,
)
from ..domain.exceptions import (
    DocRagError,
    EmptyDocumentError,
    EmptyMessageListError,
    EmptyQueryError,
    ValidationError,
)
from ..domain.utils import chunk_text, clean_text
from ..ports.embedding_port import EmbeddingPort
from ..ports.vector_store_port import VectorStorePort
from .query_classifier import QueryClassifier
from .response_synthesizer import ResponseSynthesizer
from .retrieval_service import RetrievalService

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = (
    "Sorry, I couldn't find relevant information to answer your question. "
    "Could you rephrase it or provide more details?"
)


class RAGPipeline:
    """Application service orchestrating chunking, embedding, retrieval and synthesis.

    Ingestion: text -> chunks -> embeddings -> vector store.
    Query: query -> similarity search -> classification -> synthesized answer.

    Both entry points return structured results; failures are reported as
    ``success=False`` values instead of propagating.
    """

    def __init__(
        self,
        vector_store: VectorStorePort,
        embedder: EmbeddingPort,
        retriever: RetrievalService,
        classifier: QueryClassifier,
        synthesizer: ResponseSynthesizer,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        min_chunk_length: int = 50,
        default_options: QueryOptions | None = None,
    ) -> None:
        self.vector_store = vector_store
        self.embedder = embedder
        self.retriever = retriever
        self.classifier = classifier
        self.synthesizer = synthesizer
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_length = min_chunk_length
        self.default_options = default_options or QueryOptions()

    # Ingestion

    def ingest(
        self,
        document: ExtractedDocument,
        document_id: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> IngestionResult:
        """Chunk, embed and store a document.

        Args:
            document: Extracted plain text with file metadata.
            document_id: Id to store under; a new UUID when omitted. An
                existing document with the same id is replaced entirely.
            cancel_event: When set, embedding stops and nothing is stored.

        Returns:
            IngestionResult with the id and chunk count, or the failure.
        """
        document_id = document_id or str(uuid.uuid4())
        try:
            chunks = chunk_text(
                clean_text(document.text),
                self.chunk_size,
                self.chunk_overlap,
                self.min_chunk_length,
            )
            if not chunks:
                raise EmptyDocumentError(
                    "Document has no text long enough to index",
                    context={"filename": document.filename},
                )

            logger.info(f"Ingesting {document.filename} as {document_id}: {len(chunks)} chunks")
            embeddings = self.embedder.embed_documents(chunks, cancel_event=cancel_event)

            stored = Document.create(
                document_id,
                chunks,
                embeddings,
                DocumentMetadata(
                    filename=document.filename,
                    mimetype=document.mimetype,
                    size=document.size or len(document.text.encode("utf-8")),
                ),
            )
            self.vector_store.add(stored)
        except DocRagError as e:
            logger.warning(f"Ingestion of {document.filename} failed [{e.error_code}]: {e.message}")
            return IngestionResult.failure(*e.failure_details(), filename=document.filename)
        except Exception as e:
            log_exception(e, log=logger, operation="ingest", filename=document.filename)
            return IngestionResult.failure(*failure_details(e), filename=document.filename)

        return IngestionResult(
            success=True,
            document_id=document_id,
            filename=document.filename,
            chunk_count=len(chunks),
        )

    # Queries

    @staticmethod
    def _last_query(messages: Sequence[ChatMessage | Mapping[str, Any]] | None) -> str:
        if not messages:
            raise EmptyMessageListError("Messages are required and must be a non-empty list")

        last = messages[-1]
        if not isinstance(last, ChatMessage):
            last = ChatMessage.from_dict(last)

        query = last.message or ""
        if not query.strip():
            raise EmptyQueryError("Query cannot be empty or whitespace only")
        return query

    @staticmethod
    def _build_sources(results: list[SearchResult]) -> list[SourceInfo]:
        sources: list[SourceInfo] = []
        for result in results:
            filename = result.metadata.filename
            if all(src.filename != filename for src in sources):
                sources.append(SourceInfo(filename=filename, similarity=result.similarity))
        return sources

    def answer(
        self,
        messages: Sequence[ChatMessage | Mapping[str, Any]] | None,
        options: QueryOptions | Mapping[str, Any] | None = None,
    ) -> QueryAnswer:
        """Answer the last message of a conversation from stored documents.

        Args:
            messages: Conversation history; only the last message is used.
            options: QueryOptions or a mapping with camelCase wire keys.

        Returns:
            QueryAnswer. Invalid input yields ``success=False``; an empty
            search yields a zero-confidence fallback message.
        """
        try:
            if options is None:
                options = self.default_options
            elif not isinstance(options, QueryOptions):
                options = QueryOptions.from_dict(options)

            query = self._last_query(messages)
            logger.info(f"Processing query: {query[:100]!r}")

            results = self.retriever.search(query, options.max_results, options.threshold)
            if not results:
                return QueryAnswer(
                    success=True,
                    suggestion=NO_RESULTS_MESSAGE,
                    confidence=0.0,
                    metadata=AnswerMetadata(chunks_used=0, avg_similarity=0.0),
                    include_context=options.include_context,
                )

            query_type = self.classifier.classify(query)
            response = self.synthesizer.synthesize(query, results, query_type)
        except ValidationError as e:
            logger.info(f"Rejected query [{e.error_code}]: {e.message}")
            return QueryAnswer.failure(*e.failure_details())
        except DocRagError as e:
            logger.warning(f"Query failed [{e.error_code}]: {e.message}")
            return QueryAnswer.failure(*e.failure_details())
        except Exception as e:
            log_exception(e, log=logger, operation="answer")
            return QueryAnswer.failure(*failure_details(e))

        avg_similarity = sum(r.similarity for r in results) / len(results)
        return QueryAnswer(
            success=True,
            suggestion=response.text,
            confidence=response.confidence,
            context=results,
            sources=self._build_sources(results),
            metadata=AnswerMetadata(chunks_used=len(results), avg_similarity=avg_similarity),
            query_type=query_type,
            include_context=options.include_context,
        )

    def ask(
        self, query: str, options: QueryOptions | Mapping[str, Any] | None = None
    ) -> QueryAnswer:
        """Answer a single question without conversation history."""
        return self.answer([ChatMessage(sender="user", message=query)], options)

    # Store passthroughs

    def documents(self) -> list[Document]:
        return self.vector_store.all()

    def delete(self, document_id: str) -> bool:
        return self.vector_store.delete(document_id)

    def stats(self) -> StoreStats:
        stats = self.vector_store.stats()
        stats.model_name = self.embedder.model_name
        return stats

    def clear(self) -> None:
        self.vector_store.clear()
