"""Tests for RAGPipeline ingestion and question answering."""

import math
import threading
from unittest.mock import MagicMock

import pytest

from docrag.core.domain import ChatMessage, ExtractedDocument, QueryOptions, QueryType
from docrag.core.domain.exceptions import InvalidQueryOptionsError
from docrag.core.services.rag_service import NO_RESULTS_MESSAGE

pytestmark = pytest.mark.unit

THREE_SENTENCES = (
    "The support desk is located at the north entrance of the main building. "
    "Visitors must register at the reception before entering the office area. "
    "Backups run every night because the storage cluster is replicated twice."
)

STEPS_TEXT = (
    "Para configurar o sistema siga o guia: 1. Abrir o painel de controle. "
    "2. Configurar a conta do usuário. 3. Salvar as alterações e reiniciar."
)


def _doc(text, filename="manual.txt"):
    return ExtractedDocument(text=text, filename=filename)


class TestIngest:
    """Ingestion: text -> chunks -> embeddings -> store."""

    def test_three_chunks_stored_with_unit_embeddings(self, keyword_pipeline):
        keyword_pipeline.chunk_size = 100
        keyword_pipeline.chunk_overlap = 0

        result = keyword_pipeline.ingest(_doc(THREE_SENTENCES), document_id="desk")

        assert result.success
        assert result.chunk_count == 3
        stored = keyword_pipeline.vector_store.get("desk")
        assert len(stored.embeddings) == 3
        for vector in stored.embeddings:
            assert math.sqrt(sum(v * v for v in vector)) == pytest.approx(1.0)

        answer = keyword_pipeline.ask(
            "Where is the support desk?", {"threshold": 0, "maxResults": 2}
        )
        assert answer.success
        assert len(answer.context) == 2
        assert answer.context[0].similarity >= answer.context[1].similarity

    def test_generates_id_and_metadata(self, pipeline, sample_text):
        result = pipeline.ingest(ExtractedDocument(text=sample_text, filename="desk.txt"))

        assert result.success
        assert result.document_id
        stored = pipeline.vector_store.get(result.document_id)
        assert stored.metadata.filename == "desk.txt"
        assert stored.metadata.mimetype == "text/plain"
        assert stored.metadata.size == len(sample_text.encode("utf-8"))
        assert result.to_dict() == {
            "success": True,
            "documentId": result.document_id,
            "filename": "desk.txt",
            "chunks": result.chunk_count,
        }

    def test_reingest_replaces_previous_version(self, pipeline, sample_text):
        first = pipeline.ingest(_doc(sample_text), document_id="doc-1")
        second = pipeline.ingest(_doc(THREE_SENTENCES), document_id="doc-1")

        stored = pipeline.vector_store.get("doc-1")
        assert first.success and second.success
        assert stored.chunk_count == second.chunk_count
        assert len(stored.embeddings) == second.chunk_count
        assert all("password" not in chunk for chunk in stored.chunks)
        assert pipeline.stats().document_count == 1

    def test_text_too_short_is_rejected(self, pipeline):
        result = pipeline.ingest(_doc("Tiny."))

        assert not result.success
        assert result.error_code == "RAG_DAT_002"
        assert pipeline.stats().document_count == 0

    def test_cancelled_ingestion_stores_nothing(self, pipeline, sample_text):
        cancel = threading.Event()
        cancel.set()

        result = pipeline.ingest(_doc(sample_text), cancel_event=cancel)

        assert not result.success
        assert result.error_code == "RAG_EMB_004"
        assert pipeline.documents() == []

    def test_unexpected_error_becomes_failure(self, pipeline, sample_text):
        pipeline.embedder = MagicMock()
        pipeline.embedder.embed_documents.side_effect = RuntimeError("boom")

        result = pipeline.ingest(_doc(sample_text))

        assert not result.success
        assert result.error == "boom"
        assert result.to_dict() == {"success": False, "error": "boom"}


class TestAnswer:
    """Query path: search -> classify -> synthesize."""

    @pytest.mark.parametrize("messages", [[{"sender": "user", "message": "   "}], []])
    def test_invalid_messages_fail_without_touching_store(self, pipeline, sample_text, messages):
        pipeline.ingest(_doc(sample_text), document_id="doc-1")
        before = pipeline.stats()

        answer = pipeline.answer(messages)

        assert not answer.success
        assert answer.error_code in ("RAG_VAL_002", "RAG_VAL_003")
        assert pipeline.stats() == before

    def test_none_messages(self, pipeline):
        answer = pipeline.answer(None)
        assert answer.to_dict()["code"] == "RAG_VAL_003"

    def test_empty_store_returns_no_results_message(self, pipeline):
        answer = pipeline.ask("What is the retention period?")

        assert answer.success
        assert answer.confidence == 0
        assert answer.suggestion == NO_RESULTS_MESSAGE
        assert answer.metadata.chunks_used == 0
        assert answer.sources == []

    def test_procedural_answer_lists_steps(self, keyword_pipeline):
        keyword_pipeline.ingest(_doc(STEPS_TEXT, filename="guia.txt"))

        answer = keyword_pipeline.ask("Como configurar o sistema?", {"threshold": 0})

        assert answer.success
        assert answer.query_type == QueryType.PROCEDURAL
        text = answer.suggestion
        first = text.index("1. Abrir o painel de controle")
        second = text.index("2. Configurar a conta do usuário")
        third = text.index("3. Salvar as alterações e reiniciar")
        assert first < second < third

    def test_only_last_message_is_used(self, keyword_pipeline):
        keyword_pipeline.ingest(_doc(STEPS_TEXT))
        messages = [
            ChatMessage(sender="user", message="Where is the office?"),
            ChatMessage(sender="bot", message="Somewhere."),
            {"sender": "user", "message": "Como configurar o sistema?"},
        ]

        answer = keyword_pipeline.answer(messages, {"threshold": 0})

        assert answer.query_type == QueryType.PROCEDURAL

    def test_sources_are_deduplicated_by_filename(self, keyword_pipeline, sample_text):
        keyword_pipeline.ingest(_doc(sample_text, filename="desk.txt"), document_id="desk-v1")
        keyword_pipeline.ingest(_doc(sample_text, filename="desk.txt"), document_id="desk-v2")
        keyword_pipeline.ingest(_doc(STEPS_TEXT, filename="guia.txt"))

        answer = keyword_pipeline.ask("Tell me everything", {"threshold": 0, "maxResults": 10})

        filenames = [source.filename for source in answer.sources]
        assert len(answer.context) == 3
        assert sorted(filenames) == ["desk.txt", "guia.txt"]
        assert answer.metadata.chunks_used == len(answer.context)
        assert answer.metadata.avg_similarity == pytest.approx(
            sum(r.similarity for r in answer.context) / len(answer.context)
        )

    def test_include_context_false_omits_context(self, keyword_pipeline):
        keyword_pipeline.ingest(_doc(STEPS_TEXT))

        answer = keyword_pipeline.ask("Como?", {"threshold": 0, "includeContext": False})
        data = answer.to_dict()

        assert "context" not in data
        assert data["queryType"] == "procedural"
        assert data["metadata"]["chunksUsed"] == 1

    def test_invalid_options_fail(self, pipeline):
        answer = pipeline.ask("What?", {"maxResults": 0})
        assert not answer.success
        assert answer.error_code == "RAG_VAL_004"

    def test_non_numeric_options_fail(self, pipeline):
        answer = pipeline.ask("What?", {"threshold": "high"})
        assert answer.error_code == "RAG_VAL_004"

    def test_string_include_context_fails(self, pipeline):
        answer = pipeline.ask("What?", {"includeContext": "false"})
        assert not answer.success
        assert answer.error_code == "RAG_VAL_004"

    def test_retrieval_error_becomes_failure(self, pipeline):
        pipeline.retriever = MagicMock()
        pipeline.retriever.search.side_effect = RuntimeError("index corrupted")

        answer = pipeline.ask("What?")

        assert not answer.success
        assert answer.error == "index corrupted"


class TestQueryOptions:
    def test_defaults(self):
        options = QueryOptions.from_dict(None)
        assert (options.max_results, options.threshold, options.include_context) == (5, 0.3, True)

    def test_from_camel_case(self):
        options = QueryOptions.from_dict(
            {"maxResults": 3, "threshold": 0.5, "includeContext": False}
        )
        assert options == QueryOptions(max_results=3, threshold=0.5, include_context=False)

    @pytest.mark.parametrize(
        "kwargs", [{"max_results": 0}, {"threshold": 1.5}, {"threshold": -0.1}]
    )
    def test_out_of_range_rejected(self, kwargs):
        with pytest.raises(InvalidQueryOptionsError):
            QueryOptions(**kwargs)

    @pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
    def test_include_context_must_be_bool(self, value):
        with pytest.raises(InvalidQueryOptionsError):
            QueryOptions.from_dict({"includeContext": value})


class TestPassthroughs:
    def test_stats_reports_embedder(self, pipeline, sample_text):
        pipeline.ingest(_doc(sample_text))
        stats = pipeline.stats()
        assert stats.document_count == 1
        assert stats.model_name == "hash-fallback"

    def test_delete_and_clear(self, pipeline, sample_text):
        pipeline.ingest(_doc(sample_text), document_id="a")
        pipeline.ingest(_doc(sample_text), document_id="b")

        assert pipeline.delete("a") is True
        assert pipeline.delete("a") is False
        pipeline.clear()
        assert pipeline.documents() == []
