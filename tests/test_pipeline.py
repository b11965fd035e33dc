"""Tests for RelevantChunkFinder, the chunk retrieval entry point."""
from unittest.mock import Mock

import pytest

from secondbrain.core.config import SearchOptions
from secondbrain.core.errors import RetrievalError
from secondbrain.core.types import Document
from secondbrain.retrieval.documents import DocumentSearch
from secondbrain.retrieval.pipeline import RelevantChunkFinder
from secondbrain.retrieval.search import HybridSearchService
from secondbrain.retrieval.segmenter import TextSegmenter

from fakes import FakeRecordStore


class TestRelevantChunkFinder:
    @pytest.fixture
    def source(self):
        source = Mock()
        source.find_relevant_content.return_value = [
            Document(id="d1", text="Travel expenses require approval.", similarity=0.4),
            Document(id="d2", text="Lost badges go to the security desk.", similarity=0.4),
        ]
        return source

    def test_retrieves_once_and_ranks(self, source):
        chunks = RelevantChunkFinder(source).find_relevant_chunks("lost badges")

        source.find_relevant_content.assert_called_once_with("lost badges")
        assert [c.id for c in chunks] == ["d2-1", "d1-1"]
        assert chunks[0].score == pytest.approx(1.4)

    def test_respects_max_chunks(self, source):
        chunks = RelevantChunkFinder(source).find_relevant_chunks("lost badges", max_chunks=1)
        assert len(chunks) == 1

    def test_uses_configured_segmenter(self):
        source = Mock()
        source.find_relevant_content.return_value = [Document(id="d", text="a b c d e f g")]
        chunks = RelevantChunkFinder(source, TextSegmenter(5, 2)).find_relevant_chunks("", max_chunks=10)
        assert [c.id for c in chunks] == ["d-1", "d-2", "d-3", "d-4", "d-5"]

    def test_no_documents_means_no_chunks(self):
        source = Mock()
        source.find_relevant_content.return_value = []
        assert RelevantChunkFinder(source).find_relevant_chunks("anything") == []

    def test_source_failure_becomes_retrieval_error(self):
        source = Mock()
        cause = ConnectionError("search backend unreachable")
        source.find_relevant_content.side_effect = cause

        with pytest.raises(RetrievalError, match="Failed to retrieve documents") as excinfo:
            RelevantChunkFinder(source).find_relevant_chunks("anything")
        assert excinfo.value.__cause__ is cause

    def test_end_to_end_over_search_records(self, handbook_records):
        options = SearchOptions()
        finder = RelevantChunkFinder(
            DocumentSearch(HybridSearchService(FakeRecordStore(handbook_records), options), options)
        )

        chunks = finder.find_relevant_chunks("security badge")

        assert {c.id for c in chunks} == {"hb-001-1", "sec-001-1"}
        assert all(c.text.startswith("content: ") for c in chunks)
        assert chunks[0].score >= chunks[1].score
        sources = {c.id: c.source_name for c in chunks}
        assert sources["sec-001-1"] == "Security Policy"

    def test_embedding_failure_is_a_retrieval_error(self, handbook_records):
        options = SearchOptions(vector_fields=("content_vector",))
        embedder = Mock()
        embedder.embed.side_effect = RuntimeError("embedding quota exceeded")
        search = HybridSearchService(FakeRecordStore(handbook_records), options, embedder=embedder)
        finder = RelevantChunkFinder(DocumentSearch(search, options))

        with pytest.raises(RetrievalError):
            finder.find_relevant_chunks("badge")
