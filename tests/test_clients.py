"""Tests for the OpenAI embedder and the Cohere reranker with mocked SDK clients."""
from types import SimpleNamespace
from unittest.mock import Mock

from secondbrain.core.types import SearchRecord
from secondbrain.embedding.openai_embedder import OpenAIEmbedder
from secondbrain.rerank.cohere_reranker import CohereReranker


class TestOpenAIEmbedder:
    def test_embed_flattens_newlines(self):
        client = Mock()
        client.embeddings.create.return_value = SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2])])
        embedder = OpenAIEmbedder(model="text-embedding-3-large", client=client)

        assert embedder.embed("line one\nline two") == [0.1, 0.2]
        client.embeddings.create.assert_called_once_with(
            model="text-embedding-3-large", input="line one line two"
        )

    def test_embed_batch(self):
        client = Mock()
        client.embeddings.create.return_value = SimpleNamespace(
            data=[SimpleNamespace(embedding=[1.0]), SimpleNamespace(embedding=[2.0])]
        )
        embedder = OpenAIEmbedder(model="m", client=client)

        assert embedder.embed_batch(["a\nb", "c"]) == [[1.0], [2.0]]
        assert client.embeddings.create.call_args.kwargs["input"] == ["a b", "c"]
        assert embedder.embed_batch([]) == []


class TestCohereReranker:
    def test_maps_results_back_to_records(self):
        records = [
            SearchRecord(record_id="r1", fields={"heading": "Travel", "content": "Approval needed."}),
            SearchRecord(record_id="r2", fields={"heading": "Badges", "content": "Security desk."}),
        ]
        client = Mock()
        client.rerank.return_value = SimpleNamespace(
            results=[SimpleNamespace(index=1, relevance_score=0.93), SimpleNamespace(index=0, relevance_score=0.12)]
        )
        reranker = CohereReranker(api_key="", model="rerank-english-v3.0", client=client)

        results = reranker.rerank("lost badge", records, fields=["heading", "content"], top_k=8)

        assert [(r.record.record_id, r.score, r.original_rank) for r in results] == [
            ("r2", 0.93, 2),
            ("r1", 0.12, 1),
        ]
        kwargs = client.rerank.call_args.kwargs
        assert kwargs["documents"] == ["Travel Approval needed.", "Badges Security desk."]
        assert kwargs["top_n"] == 2

    def test_no_records_skips_the_call(self):
        client = Mock()
        assert CohereReranker(api_key="", client=client).rerank("q", [], fields=["content"]) == []
        client.rerank.assert_not_called()
