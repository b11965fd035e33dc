from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple

from secondbrain.core.config import SearchOptions
from secondbrain.core.errors import ConfigurationError
from secondbrain.core.types import RetrievedItem, SearchRecord
from secondbrain.indexing.bm25_index import BM25Index
from secondbrain.retrieval.fusion import RRFWeights, weighted_rrf_fuse
from secondbrain.retrieval.segmenter import normalize_text

logger = logging.getLogger(__name__)

# candidates considered on the text side and by the semantic reranker
TEXT_CANDIDATES = 50


class RecordStore(Protocol):
    def all_records(self) -> List[SearchRecord]: ...

    def vector_search(
        self, field_name: str, query_embedding: List[float], top_k: int = 8
    ) -> List[Tuple[SearchRecord, float]]: ...


class Embedder(Protocol):
    def embed(self, text: str) -> List[float]: ...


class SemanticReranker(Protocol):
    def rerank(self, query: str, records: List[SearchRecord], fields: Sequence[str], top_k: int = 8): ...


class HybridSearchService:
    """
    Full-text (BM25) search over the configured search fields, optionally
    combined with one vector query per vector field and a semantic reranker.

    Mirrors a hosted hybrid search API: a single ranked list keeps its raw
    score, several lists are merged by weighted RRF, and semantic ranking
    attaches a reranker score and reorders the fused candidates.
    """

    def __init__(
        self,
        store: RecordStore,
        options: SearchOptions,
        embedder: Optional[Embedder] = None,
        reranker: Optional[SemanticReranker] = None,
        weights: RRFWeights = RRFWeights(),
    ):
        if options.semantic_configuration_name and reranker is None:
            raise ConfigurationError(
                f"semantic configuration '{options.semantic_configuration_name}' needs a reranker"
            )
        if options.has_vector_query and embedder is None:
            raise ConfigurationError("vector fields are configured but no embedder was given")
        self.store = store
        self.options = options
        self.embedder = embedder
        self.reranker = reranker
        self.weights = weights

    def search(self, query: str) -> Iterator[SearchRecord]:
        """Lazily yields at most options.top records. Not restartable."""
        search_text = normalize_text(query)
        has_text = len(search_text) > 0

        ranked_lists: List[Tuple[float, List[RetrievedItem]]] = []
        if has_text:
            ranked_lists.append((self.weights.w_text, self._text_hits(search_text)))
        if self.options.has_vector_query:
            ranked_lists.extend((self.weights.w_vector, hits) for hits in self._vector_hits(query))
        if not ranked_lists:
            ranked_lists.append((self.weights.w_text, self._wildcard_hits()))

        records = self._combine(ranked_lists)
        logger.debug(
            "Search matched %d candidates (text=%s, vector_fields=%d)",
            len(records), has_text, len(self.options.vector_fields),
        )

        if has_text and self.options.semantic_configuration_name:
            records = self._semantic_rerank(query, records)

        for record in records[: self.options.top]:
            yield record

    def _text_hits(self, search_text: str) -> List[RetrievedItem]:
        """The BM25 index is rebuilt from the store per query, so newly indexed records match at once."""
        index = BM25Index.build(self.store.all_records(), self.options.search_fields)
        hits = index.search(search_text, top_k=TEXT_CANDIDATES, mode=self.options.search_mode)
        return [
            RetrievedItem(record=record, source="text", rank=rank, score=score)
            for rank, (record, score) in enumerate(hits, start=1)
        ]

    def _wildcard_hits(self) -> List[RetrievedItem]:
        return [
            RetrievedItem(record=record, source="text", rank=rank, score=1.0)
            for rank, record in enumerate(self.store.all_records(), start=1)
        ]

    def _vector_hits(self, query: str) -> Iterator[List[RetrievedItem]]:
        query_embedding = self.embedder.embed(query)
        k = self.options.k_nearest_neighbors
        for field_name in self.options.vector_fields:
            results = self.store.vector_search(field_name, query_embedding, top_k=k)
            # cosine distance -> cosine similarity
            yield [
                RetrievedItem(record=record, source=f"vector:{field_name}", rank=rank, score=1.0 - dist)
                for rank, (record, dist) in enumerate(results, start=1)
            ]

    def _combine(self, ranked_lists: List[Tuple[float, List[RetrievedItem]]]) -> List[SearchRecord]:
        if len(ranked_lists) == 1:
            _, items = ranked_lists[0]
            return [_with_score(item.record, item.score or 0.0) for item in items]

        fused = weighted_rrf_fuse(ranked_lists, k=self.weights.k, top_n=TEXT_CANDIDATES)
        return [_with_score(f.record, f.fused_score) for f in fused]

    def _semantic_rerank(self, query: str, records: List[SearchRecord]) -> List[SearchRecord]:
        reranked = self.reranker.rerank(
            query,
            records[:TEXT_CANDIDATES],
            fields=self.options.search_fields,
            top_k=self.options.top,
        )
        return [
            SearchRecord(
                record_id=r.record.record_id,
                fields=r.record.fields,
                score=r.record.score,
                reranker_score=r.score,
            )
            for r in reranked
        ]


def _with_score(record: SearchRecord, score: float) -> SearchRecord:
    return SearchRecord(record_id=record.record_id, fields=record.fields, score=float(score))
