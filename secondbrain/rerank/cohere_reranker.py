from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import cohere

from secondbrain.core.types import SearchRecord
from secondbrain.indexing.bm25_index import searchable_text


@dataclass
class RerankResult:
    record: SearchRecord
    score: float
    original_rank: int


class CohereReranker:
    """Semantic ranker for the text side of a search."""

    def __init__(self, api_key: str, model: str = "rerank-english-v3.0", client=None):
        self.client = client or cohere.Client(api_key)
        self.model = model

    def rerank(
        self,
        query: str,
        records: List[SearchRecord],
        fields: Sequence[str],
        top_k: int = 8,
    ) -> List[RerankResult]:
        if not records:
            return []

        docs = [searchable_text(r, fields) for r in records]
        resp = self.client.rerank(
            model=self.model,
            query=query,
            documents=docs,
            top_n=min(top_k, len(docs)),
        )

        out: List[RerankResult] = []
        for r in resp.results:
            idx = r.index
            out.append(
                RerankResult(
                    record=records[idx],
                    score=float(r.relevance_score),
                    original_rank=idx + 1,
                )
            )
        return out
