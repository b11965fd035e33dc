from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from rank_bm25 import BM25Okapi

from secondbrain.core.types import SearchRecord


_WORD_RE = re.compile(r"[A-Za-z0-9_]+")


def simple_tokenize(s: str) -> List[str]:
    return [t.lower() for t in _WORD_RE.findall(s)]


def searchable_text(record: SearchRecord, search_fields: Sequence[str]) -> str:
    parts = []
    for name in search_fields:
        value = record.fields.get(name)
        if isinstance(value, str) and value.strip():
            parts.append(value)
    return " ".join(parts)


@dataclass
class BM25Index:
    records: List[SearchRecord]
    tokenized: List[List[str]]
    bm25: Optional[BM25Okapi]

    @classmethod
    def build(cls, records: Sequence[SearchRecord], search_fields: Sequence[str]) -> "BM25Index":
        records = list(records)
        tokenized = [simple_tokenize(searchable_text(r, search_fields)) for r in records]

        # BM25Okapi divides by the average document length
        if not any(tokenized):
            return cls(records=records, tokenized=tokenized, bm25=None)

        return cls(records=records, tokenized=tokenized, bm25=BM25Okapi(tokenized))

    def search(self, query: str, top_k: int = 50, mode: str = "all") -> List[Tuple[SearchRecord, float]]:
        """
        Returns (record, bm25 score) for records matching the query terms.

        mode "all" keeps records containing every query term, "any" keeps
        records containing at least one.
        """
        if self.bm25 is None or not self.records:
            return []

        q_tokens = simple_tokenize(query)
        if not q_tokens:
            return []

        wanted = set(q_tokens)
        scores = self.bm25.get_scores(q_tokens)

        matches = []
        for i, doc_tokens in enumerate(self.tokenized):
            present = wanted.intersection(doc_tokens)
            if mode == "all" and present != wanted:
                continue
            if not present:
                continue
            matches.append(i)

        ranked = sorted(matches, key=lambda i: scores[i], reverse=True)[:top_k]
        return [(self.records[i], float(scores[i])) for i in ranked]
