from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Set

from secondbrain.core.types import Document, RetrievedChunk
from secondbrain.retrieval.segmenter import TextSegmenter, normalize_text
from secondbrain.retrieval.tokenizer import token_set

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNKS = 8


def _similarity_of(document: Document) -> float:
    value = document.similarity
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return 0.0


def rank_chunk(chunk: str, query_tokens: Set[str], similarity: float) -> float:
    """
    Inherited document similarity plus the share of query tokens found in the chunk.

    The lexical part is in [0, 1]; the similarity keeps the search provider's
    scale, so totals are only comparable within one provider configuration.
    """
    if not query_tokens:
        return similarity

    chunk_tokens = token_set(chunk)
    overlap = sum(1 for token in query_tokens if token in chunk_tokens)
    return similarity + overlap / len(query_tokens)


def extract_relevant_chunks(
    query: str,
    documents: Iterable[Document],
    max_chunks: int = DEFAULT_MAX_CHUNKS,
    segmenter: Optional[TextSegmenter] = None,
) -> List[RetrievedChunk]:
    """
    Split documents into windows, score them against the query and keep the best.

    Windows whose normalized text is identical collapse into one entry; a later
    window only replaces it with a strictly higher score, so earlier documents
    win ties. Returns at most max_chunks chunks, highest score first.
    """
    segmenter = segmenter or TextSegmenter()
    query_tokens = token_set(query)
    unique_chunks: Dict[str, RetrievedChunk] = {}

    for document in documents:
        if not isinstance(document.text, str):
            continue
        similarity = _similarity_of(document)

        for index, chunk_text in enumerate(segmenter.split(document.text), start=1):
            key = normalize_text(chunk_text).lower()
            if not key:
                continue

            score = rank_chunk(chunk_text, query_tokens, similarity)
            existing = unique_chunks.get(key)
            if existing is None or score > existing.score:
                # re-assigning an existing key keeps its insertion position
                unique_chunks[key] = RetrievedChunk(
                    id=f"{document.id}-{index}",
                    text=chunk_text,
                    score=score,
                    title=document.title,
                    source_name=document.source_name,
                    source_number=document.source_number,
                )

    ranked = sorted(unique_chunks.values(), key=lambda c: c.score, reverse=True)
    logger.debug(
        "Ranked %d unique chunks for %d query tokens", len(ranked), len(query_tokens)
    )
    return ranked[: max(max_chunks, 0)]
