from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from secondbrain.core.errors import RetrievalError
from secondbrain.core.types import Document, RetrievedChunk
from secondbrain.retrieval.ranker import DEFAULT_MAX_CHUNKS, extract_relevant_chunks
from secondbrain.retrieval.segmenter import TextSegmenter

logger = logging.getLogger(__name__)


class DocumentSource(Protocol):
    def find_relevant_content(self, query: str) -> List[Document]: ...


class RelevantChunkFinder:
    def __init__(self, source: DocumentSource, segmenter: Optional[TextSegmenter] = None):
        self.source = source
        self.segmenter = segmenter or TextSegmenter()

    def find_relevant_chunks(self, query: str, max_chunks: int = DEFAULT_MAX_CHUNKS) -> List[RetrievedChunk]:
        """
        Retrieve documents for the query and return its best chunks.

        Raises:
            RetrievalError: if the document source (search or embedding) fails.
        """
        try:
            documents = list(self.source.find_relevant_content(query))
        except Exception as e:
            raise RetrievalError(f"Failed to retrieve documents for query: {e}") from e

        chunks = extract_relevant_chunks(query, documents, max_chunks=max_chunks, segmenter=self.segmenter)
        logger.info(
            "Selected %d chunks from %d documents%s",
            len(chunks),
            len(documents),
            f" (top score: {chunks[0].score:.3f})" if chunks else "",
        )
        return chunks
