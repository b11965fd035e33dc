from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from secondbrain.core.config import SearchOptions
from secondbrain.core.errors import ConfigurationError
from secondbrain.retrieval.documents import content_text, fallback_id

logger = logging.getLogger(__name__)


def load_jsonl(path: str) -> List[Dict[str, Any]]:
    rows = []
    with Path(path).open("r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                rows.append(json.loads(line))
    return rows


def record_id_for(fields: Mapping[str, Any], options: SearchOptions) -> str:
    value = fields.get(options.id_field)
    if isinstance(value, str) and value.strip():
        return value
    name = fields.get("document_name")
    number = fields.get("document_number")
    return fallback_id(
        name if isinstance(name, str) else None,
        number if isinstance(number, str) else None,
        content_text(fields, options.content_fields),
    )


class RecordIndexer:
    """Writes search records, and their content embeddings per vector field, to the store."""

    def __init__(self, store, options: SearchOptions, embedder=None, batch_size: int = 64):
        if options.has_vector_query and embedder is None:
            raise ConfigurationError("vector fields are configured but no embedder was given")
        self.store = store
        self.options = options
        self.embedder = embedder
        self.batch_size = batch_size

    def index_records(self, rows: Sequence[Mapping[str, Any]]) -> List[str]:
        ids: List[str] = []
        texts: List[Optional[str]] = []

        for row in rows:
            fields = dict(row)
            rid = record_id_for(fields, self.options)
            fields.setdefault(self.options.id_field, rid)
            self.store.upsert_record(rid, fields)
            ids.append(rid)
            texts.append(content_text(fields, self.options.content_fields) or None)

        if self.options.has_vector_query:
            self._index_vectors(ids, texts)

        logger.info("Indexed %d records", len(ids))
        return ids

    def _index_vectors(self, ids: List[str], texts: List[Optional[str]]) -> None:
        pending = [(rid, t) for rid, t in zip(ids, texts) if t]
        # embeddings in batches (safe for rate limits)
        for i in range(0, len(pending), self.batch_size):
            batch = pending[i:i + self.batch_size]
            vectors = self.embedder.embed_batch([t for _, t in batch])
            for (rid, _), vector in zip(batch, vectors):
                self.store.upsert_vectors(rid, {f: vector for f in self.options.vector_fields})
