from __future__ import annotations

import base64
import hashlib
import logging
from typing import Any, Iterable, List, Mapping, Optional, Protocol

from secondbrain.core.config import SearchOptions
from secondbrain.core.types import Document, SearchRecord

logger = logging.getLogger(__name__)


class SearchService(Protocol):
    def search(self, query: str) -> Iterable[SearchRecord]: ...


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def content_text(fields: Mapping[str, Any], content_fields: Iterable[str]) -> str:
    """'name: value' lines for every content field holding a non-blank string."""
    parts = []
    for name in content_fields:
        value = fields.get(name)
        if isinstance(value, str) and value.strip():
            parts.append(f"{name}: {value}")
    return "\n".join(parts)


def fallback_id(source_name: Optional[str], source_number: Optional[str], text: str) -> str:
    digest = hashlib.sha256(f"{source_name or ''}|{source_number or ''}|{text}".encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")[:8]


def document_from_record(record: SearchRecord, options: SearchOptions) -> Optional[Document]:
    fields = record.fields if isinstance(record.fields, Mapping) else {}
    text = content_text(fields, options.content_fields)
    if not text:
        return None

    source_name = _str_or_none(fields.get("document_name"))
    source_number = _str_or_none(fields.get("document_number"))

    resolved_id = fields.get(options.id_field)
    if isinstance(resolved_id, str) and resolved_id.strip():
        doc_id = resolved_id
    else:
        doc_id = fallback_id(source_name, source_number, text)

    similarity = record.reranker_score if _is_number(record.reranker_score) else record.score

    return Document(
        id=doc_id,
        text=text,
        title=_str_or_none(fields.get(options.title_field)),
        source_name=source_name,
        source_number=source_number,
        similarity=similarity,
    )


class DocumentSearch:
    """Turns search hits into Documents; the default document source for chunk retrieval."""

    def __init__(self, search_service: SearchService, options: SearchOptions):
        self.search_service = search_service
        self.options = options

    def find_relevant_content(self, query: str) -> List[Document]:
        documents: List[Document] = []
        skipped = 0
        for record in self.search_service.search(query):
            document = document_from_record(record, self.options)
            if document is None:
                skipped += 1
                continue
            documents.append(document)

        logger.info("Found %d documents (%d without content skipped)", len(documents), skipped)
        return documents
