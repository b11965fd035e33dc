from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Document:
    id: str
    text: str
    title: Optional[str] = None
    source_name: Optional[str] = None
    source_number: Optional[str] = None
    similarity: Optional[float] = None  # provider scale, not normalized


@dataclass(frozen=True)
class RetrievedChunk:
    id: str                     # "{document.id}-{ordinal}"
    text: str
    score: float
    title: Optional[str] = None
    source_name: Optional[str] = None
    source_number: Optional[str] = None


@dataclass(frozen=True)
class SearchRecord:
    record_id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    score: float = 0.0
    reranker_score: Optional[float] = None


@dataclass(frozen=True)
class RetrievedItem:
    record: SearchRecord
    source: str                 # "text" | "vector:<field>"
    rank: int                   # 1-based rank in that list
    score: Optional[float] = None


@dataclass(frozen=True)
class FusedItem:
    record: SearchRecord
    fused_score: float
    ranks: Dict[str, int] = field(default_factory=dict)
