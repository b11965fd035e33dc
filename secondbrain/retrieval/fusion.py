from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from secondbrain.core.types import FusedItem, RetrievedItem, SearchRecord


@dataclass(frozen=True)
class RRFWeights:
    k: int = 60
    w_text: float = 1.0
    w_vector: float = 1.0


def _rrf_contribution(rank: int, k: int) -> float:
    # rank is 1-based. Higher rank number => smaller contribution
    return 1.0 / (k + rank)


def weighted_rrf_fuse(
    ranked_lists: Sequence[Tuple[float, List[RetrievedItem]]],
    k: int = 60,
    top_n: int = 50,
) -> List[FusedItem]:
    """
    Merge ranked result lists using Weighted Reciprocal Rank Fusion (WRRF).

    WRRF(d) = sum over lists L containing d of  w_L / (k + rank_L(d))

    Each entry of ranked_lists is (weight, items). Records are identified by
    record_id; ties keep the order in which records were first seen.
    """
    seen: Dict[str, Tuple[SearchRecord, Dict[str, int]]] = {}
    scores: Dict[str, float] = {}

    for weight, items in ranked_lists:
        for item in items:
            rid = item.record.record_id
            if rid not in seen:
                seen[rid] = (item.record, {})
                scores[rid] = 0.0
            ranks = seen[rid][1]
            if item.source in ranks:
                continue
            ranks[item.source] = item.rank
            scores[rid] += weight * _rrf_contribution(item.rank, k)

    fused = [
        FusedItem(record=record, fused_score=scores[rid], ranks=ranks)
        for rid, (record, ranks) in seen.items()
    ]
    fused.sort(key=lambda x: x.fused_score, reverse=True)
    return fused[:top_n]
