from __future__ import annotations

import re
from typing import List, Set

from secondbrain.retrieval.segmenter import normalize_text

_SPLIT_RE = re.compile(r"[^a-z0-9]+")
_MIN_TOKEN_LENGTH = 3


def tokenize(text: str) -> List[str]:
    # ASCII alphanumerics only; shorter tokens are mostly stopwords
    return [
        t for t in _SPLIT_RE.split(normalize_text(text).lower())
        if len(t) >= _MIN_TOKEN_LENGTH
    ]


def token_set(text: str) -> Set[str]:
    return set(tokenize(text))
