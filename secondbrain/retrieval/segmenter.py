from __future__ import annotations

import re
from typing import List

_WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_MAX_LENGTH = 700
DEFAULT_OVERLAP = 120

# a word-boundary back-off may not shrink a window below this share of max_length
_MIN_WINDOW_RATIO = 0.6


def normalize_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()


def split_into_chunks(
    value: str,
    max_length: int = DEFAULT_MAX_LENGTH,
    overlap: int = DEFAULT_OVERLAP,
) -> List[str]:
    """
    Split text into overlapping character windows of at most max_length.

    Windows end on the last space inside (or right after) the window when
    that space lies past 60% of max_length; otherwise they are cut hard.
    Consecutive windows share up to `overlap` characters.
    """
    text = normalize_text(value)
    if not text:
        return []

    if len(text) <= max_length:
        return [text]

    chunks: List[str] = []
    min_break = int(max_length * _MIN_WINDOW_RATIO)
    start = 0

    while start < len(text):
        end = min(start + max_length, len(text))

        if end < len(text):
            last_space = text.rfind(" ", 0, end + 1)
            if last_space > start + min_break:
                end = last_space

        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)

        if end >= len(text):
            break

        # always move forward, even when overlap >= max_length - 1
        start = max(end - overlap, start + 1)

    return chunks


class TextSegmenter:
    def __init__(self, max_length: int = DEFAULT_MAX_LENGTH, overlap: int = DEFAULT_OVERLAP):
        if max_length <= 0:
            raise ValueError("max_length must be a positive integer")
        if overlap < 0:
            raise ValueError("overlap must be >= 0")
        self.max_length = max_length
        self.overlap = overlap

    def split(self, text: str) -> List[str]:
        return split_into_chunks(text, max_length=self.max_length, overlap=self.overlap)
